import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from dearself.core.exceptions import AuthError
from dearself.core.session import AuthSession
from dearself.services import BreathingRegistry
from dearself.store import BackendFactory
from dearself.web.config import WebSettings
from dearself.web.dependencies import (
    get_auth_session,
    get_breathing_registry,
    get_factory,
    get_web_settings,
    require_session,
)
from dearself.web.schemas import AuthResult, AuthUserOut, Credentials

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

def set_session_cookie(response: Response, token: str, settings: WebSettings) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE,
        token,
        max_age=settings.SESSION_TIMEOUT,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
    )

def clear_session_cookie(response: Response, settings: WebSettings) -> None:
    response.delete_cookie(settings.SESSION_COOKIE)

@router.post("/login", response_model=AuthResult)
def login(
    payload: Credentials,
    response: Response,
    factory: BackendFactory = Depends(get_factory),
    settings: WebSettings = Depends(get_web_settings),
):
    """Sign in with email and password; the token is also set as a cookie"""
    session = AuthSession(factory.auth_provider())
    user = session.sign_in(payload.email, payload.password)
    set_session_cookie(response, session.access_token, settings)
    return AuthResult(user=AuthUserOut(**user.to_dict()), access_token=session.access_token)

@router.post("/register", response_model=AuthResult, status_code=status.HTTP_201_CREATED)
def register(
    payload: Credentials,
    response: Response,
    factory: BackendFactory = Depends(get_factory),
    settings: WebSettings = Depends(get_web_settings),
):
    """Create an account; confirmation_required when no session was issued"""
    session = AuthSession(factory.auth_provider())
    try:
        user = session.sign_up(payload.email, payload.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if session.access_token:
        set_session_cookie(response, session.access_token, settings)
    return AuthResult(
        user=AuthUserOut(**user.to_dict()),
        access_token=session.access_token,
        confirmation_required=session.access_token is None,
    )

@router.post("/logout")
def logout(
    response: Response,
    session: AuthSession = Depends(get_auth_session),
    registry: BreathingRegistry = Depends(get_breathing_registry),
    settings: WebSettings = Depends(get_web_settings),
):
    user_id = session.user_id
    session.sign_out()
    if user_id:
        registry.discard_user(user_id)
        logger.info(f"👋 Signed out: {user_id}")
    clear_session_cookie(response, settings)
    return {"ok": True}

@router.get("/me", response_model=AuthUserOut)
def me(session: AuthSession = Depends(require_session)):
    return AuthUserOut(**session.user.to_dict())
