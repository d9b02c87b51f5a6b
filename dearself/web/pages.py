"""
HTML pages

Guarded screens redirect to /login without a session; /login and /register
redirect to /dashboard with one.
"""

import logging
import secrets
from pathlib import Path
from typing import Dict, Tuple, Type

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from dearself.config import AppConfig
from dearself.core.session import AuthSession
from dearself.services import (
    BreathingPanel,
    DashboardPanel,
    HydrationPanel,
    JournalPanel,
    MoodPanel,
    Panel,
    StepsPanel,
    TasksPanel,
)
from dearself.utils.datetime_utils import now_in
from dearself.web.dependencies import get_app_config, get_auth_session, get_factory
from dearself.web.config import WebSettings
from dearself.store import BackendFactory
from dearself.store.base import RemoteStore

logger = logging.getLogger(__name__)

templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))

router = APIRouter(include_in_schema=False)

# page -> (panel class, title)
PAGES: Dict[str, Tuple[Type[Panel], str]] = {
    "dashboard": (DashboardPanel, "Dashboard"),
    "tasks": (TasksPanel, "Tasks"),
    "breathe": (BreathingPanel, "Breathe"),
    "hydration": (HydrationPanel, "Hydration"),
    "mood": (MoodPanel, "Mood"),
    "steps": (StepsPanel, "Steps"),
    "journal": (JournalPanel, "Journal"),
}

def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)

def _context(request: Request, session: AuthSession, **extra) -> dict:
    settings: WebSettings = request.app.state.settings
    return {
        "app_name": settings.APP_NAME,
        "debug": settings.DEBUG,
        "user": session.user,
        "pages": [(name, title) for name, (_, title) in PAGES.items()],
        **extra,
    }

def _build_panel(request: Request, page: str, session: AuthSession,
                 store: RemoteStore, config: AppConfig, page_id: str) -> Panel:
    panel_cls, _ = PAGES[page]
    clock = lambda: now_in(config.timezone)
    if panel_cls is BreathingPanel:
        timer = request.app.state.breathing.timer_for(session.user_id, page_id)
        return BreathingPanel(store, session, timer, config.goals, clock)
    return panel_cls(store, session, config.goals, clock)

@router.get("/")
def index():
    return _redirect("/dashboard")

def _auth_page(mode: str):
    def handler(request: Request, session: AuthSession = Depends(get_auth_session)):
        if session.is_authenticated:
            return _redirect("/dashboard")
        return templates.TemplateResponse(request, "login.html", _context(request, session, mode=mode))

    handler.__name__ = f"{mode}_page"
    return handler

def _panel_page(page: str):
    def handler(
        request: Request,
        session: AuthSession = Depends(get_auth_session),
        factory: BackendFactory = Depends(get_factory),
        config: AppConfig = Depends(get_app_config),
    ):
        if not session.is_authenticated:
            return _redirect("/login")

        # each rendered breathing screen drives its own timer
        page_id = secrets.token_urlsafe(8)
        store = factory.store_for(session.access_token)
        try:
            panel = _build_panel(request, page, session, store, config, page_id)
            loaded = panel.load()
            if page == "journal":
                search = request.query_params.get("search", "")
                mood = request.query_params.get("mood") or None
                view = panel.view(search=search, mood=mood)
                extra = {"search": search, "mood_filter": mood}
            elif page == "breathe":
                view = panel.view()
                extra = {"page_id": page_id}
            else:
                view = panel.view()
                extra = {}
        finally:
            factory.release(store)
        if not loaded:
            logger.warning(f"⚠️ {page} page rendered without fresh data")

        return templates.TemplateResponse(
            request,
            f"{page}.html",
            _context(request, session, page=page, title=PAGES[page][1], view=view, loaded=loaded, **extra),
        )

    handler.__name__ = f"{page}_page"
    return handler

router.add_api_route("/login", _auth_page("login"), methods=["GET"])
router.add_api_route("/register", _auth_page("register"), methods=["GET"])
for _page in PAGES:
    router.add_api_route(f"/{_page}", _panel_page(_page), methods=["GET"])
