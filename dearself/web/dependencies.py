#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Web dependencies
Providers for FastAPI: configuration, auth session, store and panels

Every request builds its own AuthSession from the access token (cookie or
Bearer header) and panels over a store scoped to that token. Breathing
timers outlive requests and come from the registry on app.state.
"""

import logging
from typing import Callable, Iterator, Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dearself.config import AppConfig
from dearself.core.session import AuthSession
from dearself.services import (
    BreathingPanel,
    BreathingRegistry,
    DashboardPanel,
    HydrationPanel,
    JournalPanel,
    MoodPanel,
    Panel,
    StepsPanel,
    TasksPanel,
)
from dearself.services.base import Clock
from dearself.services.breathing import DEFAULT_PAGE
from dearself.store import BackendFactory
from dearself.store.base import RemoteStore
from dearself.utils.datetime_utils import now_in
from dearself.web.config import WebSettings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# ===== APPLICATION STATE =====

def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config

def get_web_settings(request: Request) -> WebSettings:
    return request.app.state.settings

def get_factory(request: Request) -> BackendFactory:
    return request.app.state.factory

def get_breathing_registry(request: Request) -> BreathingRegistry:
    return request.app.state.breathing

def get_clock(config: AppConfig = Depends(get_app_config)) -> Clock:
    return lambda: now_in(config.timezone)

# ===== AUTH =====

def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: WebSettings = Depends(get_web_settings),
) -> Optional[str]:
    """Bearer header wins over the session cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE)

def get_auth_session(
    token: Optional[str] = Depends(get_access_token),
    factory: BackendFactory = Depends(get_factory),
) -> AuthSession:
    session = AuthSession(factory.auth_provider())
    session.restore(token)
    return session

def require_session(session: AuthSession = Depends(get_auth_session)) -> AuthSession:
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session

def get_store(
    session: AuthSession = Depends(require_session),
    factory: BackendFactory = Depends(get_factory),
) -> Iterator[RemoteStore]:
    store = factory.store_for(session.access_token)
    try:
        yield store
    finally:
        factory.release(store)

# ===== PANELS =====

def _panel_provider(panel_cls) -> Callable[..., Panel]:
    """Dependency that builds and loads one panel for the current user"""

    def provider(
        session: AuthSession = Depends(require_session),
        store: RemoteStore = Depends(get_store),
        config: AppConfig = Depends(get_app_config),
        clock: Clock = Depends(get_clock),
    ) -> Panel:
        panel = panel_cls(store, session, config.goals, clock)
        panel.load()
        return panel

    provider.__name__ = f"get_{panel_cls.name}_panel"
    return provider

get_tasks_panel = _panel_provider(TasksPanel)
get_hydration_panel = _panel_provider(HydrationPanel)
get_mood_panel = _panel_provider(MoodPanel)
get_steps_panel = _panel_provider(StepsPanel)
get_journal_panel = _panel_provider(JournalPanel)
get_dashboard_panel = _panel_provider(DashboardPanel)

PAGE_ID_PATTERN = r"^[A-Za-z0-9_-]{1,32}$"

def get_page_id(page: str = Query(DEFAULT_PAGE, pattern=PAGE_ID_PATTERN)) -> str:
    """Identifies one open breathing screen"""
    return page

def get_breathing_panel(
    session: AuthSession = Depends(require_session),
    store: RemoteStore = Depends(get_store),
    config: AppConfig = Depends(get_app_config),
    clock: Clock = Depends(get_clock),
    registry: BreathingRegistry = Depends(get_breathing_registry),
    page_id: str = Depends(get_page_id),
) -> BreathingPanel:
    timer = registry.timer_for(session.user_id, page_id)
    panel = BreathingPanel(store, session, timer, config.goals, clock)
    panel.load()
    return panel
