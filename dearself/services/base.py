#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Panel base
Shared load/mutate cycle for the feature panels

Every panel follows the same pattern:
- load() reads rows scoped to the signed-in user and fills the view state
- mutations validate first, write, then load() again
- a store failure is logged and leaves the previous view state untouched
"""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from dearself.config import GoalsConfig
from dearself.core.exceptions import ConfirmationRequired, NotFoundError, StoreError
from dearself.core.session import AuthEvent, AuthSession, AuthUser
from dearself.models.enums import Table
from dearself.store.base import RemoteStore
from dearself.utils.datetime_utils import DEFAULT_TZ, date_str, now_in, week_ago

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

class Panel(ABC):
    """One feature screen: view state plus request/response data access"""

    name = "panel"

    def __init__(self, store: RemoteStore, session: AuthSession,
                 goals: Optional[GoalsConfig] = None, clock: Optional[Clock] = None):
        self.store = store
        self.session = session
        self.goals = goals or GoalsConfig()
        self.clock = clock or (lambda: now_in(DEFAULT_TZ))
        self.loaded = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.clear()

    # ===== DATES =====

    def today_date(self) -> date:
        return self.clock().date()

    def today(self) -> str:
        return date_str(self.today_date())

    def week_start(self) -> str:
        return date_str(week_ago(self.today_date()))

    def current_hour(self) -> int:
        return self.clock().hour

    # ===== SESSION =====

    def attach(self) -> None:
        """Follow sign-in/sign-out transitions of the session"""
        if self._unsubscribe is None:
            self._unsubscribe = self.session.subscribe(self._on_auth_change)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_auth_change(self, event: AuthEvent, user: Optional[AuthUser]) -> None:
        if event is AuthEvent.SIGNED_OUT:
            self.clear()
            self.loaded = False

    # ===== DATA =====

    def load(self) -> bool:
        """Refresh view state from the store; False when nothing was loaded"""
        if not self.session.is_authenticated:
            return False
        try:
            self._load(self.session.user_id)
        except StoreError as e:
            logger.error(f"❌ Error loading {self.name}: {e}")
            return False
        self.loaded = True
        return True

    refresh = load

    def _mutate(self, description: str, action: Callable[[str], Any]) -> bool:
        """Run one write for the current user, then reload"""
        user = self.session.require_user()
        try:
            action(user.id)
        except StoreError as e:
            logger.error(f"❌ Error {description}: {e}")
            return False
        logger.debug(f"{self.name}: {description} done")
        self.load()
        return True

    def _require_owned(self, table: Table, row_id: str, user_id: str) -> Dict[str, Any]:
        """The row must exist and belong to the user"""
        row = self.store.table(table).select("*").eq("id", row_id).eq("user_id", user_id).first()
        if row is None:
            raise NotFoundError(f"{table.value} row {row_id} not found")
        return row

    @staticmethod
    def _require_confirmation(confirmed: bool, what: str) -> None:
        if not confirmed:
            raise ConfirmationRequired(f"Deleting {what} needs explicit confirmation")

    @abstractmethod
    def clear(self) -> None:
        """Reset view state to empty"""

    @abstractmethod
    def _load(self, user_id: str) -> None:
        """Query everything first, assign view state last"""

    @abstractmethod
    def view(self) -> Dict[str, Any]:
        ...
