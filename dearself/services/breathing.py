#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DearSelf - Breathing panel
Guided breathing screen and the record of finished sessions

The timer itself lives in core/breathing.py and core/timer.py; this panel
hosts one BreathingTimer for the signed-in user and persists finished
sessions to the breathing_sessions collection.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from dearself.config import GoalsConfig
from dearself.core.breathing import PATTERNS, get_pattern
from dearself.core.exceptions import NotFoundError, ValidationError
from dearself.core.session import AuthEvent, AuthSession
from dearself.core.ticker import Ticker
from dearself.core.timer import BreathingTimer
from dearself.models.breathing import BreathingSessionLog
from dearself.models.enums import Table
from dearself.services.base import Clock, Panel
from dearself.store.base import RemoteStore

logger = logging.getLogger(__name__)

class BreathingPanel(Panel):
    name = "breathing"

    def __init__(self, store: RemoteStore, session: AuthSession, timer: BreathingTimer,
                 goals: Optional[GoalsConfig] = None, clock: Optional[Clock] = None):
        self.timer = timer
        super().__init__(store, session, goals, clock)

    def clear(self) -> None:
        self.sessions_today: List[BreathingSessionLog] = []
        self.total_sessions = 0

    def _on_auth_change(self, event, user) -> None:
        super()._on_auth_change(event, user)
        if event is AuthEvent.SIGNED_OUT:
            self.timer.reset()

    def _load(self, user_id: str) -> None:
        rows = (
            self.store.table(Table.BREATHING_SESSIONS)
            .select("*")
            .eq("user_id", user_id)
            .eq("date", self.today())
            .order("created_at", desc=True)
            .execute()
        )
        total = (
            self.store.table(Table.BREATHING_SESSIONS)
            .select("*")
            .eq("user_id", user_id)
            .count()
        )
        self.sessions_today = [BreathingSessionLog.from_dict(row) for row in rows]
        self.total_sessions = total

    # ===== TIMER CONTROLS =====

    def select_pattern(self, name: str) -> None:
        pattern = get_pattern(name)
        if pattern is None:
            raise NotFoundError(f"Unknown breathing pattern: {name}")
        self.timer.select_pattern(pattern)

    def toggle(self) -> bool:
        return self.timer.toggle()

    def reset(self) -> None:
        self.timer.reset()

    def record(self) -> bool:
        """Persist the current session and start over"""
        session = self.timer.session
        if session.elapsed_seconds == 0:
            raise ValidationError("Nothing to record yet", "duration_seconds")

        self.timer.pause()
        row = {
            "pattern_name": session.pattern.name,
            "duration_seconds": session.elapsed_seconds,
            "cycles_completed": session.cycles_completed,
            "date": self.today(),
        }
        saved = self._mutate(
            "recording breathing session",
            lambda user_id: self.store.table(Table.BREATHING_SESSIONS).insert({**row, "user_id": user_id}),
        )
        if saved:
            self.timer.reset()
        return saved

    def close(self) -> None:
        self.timer.close()
        self.detach()

    def view(self) -> Dict[str, Any]:
        return {
            "patterns": [pattern.to_dict() for pattern in PATTERNS],
            "selected": self.timer.session.pattern.name,
            "timer": self.timer.snapshot(),
            "sessions_today": [log.to_dict() for log in self.sessions_today],
            "total_sessions": self.total_sessions,
        }

# ===== REGISTRY =====

DEFAULT_PAGE = "main"

TimerKey = Tuple[str, str]

class BreathingRegistry:
    """
    Live timers for hosts that outlive a single request

    Timers are keyed by user and open page, so two tabs never share one.
    Every lookup marks the timer as seen; evict_idle closes timers that
    nobody has looked at for a while (a closed tab stops polling).
    """

    def __init__(self, ticker_factory: Callable[[str], Ticker],
                 clock: Callable[[], float] = time.monotonic):
        self.ticker_factory = ticker_factory
        self.clock = clock
        self._timers: Dict[TimerKey, BreathingTimer] = {}
        self._last_seen: Dict[TimerKey, float] = {}
        self._lock = threading.Lock()

    def timer_for(self, user_id: str, page_id: str = DEFAULT_PAGE) -> BreathingTimer:
        key = (user_id, page_id)
        with self._lock:
            timer = self._timers.get(key)
            if timer is None:
                timer = BreathingTimer(self.ticker_factory(f"{user_id}:{page_id}"))
                self._timers[key] = timer
                logger.debug(f"Breathing timer created for {user_id} ({page_id})")
            self._last_seen[key] = self.clock()
            return timer

    def get(self, user_id: str, page_id: str = DEFAULT_PAGE) -> Optional[BreathingTimer]:
        """Existing timer or None; never creates one"""
        key = (user_id, page_id)
        with self._lock:
            timer = self._timers.get(key)
            if timer is not None:
                self._last_seen[key] = self.clock()
            return timer

    def discard(self, user_id: str, page_id: str = DEFAULT_PAGE) -> None:
        self._close(self._pop(lambda key: key == (user_id, page_id)))

    def discard_user(self, user_id: str) -> int:
        """Drop every page's timer for a user, e.g. on sign-out"""
        timers = self._pop(lambda key: key[0] == user_id)
        self._close(timers)
        return len(timers)

    def evict_idle(self, max_idle: float) -> int:
        now = self.clock()
        timers = self._pop(lambda key: now - self._last_seen[key] > max_idle)
        self._close(timers)
        if timers:
            logger.info(f"🧹 Evicted {len(timers)} idle breathing timers")
        return len(timers)

    def close_all(self) -> None:
        timers = self._pop(lambda key: True)
        self._close(timers)
        logger.info(f"🧹 Closed {len(timers)} breathing timers")

    def _pop(self, predicate: Callable[[TimerKey], bool]) -> List[BreathingTimer]:
        with self._lock:
            keys = [key for key in self._timers if predicate(key)]
            for key in keys:
                self._last_seen.pop(key, None)
            return [self._timers.pop(key) for key in keys]

    @staticmethod
    def _close(timers: List[BreathingTimer]) -> None:
        for timer in timers:
            timer.close()

    def __len__(self) -> int:
        return len(self._timers)
