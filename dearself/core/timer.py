# core/timer.py

import logging
from typing import Callable, Dict, List, Optional

from dearself.core.breathing import BreathingPattern, BreathingSession
from dearself.core.ticker import Ticker

logger = logging.getLogger(__name__)

class BreathingTimer:
    """Drives a BreathingSession from an injected Ticker

    The tick callback is live only while the session is running; pause,
    reset, pattern change and close all cancel it.
    """

    def __init__(self, ticker: Ticker, session: Optional[BreathingSession] = None):
        self.ticker = ticker
        self.session = session or BreathingSession()
        self._listeners: List[Callable[[BreathingSession], None]] = []

    def on_tick(self, listener: Callable[[BreathingSession], None]) -> Callable[[], None]:
        """Register a listener called after every tick; returns the unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> None:
        self.session.running = True
        self.ticker.start(self._tick)
        logger.info(f"▶️ Breathing started: {self.session.pattern.name}")

    def pause(self) -> None:
        self.ticker.stop()
        self.session.running = False
        logger.info("⏸️ Breathing paused")

    def toggle(self) -> bool:
        if self.session.running:
            self.pause()
        else:
            self.start()
        return self.session.running

    def reset(self) -> None:
        self.ticker.stop()
        self.session.reset()

    def select_pattern(self, pattern: BreathingPattern) -> None:
        self.ticker.stop()
        self.session.select_pattern(pattern)

    def close(self) -> None:
        """Tear down: no callback survives the owning screen"""
        self.ticker.stop()
        self.session.running = False
        self._listeners.clear()

    def snapshot(self) -> Dict:
        return self.session.snapshot()

    def _tick(self) -> None:
        if not self.session.running:
            return
        self.session.tick()
        logger.debug(
            f"tick {self.session.phase.value} {self.session.seconds_remaining}s "
            f"cycle {self.session.cycles_completed}"
        )
        for listener in list(self._listeners):
            listener(self.session)
