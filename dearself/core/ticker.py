"""
Tick drivers for the breathing timer

A Ticker calls a callback once per interval until stopped. start() always
stops the previous callback first, so a ticker never has two live callbacks.
"""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]

class Ticker(ABC):
    """Recurring one-second callback"""

    def __init__(self, interval: float = 1.0):
        self.interval = interval

    @abstractmethod
    def start(self, callback: TickCallback) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @property
    @abstractmethod
    def active(self) -> bool:
        ...

class AsyncioTicker(Ticker):
    """Ticker backed by an asyncio task on the running loop"""

    def __init__(self, interval: float = 1.0):
        super().__init__(interval)
        self._task: Optional[asyncio.Task] = None

    def start(self, callback: TickCallback) -> None:
        self.stop()
        self._task = asyncio.get_running_loop().create_task(self._worker(callback))

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _worker(self, callback: TickCallback) -> None:
        try:
            while True:
                await asyncio.sleep(self.interval)
                callback()
        except asyncio.CancelledError:
            logger.debug("⏹️ Ticker cancelled")
            raise

class SchedulerTicker(Ticker):
    """Ticker backed by an APScheduler interval job

    Several tickers can share one scheduler; each owns a single job id.
    """

    def __init__(self, scheduler: AsyncIOScheduler, interval: float = 1.0,
                 job_id: Optional[str] = None):
        super().__init__(interval)
        self.scheduler = scheduler
        self.job_id = job_id or f"breathing-{uuid.uuid4().hex}"

    def start(self, callback: TickCallback) -> None:
        self.stop()

        # Coroutine jobs run on the scheduler's loop, plain callables on a thread pool
        async def _job():
            callback()

        self.scheduler.add_job(
            _job,
            IntervalTrigger(seconds=self.interval),
            id=self.job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.debug(f"⏰ Scheduled ticker job {self.job_id}")

    def stop(self) -> None:
        try:
            self.scheduler.remove_job(self.job_id)
        except JobLookupError:
            pass

    @property
    def active(self) -> bool:
        return self.scheduler.get_job(self.job_id) is not None
