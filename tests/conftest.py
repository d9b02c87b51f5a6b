from datetime import datetime, timedelta

import pytest
import pytz

from dearself.config import GoalsConfig
from dearself.core.exceptions import StoreError
from dearself.core.session import AuthSession
from dearself.core.ticker import Ticker
from dearself.store.local import LocalAuthProvider, LocalStore

class FakeTicker(Ticker):
    """Ticker driven by hand from tests"""

    def __init__(self):
        super().__init__(1.0)
        self.callback = None
        self.starts = 0

    def start(self, callback):
        self.stop()
        self.callback = callback
        self.starts += 1

    def stop(self):
        self.callback = None

    @property
    def active(self):
        return self.callback is not None

    def fire(self, times=1):
        for _ in range(times):
            if self.callback is not None:
                self.callback()

class FixedClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)

class FlakyStore(LocalStore):
    """LocalStore whose reads and writes can be switched to fail"""

    def __init__(self):
        super().__init__()
        self.fail_reads = False
        self.fail_writes = False

    def fetch(self, spec):
        if self.fail_reads:
            raise StoreError("network down")
        return super().fetch(spec)

    def count(self, spec):
        if self.fail_reads:
            raise StoreError("network down")
        return super().count(spec)

    def insert(self, table, row):
        if self.fail_writes:
            raise StoreError("network down")
        return super().insert(table, row)

    def update(self, table, row_id, fields):
        if self.fail_writes:
            raise StoreError("network down")
        return super().update(table, row_id, fields)

    def delete(self, table, row_id):
        if self.fail_writes:
            raise StoreError("network down")
        return super().delete(table, row_id)

@pytest.fixture
def ticker():
    return FakeTicker()

@pytest.fixture
def clock():
    return FixedClock(pytz.utc.localize(datetime(2025, 6, 15, 10, 0)))

@pytest.fixture
def store():
    return FlakyStore()

@pytest.fixture
def auth_provider():
    return LocalAuthProvider(iterations=1)

@pytest.fixture
def session(auth_provider):
    session = AuthSession(auth_provider)
    session.sign_up("alice@example.com", "secret123")
    return session

@pytest.fixture
def other_session(auth_provider):
    session = AuthSession(auth_provider)
    session.sign_up("bob@example.com", "secret456")
    return session

@pytest.fixture
def goals():
    return GoalsConfig()

@pytest.fixture
def make_panel(store, session, goals, clock):
    def make(panel_cls, as_session=None, **kwargs):
        return panel_cls(store, as_session or session, goals=goals, clock=clock, **kwargs)
    return make
