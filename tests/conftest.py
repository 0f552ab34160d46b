"""
Shared Test Fixtures

Fake rate providers, an in-memory key-value store, a recording UI view and
a controllable clock used across the test modules.

Files that USE this module:
- pytest (fixtures are injected into tests/test_*.py)

Files that this module USES:
- fxwidget.adapters.persistence.file_store (MemoryStore)
- fxwidget.domain.errors (NetworkError for failing fakes)
"""
import asyncio  # Async primitives for hanging/slow fakes

import pytest  # Testing framework for writing and running tests

from fxwidget.adapters.persistence.file_store import MemoryStore
from fxwidget.domain.errors import NetworkError

USD_EUR_RATES = {"USD": 1.0, "EUR": 0.85, "JPY": 110.5, "GBP": 0.73}


class FakeProvider:
    """
    Provider stand-in with a switchable behavior.

    behavior:
        dict       -> returned as the rate map
        Exception  -> raised
        "hang"     -> never settles until cancelled
        "slow"     -> waits for release() before returning `rates`
    """

    def __init__(self, name, behavior, rates=None):
        self.name = name
        self.behavior = behavior
        self.rates = rates or dict(USD_EUR_RATES)
        self.calls = 0
        self.cancelled = False
        self._released = False
        self._release_event = None

    def release(self):
        self._released = True
        if self._release_event is not None:
            self._release_event.set()

    async def fetch(self, base="USD"):
        self.calls += 1
        behavior = self.behavior
        try:
            if behavior == "hang":
                await asyncio.sleep(3600)
            if behavior == "slow":
                if not self._released:
                    self._release_event = asyncio.Event()
                    await self._release_event.wait()
                return dict(self.rates)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if isinstance(behavior, BaseException):
            raise behavior
        return dict(behavior)


class RecordingView:
    """UI collaborator that records everything it receives."""

    def __init__(self):
        self.rendered = []
        self.warnings = []
        self.notices = []

    def render(self, view):
        self.rendered.append(view)

    def warn(self, message):
        self.warnings.append(message)

    def notify(self, message):
        self.notices.append(message)

    @property
    def last(self):
        return self.rendered[-1] if self.rendered else None


class FakeClock:
    """Epoch-milliseconds clock that only moves when told to."""

    def __init__(self, start=1_700_000_000_000):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider_factory():
    return FakeProvider


@pytest.fixture
def failing():
    """Factory for a provider that raises NetworkError."""
    def make(name):
        return FakeProvider(name, NetworkError(f"{name} unreachable", name))
    return make
