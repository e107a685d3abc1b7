import time

import pytest


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}
        self.run_calls = []

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator

    def run(self, *, transport: str):
        self.run_calls.append({"transport": transport})


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _wait_until(predicate, timeout: float = 5.0) -> None:
    # Poll a condition set by a worker thread
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        time.sleep(0.01)


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wait_until():
    return _wait_until
