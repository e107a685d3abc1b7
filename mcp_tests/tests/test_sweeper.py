import logging

import pytest

from core.errors import ValidationError
from core.sweeper import Sweeper


def test_sweeper_run_once_collects_counts():
    s = Sweeper(interval_seconds=60)
    s.register("a", lambda: 2)
    s.register("b", lambda: 0)

    assert s.run_once() == {"a": 2, "b": 0}


def test_sweeper_failing_target_does_not_stop_others(caplog):
    s = Sweeper(interval_seconds=60, name="test-sweeper")

    def broken():
        raise RuntimeError("boom")

    s.register("broken", broken)
    s.register("ok", lambda: 1)

    with caplog.at_level(logging.ERROR):
        assert s.run_once() == {"ok": 1}
    assert "sweep target broken failed" in caplog.text


def test_sweeper_start_stop_is_idempotent():
    s = Sweeper(interval_seconds=3600)
    assert s.running is False

    s.start()
    s.start()
    assert s.running is True

    s.stop()
    s.stop()
    assert s.running is False


def test_sweeper_rejects_non_positive_interval():
    with pytest.raises(ValidationError):
        Sweeper(interval_seconds=0)


def test_sweeper_fires_on_its_interval(wait_until):
    calls = []
    s = Sweeper(interval_seconds=0.2)
    s.register("counting", lambda: calls.append(1) or 0)

    s.start()
    try:
        wait_until(lambda: len(calls) >= 2, timeout=5.0)
    finally:
        s.stop()
