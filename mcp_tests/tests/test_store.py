from core.models import Entry
from core.policies import CompletionTtlPolicy, LruTtlPolicy
from core.store import EntryStore


def test_store_put_get_returns_copy(clock):
    s = EntryStore(policy=LruTtlPolicy(max_capacity=3), clock=clock)

    s.put("a", [1, 2])
    e = s.get("a")
    assert e.value == [1, 2]

    # Mutating the returned entry never touches the stored one
    e.created_at = 999.0
    assert s.get("a").created_at == 0.0


def test_store_put_evicts_oldest_and_reports_keys(clock):
    s = EntryStore(policy=LruTtlPolicy(max_capacity=2), clock=clock)

    assert s.put("a", 1) == []
    assert s.put("b", 2) == []
    assert s.put("c", 3) == ["a"]
    assert s.keys() == ["b", "c"]


def test_store_get_touches_when_policy_asks(clock):
    s = EntryStore(policy=LruTtlPolicy(max_capacity=2), clock=clock)
    s.put("a", 1)
    s.put("b", 2)

    clock.advance(5)
    assert s.get("a").last_accessed_at == 5
    assert s.keys() == ["b", "a"]


def test_store_get_does_not_touch_for_completion_policy(clock):
    s = EntryStore(policy=CompletionTtlPolicy(), clock=clock)
    s.put("a", 1)
    s.put("b", 2)

    s.get("a")
    assert s.keys() == ["a", "b"]


def test_store_lazy_expiry_counts(clock):
    s = EntryStore(policy=LruTtlPolicy(ttl_seconds=10), clock=clock)
    s.put("a", 1)

    clock.advance(10.5)
    assert s.contains("a") is False
    assert s.size() == 0
    assert s.expired_count == 1


def test_store_update_and_remove_expired(clock):
    s = EntryStore(policy=CompletionTtlPolicy(), clock=clock)
    s.put("job", "pending")

    def _complete(entry: Entry, now: float) -> None:
        entry.value = "done"
        entry.completed_at = now
        entry.expires_at = now + 60

    assert s.update("job", _complete) is True
    assert s.update("missing", _complete) is False

    clock.advance(60)
    assert s.remove_expired() == 0

    clock.advance(1)
    assert s.remove_expired() == 1
    assert len(s) == 0


def test_store_remove_by_prefix_and_clear(clock):
    s = EntryStore(policy=LruTtlPolicy(), clock=clock)
    for k in ("r:1", "r:2", "s:1"):
        s.put(k, k)

    assert s.remove_by_prefix("r:") == 2
    assert s.keys() == ["s:1"]
    assert s.remove("r:1") is False
    assert s.clear() == 1
