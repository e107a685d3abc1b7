import pytest

import config
from server import server as server_mod


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "LOG_FILE_PATH", tmp_path / "application.log")
    monkeypatch.setattr(config, "QUERY_CACHE_MAX_CAPACITY", 4)
    monkeypatch.setattr(config, "QUERY_CACHE_TTL_SECONDS", 120.0)
    monkeypatch.setattr(config, "ARCHIVE_CACHE_MAX_CAPACITY", 2)
    monkeypatch.setattr(config, "JOB_RESULT_TTL_SECONDS", 30.0)
    monkeypatch.setattr(config, "SWEEP_INTERVAL_SECONDS", 3600.0)


def test_build_context_uses_config(isolated_config):
    ctx = server_mod.build_context(start_background=False)
    try:
        stats = {c.name: c.stats() for c in ctx.caches}
        assert stats["query"]["max_capacity"] == 4
        assert stats["query"]["ttl_seconds"] == 120.0
        assert stats["archive"]["max_capacity"] == 2
        assert stats["archive"]["ttl_seconds"] is None
        assert ctx.cache_sweeper.running is False
    finally:
        ctx.close()

    assert ctx.registry.closed is True


def test_register_all_wires_every_tool(isolated_config, dummy_mcp):
    ctx = server_mod.build_context(start_background=False)
    try:
        server_mod.register_all(dummy_mcp, ctx)
    finally:
        ctx.close()

    assert set(dummy_mcp.tools) == {
        "request_logs_async",
        "log_task_status",
        "log_task_file",
        "read_logs",
        "cache_stats",
        "cache_invalidate",
        "visit_stats",
        "visit_count",
    }


def test_main_runs_stdio_and_closes_context(isolated_config, dummy_mcp, monkeypatch):
    built = []
    real_build = server_mod.build_context

    def fake_build(**kwargs):
        ctx = real_build(**kwargs)
        built.append(ctx)
        return ctx

    monkeypatch.setattr(server_mod, "mcp", dummy_mcp)
    monkeypatch.setattr(server_mod, "build_context", fake_build)
    monkeypatch.setattr(server_mod, "setup_logging", lambda *a, **k: None)

    server_mod.main()

    assert dummy_mcp.run_calls == [{"transport": "stdio"}]
    assert len(built) == 1
    assert built[0].registry.closed is True
    assert built[0].cache_sweeper.running is False
    assert "read_logs" in dummy_mcp.tools
