"""MCP tools exposing cache diagnostics and bulk invalidation."""

from __future__ import annotations

from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from core.cache import BoundedTTLCache
from core.log import get_logger, log_tool_input
from core.visits import VisitCounter

logger = get_logger(__name__)


def register(mcp: FastMCP, *, caches: List[BoundedTTLCache[Any]], visits: VisitCounter) -> None:
    @mcp.tool(name="cache_stats")
    async def cache_stats() -> List[Dict[str, Any]]:
        """Return size, limits and hit/miss/eviction counters of every cache."""
        visits.record_visit("cache_stats")
        log_tool_input(logger, "cache_stats")
        return [c.stats() for c in caches]

    @mcp.tool(name="cache_invalidate")
    async def cache_invalidate(prefix: str) -> Dict[str, int]:
        """Drop every cached entry whose key starts with prefix (e.g. "logs:2024-01").

        Returns:
          {"<cache name>": removed_count, ...}

        Raises:
          ValidationError for an empty prefix.
        """
        visits.record_visit("cache_invalidate")
        log_tool_input(logger, "cache_invalidate", prefix=prefix)
        return {c.name: c.remove_by_prefix(prefix) for c in caches}
