"""MCP tools reporting how often each tool was called."""

from __future__ import annotations

from typing import Dict

from mcp.server.fastmcp import FastMCP

from core.log import get_logger, log_tool_input
from core.visits import VisitCounter

logger = get_logger(__name__)


def register(mcp: FastMCP, *, visits: VisitCounter) -> None:
    @mcp.tool(name="visit_stats")
    async def visit_stats() -> Dict[str, int]:
        """Return call counts for every tool that has been used."""
        visits.record_visit("visit_stats")
        log_tool_input(logger, "visit_stats")
        return visits.all_stats()

    @mcp.tool(name="visit_count")
    async def visit_count(name: str) -> int:
        """Return how many times the named tool was called (0 if never)."""
        visits.record_visit("visit_count")
        log_tool_input(logger, "visit_count", name=name)
        return visits.visit_count(name)
