"""MCP tool that reads the log lines of one date synchronously.

Results are memoized in the query cache under "logs:<date>" so repeated
requests within the cache TTL skip the file scan.
"""

from __future__ import annotations

import asyncio
from typing import List, Tuple

from mcp.server.fastmcp import FastMCP

from core.cache import BoundedTTLCache
from core.errors import NotFoundError
from core.interfaces import LineSource
from core.keys import make_key
from core.log import get_logger, log_tool_input
from core.visits import VisitCounter
from sources.log_source import parse_log_date

logger = get_logger(__name__)


def register(
    mcp: FastMCP,
    *,
    log_source: LineSource,
    query_cache: BoundedTTLCache[Tuple[str, ...]],
    visits: VisitCounter,
) -> None:
    @mcp.tool(name="read_logs")
    async def read_logs(date: str) -> List[str]:
        """Return the log lines recorded on a date.

        Params:
          - date: day to read, formatted yyyy-MM-dd.

        Returns:
          Matching log lines in file order (archive first, then the live log).

        Raises:
          ValidationError for a malformed date; NotFoundError when nothing
          was logged that day.
        """
        visits.record_visit("read_logs")
        log_tool_input(logger, "read_logs", date=date)
        ds = parse_log_date(date).isoformat()
        key = make_key("logs", ds)

        lines = query_cache.get(key)
        if lines is None:
            # Offload blocking file IO to a thread to keep the event loop responsive
            lines = tuple(await asyncio.to_thread(log_source.lines_for, ds))
            query_cache.put(key, lines)

        if not lines:
            raise NotFoundError(f"No logs found for date: {ds}")
        return list(lines)
