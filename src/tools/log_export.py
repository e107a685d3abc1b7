"""MCP tools for asynchronous log exports.

Registers 'request_logs_async' (submit), 'log_task_status' (poll) and
'log_task_file' (fetch the produced artifact). Exports run on the job
registry's worker pool; these tools never wait for them.
"""

from __future__ import annotations

import functools
from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from core.jobs import AsyncJobRegistry
from core.log import get_logger, log_tool_input
from core.models import LogArtifact
from core.visits import VisitCounter
from sources.log_source import LogSource, parse_log_date

PENDING_EXPIRY = "will be defined"

logger = get_logger(__name__)


def register(
    mcp: FastMCP,
    *,
    registry: AsyncJobRegistry[LogArtifact],
    log_source: LogSource,
    visits: VisitCounter,
) -> None:
    @mcp.tool(name="request_logs_async")
    async def request_logs_async(date: str) -> Dict[str, str]:
        """Start building the log file for a date and return its task id.

        Params:
          - date: day to export, formatted yyyy-MM-dd.

        Returns:
          {"task_id": "<id>"}; poll log_task_status with it.

        Raises:
          ValidationError for a malformed date; RegistryClosedError when the
          server is shutting down.
        """
        visits.record_visit("request_logs_async")
        log_tool_input(logger, "request_logs_async", date=date)
        ds = parse_log_date(date).isoformat()

        producer = functools.partial(log_source.export, ds, cancel_event=registry.cancel_event)
        return {"task_id": registry.submit(producer)}

    @mcp.tool(name="log_task_status")
    async def log_task_status(task_id: str) -> Dict[str, Any]:
        """Report whether an export finished and how long its file is kept.

        Returns:
          {"task_id", "state", "is_completed", "expires_in"} where expires_in
          is seconds until the result is dropped, or "will be defined" while
          the export is still running.

        Raises:
          NotFoundError if the task is unknown or its result already expired.
        """
        visits.record_visit("log_task_status")
        log_tool_input(logger, "log_task_status", task_id=task_id)
        status = registry.status(task_id)
        return {
            "task_id": status.job_id,
            "state": status.state.value,
            "is_completed": status.completed,
            "expires_in": status.expires_in_seconds if status.completed else PENDING_EXPIRY,
        }

    @mcp.tool(name="log_task_file")
    async def log_task_file(task_id: str) -> Dict[str, Any]:
        """Return the exported log file of a finished task.

        Returns:
          {"filename", "length", "content"} with the UTF-8 log text.

        Raises:
          NotFoundError (unknown/expired task), NotReadyError (still running),
          EmptyResultError (no log lines for that date), ProducerFailureError
          (the export failed or was cancelled).
        """
        visits.record_visit("log_task_file")
        log_tool_input(logger, "log_task_file", task_id=task_id)
        artifact = registry.result(task_id)
        return {
            "filename": artifact.filename,
            "length": artifact.length,
            "content": artifact.content.decode("utf-8"),
        }
