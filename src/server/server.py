"""Server bootstrap for the foodlab store MCP service.

Creates the FastMCP instance, builds the stores (query and archive
caches, job registry, visit counter) with explicit lifetimes, wires
them into the tools and starts the MCP server (stdio transport).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

from mcp.server.fastmcp import FastMCP

import config
from core.cache import BoundedTTLCache
from core.jobs import AsyncJobRegistry
from core.log import get_logger, setup_logging
from core.models import LogArtifact
from core.sweeper import Sweeper
from core.visits import VisitCounter
from sources.log_source import LogSource

from tools.cache_admin import register as register_cache_admin
from tools.log_export import register as register_log_export
from tools.read_logs import register as register_read_logs
from tools.visits import register as register_visits

logger = get_logger(__name__)

mcp = FastMCP("foodlab-store")


@dataclass
class AppContext:
    query_cache: BoundedTTLCache[Tuple[str, ...]]
    archive_cache: BoundedTTLCache[Tuple[str, ...]]
    registry: AsyncJobRegistry[LogArtifact]
    cache_sweeper: Sweeper
    visits: VisitCounter
    log_source: LogSource

    @property
    def caches(self) -> List[BoundedTTLCache[Any]]:
        return [self.query_cache, self.archive_cache]

    def close(self) -> None:
        self.cache_sweeper.stop()
        self.registry.shutdown(wait=True, cancel_pending=True)


def build_context(*, start_background: bool = True) -> AppContext:
    query_cache: BoundedTTLCache[Tuple[str, ...]] = BoundedTTLCache(
        max_capacity=config.QUERY_CACHE_MAX_CAPACITY,
        ttl_seconds=config.QUERY_CACHE_TTL_SECONDS,
        name="query",
    )
    archive_cache: BoundedTTLCache[Tuple[str, ...]] = BoundedTTLCache(
        max_capacity=config.ARCHIVE_CACHE_MAX_CAPACITY,
        name="archive",
    )

    registry: AsyncJobRegistry[LogArtifact] = AsyncJobRegistry(
        result_ttl_seconds=config.JOB_RESULT_TTL_SECONDS,
        sweep_interval_seconds=config.SWEEP_INTERVAL_SECONDS,
        max_workers=config.JOB_MAX_WORKERS,
        start_sweeper=start_background,
    )

    cache_sweeper = Sweeper(interval_seconds=config.SWEEP_INTERVAL_SECONDS, name="cache-sweeper")
    cache_sweeper.register("query", query_cache.purge_expired)
    cache_sweeper.register("archive", archive_cache.purge_expired)
    if start_background:
        cache_sweeper.start()

    log_source = LogSource(
        log_file=config.LOG_FILE_PATH,
        excluded_marker=config.LOG_EXCLUDED_MARKER,
        archive_cache=archive_cache,
        delay_seconds=config.LOG_EXPORT_DELAY_SECONDS,
    )

    return AppContext(
        query_cache=query_cache,
        archive_cache=archive_cache,
        registry=registry,
        cache_sweeper=cache_sweeper,
        visits=VisitCounter(),
        log_source=log_source,
    )


def register_all(server: FastMCP, context: AppContext) -> None:
    register_log_export(
        server,
        registry=context.registry,
        log_source=context.log_source,
        visits=context.visits,
    )
    register_read_logs(
        server,
        log_source=context.log_source,
        query_cache=context.query_cache,
        visits=context.visits,
    )
    register_cache_admin(server, caches=context.caches, visits=context.visits)
    register_visits(server, visits=context.visits)


def main() -> None:
    setup_logging(config.LOG_LEVEL, json_output=config.LOG_JSON, log_file=config.LOG_FILE_PATH)

    context = build_context()
    register_all(mcp, context)
    logger.info("foodlab-store starting (log file: %s)", config.LOG_FILE_PATH)
    try:
        mcp.run(transport="stdio")
    finally:
        context.close()


if __name__ == "__main__":
    main()
