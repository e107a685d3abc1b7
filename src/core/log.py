"""
Logging for the server and the stores.

JSON lines go to stderr (stdout carries the MCP stdio transport). The
application log file is plain text, one "<date> <time> <LEVEL> - <msg>"
line per record, rotated at midnight into gzip archives named
<file>.<yyyy-mm-dd>.0.gz, the layout LogSource reads back.
"""

from __future__ import annotations

import gzip
import json
import logging
import os
import shutil
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, Union

# Category of per-call input records; log exports filter it out
TOOL_INPUT_MESSAGE = "Input to the controller method"

FILE_FORMAT = "%(asctime)s %(levelname)s - %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _archive_name(default_name: str) -> str:
    # application.log.2024-01-05 -> application.log.2024-01-05.0.gz
    return f"{default_name}.0.gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)


def build_file_handler(log_file: Path) -> TimedRotatingFileHandler:
    """Daily-rotating handler whose archives are gzipped as <file>.<date>.0.gz."""
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = TimedRotatingFileHandler(path, when="midnight", encoding="utf-8")
    handler.namer = _archive_name
    handler.rotator = _gzip_rotator
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(
    level: Union[int, str] = logging.INFO,
    *,
    json_output: bool = True,
    log_file: Optional[Path] = None,
) -> None:
    root = logging.getLogger()
    if any(getattr(h, "_foodlab", False) for h in root.handlers):
        return

    stream = logging.StreamHandler(sys.stderr)
    if json_output:
        stream.setFormatter(_JsonFormatter())
    else:
        stream.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))

    handlers: list[logging.Handler] = [stream]
    if log_file is not None:
        handlers.append(build_file_handler(log_file))

    root.setLevel(level)
    for h in handlers:
        h._foodlab = True  # type: ignore[attr-defined]
        root.addHandler(h)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_tool_input(logger: logging.Logger, tool: str, **arguments: Any) -> None:
    logger.info("%s %s with arguments: %s", TOOL_INPUT_MESSAGE, tool, arguments)
