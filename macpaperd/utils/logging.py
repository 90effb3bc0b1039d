"""Centralized logging configuration using Loguru.

Usage:
    from macpaperd.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if MACPAPERD_LOG_LEVEL=DEBUG

Environment Variables:
    MACPAPERD_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    MACPAPERD_LOG_JSON: 0|1 (default: 0, human-readable)
    MACPAPERD_LOG_FILE: path to an NDJSON log file (optional)
"""

import json
import os
import sys

from loguru import logger

# Remove default handler
logger.remove()

_log_level = os.environ.get("MACPAPERD_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("MACPAPERD_LOG_JSON", "0") == "1"
_log_file = os.environ.get("MACPAPERD_LOG_FILE")


def _record_to_json(record) -> str:
    """Flatten a loguru record into a single NDJSON line."""
    entry = {
        "level": record["level"].name,
        "time": record["time"].isoformat(),
        "msg": record["message"],
        "pid": record["process"].id,
        "module": record["name"],
    }
    for key, value in record["extra"].items():
        entry[key] = value
    if record["exception"]:
        entry["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }
    return json.dumps(entry, default=str)


def json_sink(message):
    """Write log records to stdout as NDJSON."""
    # Never call logger.* inside a sink
    sys.stdout.write(_record_to_json(message.record) + "\n")
    sys.stdout.flush()


_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")

if _json_mode:
    logger.add(json_sink, level=_log_level, colorize=False)
else:
    logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,
    )

if _log_file:
    def _file_sink(message):
        """Append NDJSON records to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(_record_to_json(message.record) + "\n")

    logger.add(_file_sink, level="DEBUG")


def set_level(level: str) -> None:
    """Replace the console handler with one at ``level``."""
    global _log_level

    _log_level = level.upper()
    logger.remove()
    if _json_mode:
        logger.add(json_sink, level=_log_level, colorize=False)
    else:
        logger.add(sys.stderr, level=_log_level, format=_human_format, colorize=None)
    if _log_file:
        logger.add(_file_sink, level="DEBUG")


__all__ = ["logger", "set_level", "json_sink"]
