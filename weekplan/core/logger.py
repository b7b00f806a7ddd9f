"""Loguru sinks for weekplan.

The console sink writes to stderr so CLI output on stdout stays parseable.
A rotating, zipped file sink is added only when WEEKPLAN_LOG_FILE is set.
"""

import sys
from pathlib import Path

from loguru import logger

from weekplan.config.settings import Settings, normalize_log_level, settings

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> <cyan>{name}</cyan> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <7} {name}:{function}:{line} | {message}"


def setup_logger(config: Settings | None = None, *, level: str | None = None) -> list[int]:
    """Replace loguru's sinks with the ones configured for weekplan.

    Args:
        config: Settings to read sinks from (module settings when omitted)
        level: Level override, e.g. from ``--log-level``; invalid names fall back to INFO

    Returns:
        Ids of the installed sinks, console first
    """
    config = config or settings
    resolved = normalize_log_level(level, source="--log-level") if level else config.log_level

    logger.remove()
    sink_ids = [logger.add(sys.stderr, format=CONSOLE_FORMAT, level=resolved)]

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        sink_ids.append(
            logger.add(
                log_path,
                format=FILE_FORMAT,
                level=resolved,
                rotation=config.log_rotation,
                retention=config.log_retention,
                compression="zip",
                backtrace=True,
            )
        )

    logger.debug(f"Logging at {resolved} ({len(sink_ids)} sink(s), file={config.log_file or '-'})")
    return sink_ids
