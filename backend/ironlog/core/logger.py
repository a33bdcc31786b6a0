import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> <level>{level: <7}</level> "
    "<cyan>{name}</cyan> {message}"
)


def setup_logger(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Console sink always; `log_file` adds a daily-rotated JSON-lines sink."""
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level.upper(), colorize=True)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            path,
            level=level.upper(),
            serialize=True,
            rotation="00:00",
            retention="14 days",
            enqueue=True,
        )

    logger.debug(f"IronLog logging at {level.upper()}" + (f", file {log_file}" if log_file else ""))
