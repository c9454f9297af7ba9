import logging
import sys
from logging import LogRecord

from loguru import logger


class InterceptHandler(logging.Handler):
    """Bridge standard logging records (uvicorn, httpx) into Loguru."""

    def emit(self, record: LogRecord) -> None:  # pragma: no cover - bridging glue
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(*, level: str = "INFO", serialize: bool = False) -> None:
    """Install a single stdout sink and route stdlib logging through it."""

    logger.remove()
    logger.add(sys.stdout, level=level.upper(), serialize=serialize, backtrace=False, diagnose=False)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
