"""File logging helper shared by every module."""

from logging import Formatter, Handler, Logger
from logging.handlers import RotatingFileHandler

from pythonjsonlogger.json import JsonFormatter

from blog_api.configs.settings import settings

LOG_FILE_NAME = "app.log"
MAX_LOG_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5

_file_handler: Handler | None = None


def _get_file_handler() -> Handler:
    global _file_handler  # noqa: PLW0603
    if _file_handler is None:
        settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            settings.LOG_DIR / LOG_FILE_NAME,
            maxBytes=MAX_LOG_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        formatter: Formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        handler.setFormatter(formatter)
        _file_handler = handler
    return _file_handler


def file_logger(logger: Logger) -> Logger:
    """
    Attach the shared rotating JSON file handler to a logger.

    The handler is only attached when ``LOG_TO_FILE`` is enabled, so the
    call is a no-op in tests and local runs.

    Args:
        logger: Logger to decorate.

    Returns:
        Logger: The same logger, for chaining at module import.
    """
    if settings.LOG_TO_FILE:
        handler = _get_file_handler()
        if handler not in logger.handlers:
            logger.addHandler(handler)
    return logger
