import logging
import sys

from freshgrupo.core.config import settings


class KeyValueFormatter(logging.Formatter):
    """Single-line key=value records for log shippers outside local development."""

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"ts={self.formatTime(record, self.datefmt)} level={record.levelname} "
            f"logger={record.name} msg={record.getMessage()!r}"
        )
        if record.exc_info:
            line += f" exc={self.formatException(record.exc_info)!r}"
        return line


def configure_logging() -> None:
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if settings.ENVIRONMENT in ("development", "local", "test"):
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    else:
        handler.setFormatter(KeyValueFormatter())

    # Avoid duplicate handlers when the app is reloaded
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
