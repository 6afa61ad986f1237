"""Logging setup: JSON lines in production, plain text elsewhere."""
import logging
import sys

from pythonjsonlogger import jsonlogger

from freightdesk.core.config import settings
from freightdesk.middleware.request_id import RequestIdLogFilter


def setup_logging() -> None:
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if settings.APP_ENV == "production":
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(request_id)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        ))
        handler.addFilter(RequestIdLogFilter())
        logging.root.handlers = [handler]
        logging.root.setLevel(level)
    else:
        logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    # SQL echo is noisy next to the dashboard logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
