"""Rate limiter singleton shared by main and the status mutation routes."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from freightdesk.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.APP_ENV != "test")

STATUS_UPDATE_LIMIT = settings.STATUS_UPDATE_RATE_LIMIT
