"""미들웨어 모듈"""

from app.core.middlewares.context import get_request_id, set_request_id
from app.core.middlewares.custom_domain import (
    CustomDomainMiddleware,
    is_custom_domain,
    normalize_host,
)
from app.core.middlewares.logging import LoggingMiddleware
from app.core.middlewares.security import SecurityHeadersMiddleware

__all__ = [
    "LoggingMiddleware",
    "SecurityHeadersMiddleware",
    "CustomDomainMiddleware",
    "is_custom_domain",
    "normalize_host",
    "get_request_id",
    "set_request_id",
]
