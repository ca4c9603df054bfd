"""유틸리티 모듈"""

from app.core.utils.datetime import (
    UTC,
    ensure_utc,
    format_iso,
    is_past,
    now_utc,
)
from app.core.utils.pagination import PageParams

__all__ = [
    # datetime
    "UTC",
    "now_utc",
    "ensure_utc",
    "is_past",
    "format_iso",
    # pagination
    "PageParams",
]
