"""날짜/시간 유틸리티

모든 비교는 timezone-aware UTC 기준으로 수행합니다.
"""

from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """현재 UTC 시간 반환"""
    return datetime.now(UTC)


def ensure_utc(dt: datetime) -> datetime:
    """naive datetime은 UTC로 간주하여 aware로 변환"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def is_past(dt: Optional[datetime], now: datetime) -> bool:
    """dt가 설정되어 있고 now보다 이전인지 여부"""
    if dt is None:
        return False
    return ensure_utc(dt) < ensure_utc(now)


def format_iso(dt: datetime) -> str:
    """ISO 8601 형식으로 포맷 (밀리초, Z 접미사)

    Example::

        format_iso(datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=UTC))
        # "2025-01-02T03:04:05.678Z"
    """
    dt = ensure_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
