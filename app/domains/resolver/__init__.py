"""Resolver 도메인 모듈

공개 요청(슬러그, 짧은 링크, 커스텀 도메인, 공개 경로)을 엔티티와 판정으로 해석합니다.
"""

from app.domains.resolver.schemas import (
    AccessCredentials,
    RenderHint,
    ResolutionResult,
    RouteKind,
)
from app.domains.resolver.service import ContentResolver

__all__ = [
    "AccessCredentials",
    "ContentResolver",
    "RenderHint",
    "ResolutionResult",
    "RouteKind",
]
