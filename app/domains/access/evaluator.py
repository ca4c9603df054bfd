"""접근 제어 평가기

엔티티의 정책 필드와 현재 시각으로 판정(Verdict)을 계산하는 순수 함수입니다.
규칙은 순서가 있는 (조건, 판정) 목록이며 처음 일치하는 규칙이 결과가 됩니다.
구조적 사실(존재, 공개 여부)을 시간/자격 증명보다 먼저 확인합니다.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from fastapi import status

from app.core.utils.datetime import is_past
from app.domains.store.entities import ContentEntity, ShortLinkEntity


class Verdict(str, Enum):
    """접근 판정"""

    OK = "ok"
    NOT_FOUND = "not_found"
    PRIVATE = "private"
    EXPIRED = "expired"
    PASSWORD_REQUIRED = "password_required"
    VIEW_LIMIT_EXCEEDED = "view_limit_exceeded"


VERDICT_STATUS = {
    Verdict.OK: status.HTTP_200_OK,
    Verdict.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Verdict.PRIVATE: status.HTTP_403_FORBIDDEN,
    Verdict.EXPIRED: status.HTTP_410_GONE,
    Verdict.PASSWORD_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    Verdict.VIEW_LIMIT_EXCEEDED: status.HTTP_410_GONE,
}

# 허용 이메일 목록에 없는 경우
EMAIL_NOT_ALLOWED_STATUS = status.HTTP_403_FORBIDDEN


@dataclass(frozen=True)
class AccessContext:
    """현재 요청의 자격 증명 상태

    password_verified는 호출자가 bcrypt 검증을 마친 결과입니다.
    """

    password_verified: bool = False
    email: Optional[str] = None


Rule = Callable[[ContentEntity, datetime, AccessContext], bool]


def _is_missing(entity: ContentEntity, now: datetime, ctx: AccessContext) -> bool:
    return bool(getattr(entity, "is_archived", False))


def _is_private(entity: ContentEntity, now: datetime, ctx: AccessContext) -> bool:
    return not getattr(entity, "is_public", True)


def _is_expired(entity: ContentEntity, now: datetime, ctx: AccessContext) -> bool:
    return is_past(entity.expires_at, now)


def _is_over_view_limit(
    entity: ContentEntity, now: datetime, ctx: AccessContext
) -> bool:
    if not isinstance(entity, ShortLinkEntity):
        return False
    if not entity.is_active:
        return True
    return entity.max_views is not None and entity.view_count >= entity.max_views


def _needs_password(
    entity: ContentEntity, now: datetime, ctx: AccessContext
) -> bool:
    return bool(entity.password_hash) and not ctx.password_verified


ACCESS_RULES: list[tuple[Rule, Verdict]] = [
    (_is_missing, Verdict.NOT_FOUND),
    (_is_private, Verdict.PRIVATE),
    (_is_expired, Verdict.EXPIRED),
    (_is_over_view_limit, Verdict.VIEW_LIMIT_EXCEEDED),
    (_needs_password, Verdict.PASSWORD_REQUIRED),
]


def evaluate(
    entity: Optional[ContentEntity],
    now: datetime,
    context: Optional[AccessContext] = None,
) -> Verdict:
    """엔티티 접근 판정

    Args:
        entity: 조회된 엔티티 (없으면 None)
        now: 기준 시각
        context: 요청 자격 증명 (기본: 비밀번호 미검증)

    Returns:
        여섯 가지 판정 중 정확히 하나
    """
    if entity is None:
        return Verdict.NOT_FOUND

    ctx = context or AccessContext()
    for rule, verdict in ACCESS_RULES:
        if rule(entity, now, ctx):
            return verdict
    return Verdict.OK


def is_email_allowed(entity: ContentEntity, email: Optional[str]) -> bool:
    """허용 이메일 목록 검사 (대소문자 무시, 목록이 비어 있으면 통과)

    판정이 OK인 경우에만 호출자가 추가로 확인합니다.
    """
    allowed = getattr(entity, "allowed_emails", None)
    if not allowed:
        return True
    if not email:
        return False
    normalized = email.strip().lower()
    return any(normalized == item.strip().lower() for item in allowed)
