"""Access 도메인 모듈

공개 콘텐츠의 접근 판정을 담당합니다.
"""

from app.domains.access.evaluator import (
    ACCESS_RULES,
    VERDICT_STATUS,
    AccessContext,
    Verdict,
    evaluate,
    is_email_allowed,
)

__all__ = [
    "ACCESS_RULES",
    "VERDICT_STATUS",
    "AccessContext",
    "Verdict",
    "evaluate",
    "is_email_allowed",
]
