"""Access 도메인 예외 및 에러 코드"""

from enum import Enum
from typing import Any, Optional

from app.core.exceptions import BaseAPIException, BadRequestException
from app.domains.access.evaluator import (
    EMAIL_NOT_ALLOWED_STATUS,
    VERDICT_STATUS,
    Verdict,
)


class AccessErrorCode(str, Enum):
    """접근 제어 에러 코드"""

    NOT_FOUND = "NOT_FOUND"
    PRIVATE = "PRIVATE"
    EXPIRED = "EXPIRED"
    PASSWORD_REQUIRED = "PASSWORD_REQUIRED"
    VIEW_LIMIT_EXCEEDED = "VIEW_LIMIT_EXCEEDED"
    EMAIL_NOT_ALLOWED = "EMAIL_NOT_ALLOWED"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    PASSWORD_MISSING = "PASSWORD_MISSING"


VERDICT_ERROR_CODES = {
    Verdict.NOT_FOUND: AccessErrorCode.NOT_FOUND,
    Verdict.PRIVATE: AccessErrorCode.PRIVATE,
    Verdict.EXPIRED: AccessErrorCode.EXPIRED,
    Verdict.PASSWORD_REQUIRED: AccessErrorCode.PASSWORD_REQUIRED,
    Verdict.VIEW_LIMIT_EXCEEDED: AccessErrorCode.VIEW_LIMIT_EXCEEDED,
}

VERDICT_MESSAGES = {
    Verdict.NOT_FOUND: "콘텐츠를 찾을 수 없습니다.",
    Verdict.PRIVATE: "비공개 콘텐츠입니다.",
    Verdict.EXPIRED: "만료된 콘텐츠입니다.",
    Verdict.PASSWORD_REQUIRED: "비밀번호가 필요합니다.",
    Verdict.VIEW_LIMIT_EXCEEDED: "더 이상 열람할 수 없는 링크입니다.",
}

EMAIL_NOT_ALLOWED_MESSAGE = "열람이 허용되지 않은 이메일입니다."


class AccessDeniedException(BaseAPIException):
    """접근 거부 (판정별 상태 코드와 에러 코드 사용)"""

    def __init__(
        self, verdict: Verdict, detail: Optional[dict[str, Any]] = None
    ):
        self.verdict = verdict
        super().__init__(
            status_code=VERDICT_STATUS[verdict],
            error_code=VERDICT_ERROR_CODES[verdict],
            message=VERDICT_MESSAGES[verdict],
            detail={"verdict": verdict.value, **(detail or {})},
        )


class EmailNotAllowedException(BaseAPIException):
    """허용 이메일 목록에 없는 경우"""

    def __init__(self, detail: Optional[dict[str, Any]] = None):
        super().__init__(
            status_code=EMAIL_NOT_ALLOWED_STATUS,
            error_code=AccessErrorCode.EMAIL_NOT_ALLOWED,
            message=EMAIL_NOT_ALLOWED_MESSAGE,
            detail=detail,
        )


class InvalidPasswordException(BaseAPIException):
    """비밀번호가 일치하지 않는 경우"""

    def __init__(self) -> None:
        super().__init__(
            status_code=VERDICT_STATUS[Verdict.PASSWORD_REQUIRED],
            error_code=AccessErrorCode.INVALID_PASSWORD,
            message="비밀번호가 올바르지 않습니다.",
        )


class PasswordMissingException(BadRequestException):
    """검증 요청에 비밀번호가 없는 경우"""

    def __init__(self) -> None:
        super().__init__(
            message="비밀번호를 입력해주세요.",
            error_code=AccessErrorCode.PASSWORD_MISSING,
        )
