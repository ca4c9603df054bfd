"""Webhooks 도메인 예외 정의"""

from enum import Enum
from typing import Optional

from app.core.exceptions import BadRequestException, NotFoundException


class WebhookErrorCode(str, Enum):
    """웹훅 도메인 에러 코드"""

    INVALID_WEBHOOK_URL = "INVALID_WEBHOOK_URL"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"


class InvalidWebhookUrlException(BadRequestException):
    """허용되지 않는 웹훅 URL"""

    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            message="허용되지 않는 웹훅 URL입니다.",
            error_code=WebhookErrorCode.INVALID_WEBHOOK_URL,
            detail={"reason": reason} if reason else {},
        )


class WebhookDocumentNotFoundException(NotFoundException):
    """웹훅 대상 문서를 찾을 수 없는 경우"""

    def __init__(self, document_id: str):
        super().__init__(
            message="문서를 찾을 수 없습니다.",
            error_code=WebhookErrorCode.DOCUMENT_NOT_FOUND,
            detail={"document_id": document_id},
        )
