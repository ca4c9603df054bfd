"""예외 단위 테스트"""

import pytest
from fastapi import Request

from app.core.exceptions import (
    BadRequestException,
    ErrorCode,
    InternalServerException,
    NotFoundException,
    StorageException,
    UnauthorizedException,
    UpstreamUnavailableException,
    base_exception_handler,
    build_error_content,
)
from app.domains.access.evaluator import Verdict
from app.domains.access.exceptions import (
    AccessDeniedException,
    AccessErrorCode,
    EmailNotAllowedException,
    InvalidPasswordException,
    PasswordMissingException,
)
from app.domains.webhooks.exceptions import (
    InvalidWebhookUrlException,
    WebhookDocumentNotFoundException,
)


class TestGlobalExceptions:
    """전역 예외 테스트"""

    def test_not_found_exception(self):
        """NotFoundException 기본값"""
        exc = NotFoundException()

        assert exc.status_code == 404
        assert exc.error_code == ErrorCode.NOT_FOUND
        assert exc.message == "리소스를 찾을 수 없습니다."

    def test_not_found_exception_custom(self):
        """NotFoundException 커스텀 메시지"""
        exc = NotFoundException(
            message="문서를 찾을 수 없습니다.",
            detail={"slug": "missing"},
        )

        assert exc.message == "문서를 찾을 수 없습니다."
        assert exc.detail_info == {"slug": "missing"}

    def test_bad_request_exception(self):
        """BadRequestException"""
        exc = BadRequestException(message="잘못된 입력입니다.")

        assert exc.status_code == 400
        assert exc.error_code == ErrorCode.BAD_REQUEST

    def test_unauthorized_exception(self):
        """UnauthorizedException"""
        exc = UnauthorizedException()

        assert exc.status_code == 401
        assert exc.error_code == ErrorCode.UNAUTHORIZED

    def test_internal_server_exception(self):
        """InternalServerException"""
        exc = InternalServerException()

        assert exc.status_code == 500
        assert exc.error_code == ErrorCode.INTERNAL_ERROR

    def test_upstream_unavailable_exception(self):
        """저장소 쓰기 실패는 500 STORE_UNAVAILABLE"""
        exc = UpstreamUnavailableException(detail={"operation": "insert"})

        assert exc.status_code == 500
        assert exc.error_code == ErrorCode.STORE_UNAVAILABLE
        assert exc.detail_info == {"operation": "insert"}

    def test_storage_exception(self):
        """StorageException 에러 코드 지정"""
        exc = StorageException(error_code=ErrorCode.OBJECT_NOT_FOUND)

        assert exc.status_code == 500
        assert exc.error_code == ErrorCode.OBJECT_NOT_FOUND


class TestAccessExceptions:
    """접근 제어 예외 테스트"""

    @pytest.mark.parametrize(
        "verdict,status_code,code",
        [
            (Verdict.NOT_FOUND, 404, AccessErrorCode.NOT_FOUND),
            (Verdict.PRIVATE, 403, AccessErrorCode.PRIVATE),
            (Verdict.EXPIRED, 410, AccessErrorCode.EXPIRED),
            (Verdict.PASSWORD_REQUIRED, 401, AccessErrorCode.PASSWORD_REQUIRED),
            (Verdict.VIEW_LIMIT_EXCEEDED, 410, AccessErrorCode.VIEW_LIMIT_EXCEEDED),
        ],
    )
    def test_access_denied_maps_verdict(self, verdict, status_code, code):
        """판정별 상태 코드와 에러 코드"""
        exc = AccessDeniedException(verdict)

        assert exc.status_code == status_code
        assert exc.error_code == code
        assert exc.detail_info["verdict"] == verdict.value

    def test_email_not_allowed(self):
        """EmailNotAllowedException"""
        exc = EmailNotAllowedException()

        assert exc.status_code == 403
        assert exc.error_code == AccessErrorCode.EMAIL_NOT_ALLOWED

    def test_invalid_password(self):
        """InvalidPasswordException"""
        exc = InvalidPasswordException()

        assert exc.status_code == 401
        assert exc.error_code == AccessErrorCode.INVALID_PASSWORD

    def test_password_missing(self):
        """PasswordMissingException"""
        exc = PasswordMissingException()

        assert exc.status_code == 400
        assert exc.error_code == AccessErrorCode.PASSWORD_MISSING


class TestWebhookExceptions:
    """웹훅 예외 테스트"""

    def test_invalid_webhook_url(self):
        """InvalidWebhookUrlException"""
        exc = InvalidWebhookUrlException("Private/internal URLs are not allowed")

        assert exc.status_code == 400
        assert "Private/internal" in str(exc.detail_info)

    def test_webhook_document_not_found(self):
        """WebhookDocumentNotFoundException"""
        exc = WebhookDocumentNotFoundException("doc-1")

        assert exc.status_code == 404
        assert exc.detail_info == {"document_id": "doc-1"}


class TestErrorContent:
    """에러 응답 본문 테스트"""

    def test_build_error_content(self):
        """공통 에러 구조"""
        content = build_error_content("EXPIRED", "만료", {"verdict": "expired"})

        assert content == {
            "success": False,
            "message": "만료",
            "error": {
                "code": "EXPIRED",
                "message": "만료",
                "detail": {"verdict": "expired"},
            },
        }

    @pytest.mark.asyncio
    async def test_base_exception_handler(self):
        """BaseAPIException 핸들러 응답"""
        request = Request({"type": "http", "method": "GET", "path": "/"})
        exc = AccessDeniedException(Verdict.EXPIRED)

        response = await base_exception_handler(request, exc)

        assert response.status_code == 410
        assert b'"code":"EXPIRED"' in response.body
