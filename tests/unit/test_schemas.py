"""공통 응답 스키마 테스트"""

from app.core.schemas import (
    APIResponse,
    ErrorResponse,
    create_list_response,
    create_response,
)
from app.core.utils.pagination import PageParams


class TestCreateResponse:
    """단일 응답 테스트"""

    def test_create_response_defaults(self):
        """기본 성공 응답"""
        response = create_response(data={"slug": "k9x2p"})

        assert isinstance(response, APIResponse)
        assert response.success is True
        assert response.data == {"slug": "k9x2p"}

    def test_create_response_failure(self):
        """실패 응답 (테스트 웹훅 실패 등)"""
        response = create_response(data=None, message="실패", success=False)

        assert response.success is False
        assert response.message == "실패"


class TestCreateListResponse:
    """목록 응답 테스트"""

    def test_page_meta(self):
        """페이지 메타 계산"""
        response = create_list_response(data=[1, 2], total=120, page=2, size=50)

        assert response.meta.total_pages == 3
        assert response.meta.has_next is True
        assert response.meta.has_prev is True

    def test_last_page(self):
        """마지막 페이지"""
        response = create_list_response(data=[1], total=51, page=2, size=50)

        assert response.meta.has_next is False

    def test_empty(self):
        """빈 목록"""
        response = create_list_response(data=[], total=0, page=1, size=50)

        assert response.meta.total_pages == 0
        assert response.meta.has_next is False
        assert response.meta.has_prev is False


class TestPageParams:
    """페이지네이션 파라미터 테스트"""

    def test_skip_and_limit(self):
        params = PageParams(page=3, size=20)

        assert params.skip == 40
        assert params.limit == 20


class TestErrorResponse:
    """에러 응답 스키마 테스트"""

    def test_error_response_structure(self):
        """에러 응답 직렬화"""
        response = ErrorResponse(
            message="비밀번호가 필요합니다.",
            error={
                "code": "PASSWORD_REQUIRED",
                "message": "비밀번호가 필요합니다.",
                "detail": {"verdict": "password_required"},
            },
        )

        data = response.model_dump()
        assert data["success"] is False
        assert data["error"]["code"] == "PASSWORD_REQUIRED"
