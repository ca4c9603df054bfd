from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.core.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """전역 에러 코드"""

    # 공통 에러
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"

    # 인증 관련
    INVALID_API_KEY = "INVALID_API_KEY"

    # 백엔드 저장소 관련
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"

    # Storage 관련
    STORAGE_ERROR = "STORAGE_ERROR"
    OBJECT_NOT_FOUND = "OBJECT_NOT_FOUND"
    S3_DOWNLOAD_FAILED = "S3_DOWNLOAD_FAILED"


class BaseAPIException(HTTPException):
    """기본 API 예외 클래스"""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        detail: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.detail_info = detail or {}
        super().__init__(status_code=status_code, detail=message)


class BadRequestException(BaseAPIException):
    """400 Bad Request"""

    def __init__(
        self,
        message: str = "잘못된 요청입니다.",
        error_code: str = ErrorCode.BAD_REQUEST,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class UnauthorizedException(BaseAPIException):
    """401 Unauthorized"""

    def __init__(
        self,
        message: str = "인증이 필요합니다.",
        error_code: str = ErrorCode.UNAUTHORIZED,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class NotFoundException(BaseAPIException):
    """404 Not Found"""

    def __init__(
        self,
        message: str = "리소스를 찾을 수 없습니다.",
        error_code: str = ErrorCode.NOT_FOUND,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class InternalServerException(BaseAPIException):
    """500 Internal Server Error"""

    def __init__(
        self,
        message: str = "서버 내부 오류가 발생했습니다.",
        error_code: str = ErrorCode.INTERNAL_ERROR,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code=error_code,
            message=message,
            detail=detail,
        )


class UpstreamUnavailableException(InternalServerException):
    """백엔드 저장소에 쓰기를 할 수 없는 경우

    읽기 경로는 데모 데이터로 대체되므로, 이 예외는 쓰기 경로에서만 발생합니다.
    """

    def __init__(
        self,
        message: str = "백엔드 저장소에 연결할 수 없습니다.",
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.STORE_UNAVAILABLE,
            detail=detail,
        )


class StorageException(InternalServerException):
    """Storage 관련 예외"""

    def __init__(
        self,
        message: str = "파일 저장소 오류가 발생했습니다.",
        error_code: str = ErrorCode.STORAGE_ERROR,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            detail=detail,
        )


def build_error_content(
    code: str, message: str, detail: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """공통 에러 응답 본문 생성"""
    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "message": message,
            "detail": detail,
        },
    }


async def base_exception_handler(
    request: Request, exc: BaseAPIException
) -> JSONResponse:
    """BaseAPIException 핸들러"""
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_content(
            exc.error_code, exc.message, exc.detail_info
        ),
    )


async def http_exception_handler(
    request: Request, exc: HTTPException
) -> JSONResponse:
    """HTTPException 핸들러"""
    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_content(
            ErrorCode.INTERNAL_ERROR, str(exc.detail)
        ),
    )


async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """일반 예외 핸들러"""
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "exception_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_content(
            ErrorCode.INTERNAL_ERROR, "서버 내부 오류가 발생했습니다."
        ),
    )
