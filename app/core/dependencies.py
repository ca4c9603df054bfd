"""공통 의존성 함수 정의

이 모듈은 FastAPI 엔드포인트에서 사용되는 공통 의존성 함수들을 정의합니다.
"""

import hmac

from fastapi import Header

from app.core.config import settings
from app.core.exceptions import ErrorCode, UnauthorizedException


async def verify_internal_api_key(
    x_internal_api_key: str = Header(..., alias="X-Internal-Api-Key")
) -> None:
    """운영자 API Key 검증 (웹훅 관리 엔드포인트용)

    Raises:
        UnauthorizedException: API Key가 유효하지 않은 경우
    """
    if not hmac.compare_digest(
        x_internal_api_key.encode("utf-8"),
        settings.internal_api_key.encode("utf-8"),
    ):
        raise UnauthorizedException(
            message="유효하지 않은 API 키입니다.",
            error_code=ErrorCode.INVALID_API_KEY,
        )
