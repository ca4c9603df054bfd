"""요청/응답 로깅 미들웨어

커스텀 도메인 요청은 재작성 전 Host 기준으로 기록됩니다.
"""

import time
from typing import Callable, cast

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import get_logger
from app.core.middlewares.context import set_request_id

logger = get_logger(__name__)

# 로깅 제외 경로
EXCLUDE_PATHS = {"/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답 로깅 및 처리 시간 측정 미들웨어"""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        if request.url.path in EXCLUDE_PATHS:
            return cast(Response, await call_next(request))

        # 요청 ID 설정 (헤더에서 가져오거나 새로 생성)
        request_id = set_request_id(request.headers.get("X-Request-ID"))
        fields = {
            "method": request.method,
            "host": request.headers.get("host", ""),
            "path": request.url.path,
            "client": request.client.host if request.client else "unknown",
        }
        logger.info("→ Request", extra=fields)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "✗ Request failed",
                extra={
                    **fields,
                    "error": f"{type(e).__name__}: {e}",
                    "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            raise

        process_time = (time.perf_counter() - start) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.2f}ms"

        log_method = (
            logger.info if response.status_code < 400 else logger.warning
        )
        log_method(
            "✓ Response" if response.status_code < 400 else "✗ Response",
            extra={
                **fields,
                "status_code": response.status_code,
                "elapsed_ms": round(process_time, 2),
            },
        )
        return cast(Response, response)
