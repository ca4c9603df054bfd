"""보안 헤더 미들웨어"""

from typing import Callable, cast

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """모든 응답에 보안 헤더 추가 (핸들러가 설정한 값은 유지)"""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        response = cast(Response, await call_next(request))
        for key, value in SECURITY_HEADERS.items():
            response.headers.setdefault(key, value)
        return response
