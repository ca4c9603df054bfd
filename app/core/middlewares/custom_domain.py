"""커스텀 도메인 라우팅 미들웨어

메인 도메인이 아닌 Host로 들어온 요청을 커스텀 도메인 핸들러로 재작성합니다.

    GET https://acme.example/proposal-1
    → GET /api/custom-domain/proposal-1?_host=acme.example
"""

from typing import Callable, Iterable, cast
from urllib.parse import parse_qsl, urlencode

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.logging import get_logger

logger = get_logger(__name__)

CUSTOM_DOMAIN_PREFIX = "/api/custom-domain"

# 재작성하지 않는 경로
PASSTHROUGH_PREFIXES = ("/api/", "/health", "/docs", "/redoc", "/openapi.json")


def normalize_host(host: str) -> str:
    """포트를 제거하고 소문자로 변환"""
    host = host.strip().lower()
    if host.startswith("["):
        # IPv6 리터럴: [::1]:8000
        return host.split("]")[0].lstrip("[")
    return host.split(":")[0].rstrip(".")


def is_custom_domain(host: str, main_domains: Iterable[str]) -> bool:
    """메인 도메인(및 그 서브도메인)이 아니면 커스텀 도메인"""
    hostname = normalize_host(host)
    if not hostname:
        return False
    return not any(
        hostname == domain or hostname.endswith(f".{domain}")
        for domain in main_domains
    )


class CustomDomainMiddleware(BaseHTTPMiddleware):
    """커스텀 도메인 요청을 /api/custom-domain 으로 재작성"""

    def __init__(self, app: ASGIApp, main_domains: Iterable[str]):
        super().__init__(app)
        self.main_domains = [domain.lower() for domain in main_domains]

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        host = request.headers.get("host", "")
        path = request.url.path

        if is_custom_domain(host, self.main_domains) and not path.startswith(
            PASSTHROUGH_PREFIXES
        ):
            new_path = CUSTOM_DOMAIN_PREFIX + ("" if path == "/" else path)
            query = parse_qsl(request.url.query, keep_blank_values=True)
            query = [(k, v) for k, v in query if k != "_host"]
            query.append(("_host", normalize_host(host)))

            request.scope["path"] = new_path
            request.scope["raw_path"] = new_path.encode("utf-8")
            request.scope["query_string"] = urlencode(query).encode("latin-1")

            logger.debug(
                "Rewrote custom domain request",
                extra={"host": host, "path": path, "rewritten": new_path},
            )

        return cast(Response, await call_next(request))
