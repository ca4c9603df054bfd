"""Resolver 도메인 타입 정의"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from app.domains.access.evaluator import Verdict
from app.domains.store.entities import ContentEntity, DocumentSummary

PASSWORD_HEADER = "x-access-password"
EMAIL_HEADER = "x-viewer-email"


class RouteKind(str, Enum):
    """요청이 들어온 라우트 종류"""

    DOCUMENT = "document"
    ASSET = "asset"
    SHORT_LINK = "short_link"
    COLLECTION = "collection"
    DOMAIN = "domain"


class RenderHint(str, Enum):
    """응답 렌더링 방식"""

    DOCUMENT_PAGE = "document_page"
    DOMAIN_DOCUMENT = "domain_document"
    LANDING = "landing"
    ASSET_BYTES = "asset_bytes"
    SHORT_LINK_TARGET = "short_link_target"
    COLLECTION_PAGE = "collection_page"
    DOMAIN_NOT_CONFIGURED = "domain_not_configured"
    DENIED = "denied"


@dataclass(frozen=True)
class AccessCredentials:
    """요청에 포함된 자격 증명"""

    password: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "AccessCredentials":
        return cls(
            password=headers.get(PASSWORD_HEADER) or None,
            email=headers.get(EMAIL_HEADER) or None,
        )


@dataclass
class ResolutionResult:
    """해석 결과

    email_allowed가 False면 판정은 OK지만 허용 이메일 목록에서 거부된 것입니다.
    """

    verdict: Verdict
    entity: Optional[ContentEntity]
    render_hint: RenderHint
    email_allowed: bool = True
    host: Optional[str] = None
    documents: list[DocumentSummary] = field(default_factory=list)

    @property
    def served(self) -> bool:
        """콘텐츠를 실제로 제공하는 결과인지 여부"""
        return self.verdict == Verdict.OK and self.email_allowed
