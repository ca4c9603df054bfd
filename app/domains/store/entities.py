"""공개 전달 경로에서 사용하는 엔티티 타입

저장소 어댑터(SQL/데모)는 ORM 객체 대신 이 타입을 반환합니다.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import Field

from app.core.schemas import BaseSchema


class EntityKind(str, Enum):
    """엔티티 종류 (조회수 증가/분석 이벤트 대상)"""

    DOCUMENT = "document"
    ASSET = "asset"
    COLLECTION = "collection"
    SHORT_LINK = "short_link"


class DomainStatus(str, Enum):
    """커스텀 도메인 검증 상태"""

    PENDING = "pending"
    VERIFIED = "verified"


class AccessPolicy(BaseSchema):
    """문서/컬렉션/에셋 공통 접근 정책 필드"""

    is_public: bool = True
    expires_at: Optional[datetime] = None
    password_hash: Optional[str] = None
    allowed_emails: Optional[list[str]] = None
    view_count: int = Field(default=0, ge=0)


class DocumentEntity(AccessPolicy):
    """공개 문서 (pagelink_documents)"""

    kind: Literal[EntityKind.DOCUMENT] = EntityKind.DOCUMENT
    id: str
    workspace_id: str
    slug: str
    title: str
    html: str
    theme: Optional[str] = None
    show_badge: bool = True
    created_at: datetime


class AssetEntity(AccessPolicy):
    """업로드된 바이너리 에셋

    inline_bytes가 있으면 오브젝트 스토리지 대신 그 바이트를 그대로 전달합니다.
    (데모 플레이스홀더 용도, cache_control도 함께 지정)
    """

    kind: Literal[EntityKind.ASSET] = EntityKind.ASSET
    id: str
    workspace_id: str
    filename: str
    public_path: str
    storage_path: str
    mime_type: str
    size_bytes: int = 0
    is_archived: bool = False
    created_at: datetime
    inline_bytes: Optional[bytes] = Field(default=None, exclude=True)
    # 전달 시 기본 캐시 정책 대신 사용할 Cache-Control
    cache_control: Optional[str] = Field(default=None, exclude=True)


class CollectionItem(BaseSchema):
    """컬렉션에 포함된 공개 에셋"""

    asset_id: str
    position: int = 0
    custom_title: Optional[str] = None
    filename: str
    mime_type: str
    size_bytes: int = 0
    public_path: str


class CollectionEntity(AccessPolicy):
    """에셋 묶음"""

    kind: Literal[EntityKind.COLLECTION] = EntityKind.COLLECTION
    id: str
    workspace_id: str
    slug: str
    name: str
    description: Optional[str] = None
    branding: Optional[dict[str, Any]] = None
    is_archived: bool = False
    created_at: datetime
    items: list[CollectionItem] = Field(default_factory=list)


class ShortLinkEntity(BaseSchema):
    """짧은 링크

    asset_id/collection_id 중 정확히 하나만 설정됩니다.
    asset/collection에는 조회 시점의 대상 엔티티가 담깁니다. (없으면 None)
    """

    kind: Literal[EntityKind.SHORT_LINK] = EntityKind.SHORT_LINK
    id: str
    workspace_id: str
    slug: str
    asset_id: Optional[str] = None
    collection_id: Optional[str] = None
    password_hash: Optional[str] = None
    expires_at: Optional[datetime] = None
    max_views: Optional[int] = Field(default=None, ge=0)
    view_count: int = Field(default=0, ge=0)
    is_active: bool = True
    created_at: datetime
    asset: Optional[AssetEntity] = None
    collection: Optional[CollectionEntity] = None


ContentEntity = Union[
    DocumentEntity, AssetEntity, CollectionEntity, ShortLinkEntity
]


class DomainBinding(BaseSchema):
    """커스텀 도메인 → 문서 또는 워크스페이스 매핑"""

    id: str
    domain: str
    status: DomainStatus = DomainStatus.PENDING
    document_id: Optional[str] = None
    workspace_id: Optional[str] = None

    @property
    def is_verified(self) -> bool:
        return self.status == DomainStatus.VERIFIED


class DocumentSummary(BaseSchema):
    """워크스페이스 랜딩 페이지용 문서 요약"""

    slug: str
    title: str
    created_at: datetime


class WebhookEndpoint(BaseSchema):
    """문서에 설정된 웹훅 엔드포인트"""

    id: str
    document_id: str
    url: str
    secret: str
    enabled: bool = True
    events: list[str] = Field(default_factory=list)
    failure_count: int = Field(default=0, ge=0)
    last_triggered_at: Optional[datetime] = None


class WebhookDeliveryLogEntry(BaseSchema):
    """웹훅 전송 시도 기록 (추가 전용)"""

    id: Optional[str] = None
    endpoint_id: str
    document_id: str
    event_type: str
    success: bool
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    created_at: datetime


class AnalyticsEvent(BaseSchema):
    """공개 조회 분석 이벤트"""

    workspace_id: Optional[str] = None
    target_type: EntityKind
    target_id: str
    event_type: str = "view"
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    created_at: datetime
