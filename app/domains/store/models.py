"""공개 전달 엔진 테이블 정의

문서/에셋/컬렉션/짧은 링크/커스텀 도메인/웹훅/분석 이벤트를 관리합니다.
대시보드 CRUD는 이 서비스 밖에서 이루어지며, 여기서는 읽기와
조회수·실패 횟수 같은 카운터 갱신만 수행합니다.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    ARRAY,
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    false,
    func,
    true,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, MappedColumn, mapped_column, relationship

from app.core.database import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


def _id_column() -> MappedColumn[str]:
    return mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=_uuid_str,
    )


class PolicyColumnsMixin:
    """공통 접근 정책 컬럼"""

    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
        comment="공개 여부",
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="만료 일시",
    )
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="bcrypt 비밀번호 해시",
    )
    allowed_emails: Mapped[Optional[list[str]]] = mapped_column(
        ARRAY(String),
        nullable=True,
        comment="열람 허용 이메일 목록",
    )
    view_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        comment="조회수",
    )


class Document(PolicyColumnsMixin, Base):
    """공개 문서"""

    __tablename__ = "pagelink_documents"

    id: Mapped[str] = _id_column()
    workspace_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), nullable=False, comment="워크스페이스 ID"
    )
    slug: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, comment="공개 슬러그"
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    html: Mapped[str] = mapped_column(Text, nullable=False, default="")
    theme: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    show_badge: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
        comment="Pagelink 배지 표시 여부",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )

    __table_args__ = (
        Index(
            "ix_pagelink_documents_workspace_created",
            "workspace_id",
            "created_at",
        ),
    )

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, slug={self.slug})>"


class Asset(PolicyColumnsMixin, Base):
    """업로드된 바이너리 에셋"""

    __tablename__ = "assets"

    id: Mapped[str] = _id_column()
    workspace_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), nullable=False
    )
    filename: Mapped[str] = mapped_column(String(500), nullable=False)
    public_path: Mapped[str] = mapped_column(
        Text, nullable=False, unique=True, comment="/{owner}/{...path}"
    )
    storage_path: Mapped[str] = mapped_column(
        Text, nullable=False, comment="오브젝트 스토리지 키"
    )
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    size_bytes: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0, server_default="0"
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Asset(id={self.id}, public_path={self.public_path})>"


class Collection(PolicyColumnsMixin, Base):
    """에셋 묶음"""

    __tablename__ = "collections"

    id: Mapped[str] = _id_column()
    workspace_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), nullable=False
    )
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    branding: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONB, nullable=True
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class CollectionAsset(Base):
    """컬렉션-에셋 연결 (정렬 순서 포함)"""

    __tablename__ = "collection_items"

    id: Mapped[str] = _id_column()
    collection_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=False,
    )
    asset_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("assets.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    custom_title: Mapped[Optional[str]] = mapped_column(
        String(500), nullable=True
    )

    __table_args__ = (
        UniqueConstraint(
            "collection_id", "asset_id", name="uq_collection_items_asset"
        ),
    )


class ShortLink(Base):
    """짧은 링크 (콘텐츠 슬러그와 별도 네임스페이스)"""

    __tablename__ = "short_links"

    id: Mapped[str] = _id_column()
    workspace_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), nullable=False
    )
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    asset_id: Mapped[Optional[str]] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("assets.id", ondelete="CASCADE"),
        nullable=True,
    )
    collection_id: Mapped[Optional[str]] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=True,
    )
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    max_views: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    view_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    asset: Mapped[Optional[Asset]] = relationship(lazy="joined")
    collection: Mapped[Optional[Collection]] = relationship(lazy="joined")

    __table_args__ = (
        CheckConstraint(
            "(asset_id IS NULL) <> (collection_id IS NULL)",
            name="ck_short_links_single_target",
        ),
        CheckConstraint("view_count >= 0", name="ck_short_links_view_count"),
    )


class CustomDomain(Base):
    """커스텀 도메인 바인딩"""

    __tablename__ = "custom_domains"

    id: Mapped[str] = _id_column()
    domain: Mapped[str] = mapped_column(
        String(253), nullable=False, unique=True, comment="소문자 호스트명"
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        server_default="pending",
        comment="pending/verified",
    )
    document_id: Mapped[Optional[str]] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("pagelink_documents.id", ondelete="CASCADE"),
        nullable=True,
    )
    workspace_id: Mapped[Optional[str]] = mapped_column(
        Uuid(as_uuid=False), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "(document_id IS NULL) <> (workspace_id IS NULL)",
            name="ck_custom_domains_single_target",
        ),
        CheckConstraint(
            "domain = lower(domain)", name="ck_custom_domains_lowercase"
        ),
    )


class WebhookEndpointModel(Base):
    """문서별 웹훅 엔드포인트"""

    __tablename__ = "webhook_endpoints"

    id: Mapped[str] = _id_column()
    document_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("pagelink_documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    secret: Mapped[str] = mapped_column(String(255), nullable=False)
    enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    events: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list, server_default="{}"
    )
    failure_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    last_triggered_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class WebhookLog(Base):
    """웹훅 전송 기록 (추가 전용)"""

    __tablename__ = "pagelink_webhook_logs"

    id: Mapped[str] = _id_column()
    endpoint_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), nullable=False
    )
    document_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), nullable=False
    )
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    status_code: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index(
            "ix_pagelink_webhook_logs_document_created",
            "document_id",
            "created_at",
        ),
    )


class AnalyticsEventModel(Base):
    """공개 조회 분석 이벤트"""

    __tablename__ = "analytics_events"

    id: Mapped[str] = _id_column()
    workspace_id: Mapped[Optional[str]] = mapped_column(
        Uuid(as_uuid=False), nullable=True
    )
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False)
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64))
    user_agent: Mapped[Optional[str]] = mapped_column(Text)
    referrer: Mapped[Optional[str]] = mapped_column(Text)
    utm_source: Mapped[Optional[str]] = mapped_column(String(255))
    utm_medium: Mapped[Optional[str]] = mapped_column(String(255))
    utm_campaign: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_analytics_events_target", "target_type", "target_id"),
    )
