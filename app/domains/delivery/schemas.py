"""Delivery 도메인 스키마 정의"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from app.domains.store.entities import CollectionItem

# Request Schemas


class VerifyAccessRequest(BaseModel):
    """비밀번호/이메일 검증 요청"""

    password: Optional[str] = Field(None, description="열람 비밀번호")
    email: Optional[str] = Field(None, max_length=320, description="열람자 이메일")


# Response Schemas


class ShortLinkResponse(BaseModel):
    """짧은 링크 해석 결과"""

    id: str
    slug: str
    is_active: bool
    expires_at: Optional[datetime] = None
    max_views: Optional[int] = None
    view_count: int
    password_protected: bool
    target_url: str
    target_name: str
    target_type: Literal["asset", "collection"]


class CollectionResponse(BaseModel):
    """공개 컬렉션"""

    id: str
    slug: str
    name: str
    description: Optional[str] = None
    branding: Optional[dict[str, Any]] = None
    items: list[CollectionItem] = Field(default_factory=list)


class DocumentVerifyResponse(BaseModel):
    """비밀번호 검증 후 문서 내용"""

    verified: bool = True
    title: str
    html: str
    theme: Optional[str] = None
    show_badge: bool = True
