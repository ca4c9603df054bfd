"""데모 모드 저장소 어댑터

백엔드 저장소가 없거나(미설정) 연결할 수 없을 때 사용하는 결정적 합성 데이터입니다.
쓰기 작업은 아무것도 하지 않습니다.
"""

import html
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable, Optional

from app.core.logging import get_logger
from app.core.security import hash_password
from app.core.utils.datetime import now_utc
from app.domains.media.mime import guess_mime_type
from app.domains.store.adapter import EntityStoreAdapter
from app.domains.store.entities import (
    AnalyticsEvent,
    AssetEntity,
    CollectionEntity,
    CollectionItem,
    DocumentEntity,
    DocumentSummary,
    DomainBinding,
    DomainStatus,
    EntityKind,
    ShortLinkEntity,
    WebhookDeliveryLogEntry,
    WebhookEndpoint,
)

logger = get_logger(__name__)

DEMO_WORKSPACE_ID = "demo-workspace"
DEMO_DOCUMENT_ID = "demo"
DEMO_DOMAIN_PREFIX = "demo-domain:"
DEMO_CREATED_AT = datetime(2025, 1, 1, tzinfo=timezone.utc)
DEMO_SLUG_PREFIXES = ("bold-", "swift-", "demo")
DEMO_LINK_PASSWORD = "demo123"
DEMO_ASSET_CACHE_CONTROL = "public, max-age=3600"

DEMO_DOCUMENT_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Demo Document</title>
  <style>
    body { font-family: system-ui, sans-serif; background: #0f172a; color: #e2e8f0; margin: 0; padding: 4rem 2rem; }
    main { max-width: 720px; margin: 0 auto; }
    h1 { font-size: 2.5rem; margin-bottom: 1rem; }
  </style>
</head>
<body>
  <main>
    <h1>Demo Document</h1>
    <p style="font-size: 1.25rem;">This is a demo document showing what you can create with Pagelink.</p>
  </main>
</body>
</html>"""

DEMO_DOMAIN_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Custom Domain - {host}</title>
  <style>
    body {{ font-family: system-ui, sans-serif; background: #0a0a0a; color: #fff; min-height: 100vh; display: flex; align-items: center; justify-content: center; margin: 0; }}
    .container {{ text-align: center; padding: 2rem; }}
    p {{ color: #888; margin-bottom: 2rem; }}
    .domain {{ background: #1a1a1a; padding: 0.5rem 1rem; border-radius: 8px; font-family: monospace; color: #60a5fa; }}
  </style>
</head>
<body>
  <div class="container">
    <h1>Custom Domain Active</h1>
    <p>This domain is configured with Pagelink</p>
    <div class="domain">{host}</div>
  </div>
</body>
</html>"""

DEMO_IMAGE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="400" height="300" viewBox="0 0 400 300">
  <rect width="400" height="300" fill="#1a1a2e"/>
  <text x="200" y="150" text-anchor="middle" fill="#8b5cf6" font-family="system-ui" font-size="24">Demo Image</text>
  <text x="200" y="180" text-anchor="middle" fill="#64748b" font-family="system-ui" font-size="14">{filename}</text>
</svg>"""


@lru_cache
def _demo_link_password_hash() -> str:
    return hash_password(DEMO_LINK_PASSWORD)


def is_demo_slug(slug: str) -> bool:
    return slug.startswith(DEMO_SLUG_PREFIXES)


def is_demo_id(entity_id: str) -> bool:
    """데모 어댑터가 합성한 엔티티 ID 여부 (저장소 ID는 UUID)"""
    return entity_id == DEMO_DOCUMENT_ID or entity_id.startswith("demo-")


def build_placeholder_asset(public_path: str) -> AssetEntity:
    """공개 경로에 대한 플레이스홀더 에셋 생성

    이미지는 파일명이 들어간 SVG, 그 외에는 "Demo file: {filename}" 텍스트입니다.
    """
    filename = public_path.rstrip("/").rsplit("/", 1)[-1] or "file"
    mime_type = guess_mime_type(filename)

    if mime_type.startswith("image/"):
        content = DEMO_IMAGE_SVG.format(filename=html.escape(filename)).encode(
            "utf-8"
        )
        mime_type = "image/svg+xml"
    else:
        content = f"Demo file: {filename}".encode("utf-8")

    return AssetEntity(
        id=f"demo-asset:{public_path}",
        workspace_id=DEMO_WORKSPACE_ID,
        filename=filename,
        public_path=public_path,
        storage_path=public_path.lstrip("/"),
        mime_type=mime_type,
        size_bytes=len(content),
        created_at=DEMO_CREATED_AT,
        inline_bytes=content,
        cache_control=DEMO_ASSET_CACHE_CONTROL,
    )


class DemoStoreAdapter(EntityStoreAdapter):
    """결정적 합성 데이터를 반환하는 어댑터"""

    def __init__(self, clock: Callable[[], datetime] = now_utc):
        self.clock = clock

    def owns_entity(self, entity_id: str) -> bool:
        return is_demo_id(entity_id)

    def _document(
        self, slug: str, document_id: str = DEMO_DOCUMENT_ID
    ) -> DocumentEntity:
        return DocumentEntity(
            id=document_id,
            workspace_id=DEMO_WORKSPACE_ID,
            slug=slug,
            title="Demo Document",
            html=DEMO_DOCUMENT_HTML,
            theme="midnight",
            show_badge=True,
            view_count=42,
            created_at=DEMO_CREATED_AT,
        )

    def _collection(self, slug: str) -> CollectionEntity:
        items = [
            CollectionItem(
                asset_id=f"demo-asset:{path}",
                position=position,
                filename=path.rsplit("/", 1)[-1],
                mime_type=guess_mime_type(path),
                public_path=path,
            )
            for position, path in enumerate(
                ["/demo/product-demo.pdf", "/demo/cover.png"]
            )
        ]
        return CollectionEntity(
            id=f"demo-collection:{slug}",
            workspace_id=DEMO_WORKSPACE_ID,
            slug=slug,
            name="Demo Collection",
            description="A demo collection of shared files",
            created_at=DEMO_CREATED_AT,
            items=items,
        )

    async def get_document_by_slug(
        self, slug: str, workspace_id: Optional[str] = None
    ) -> Optional[DocumentEntity]:
        if workspace_id not in (None, DEMO_WORKSPACE_ID):
            return None
        return self._document(slug) if is_demo_slug(slug) else None

    async def get_document_by_id(
        self, document_id: str
    ) -> Optional[DocumentEntity]:
        if document_id == DEMO_DOCUMENT_ID:
            return self._document("demo")

        if document_id.startswith(DEMO_DOMAIN_PREFIX):
            host = document_id[len(DEMO_DOMAIN_PREFIX):]
            document = self._document("demo", document_id=document_id)
            return document.model_copy(
                update={
                    "title": f"Custom Domain - {host}",
                    "html": DEMO_DOMAIN_HTML.format(host=html.escape(host)),
                    "show_badge": False,
                }
            )
        return None

    async def get_asset_by_public_path(
        self, public_path: str
    ) -> Optional[AssetEntity]:
        return build_placeholder_asset(public_path)

    async def get_collection_by_slug(
        self, slug: str
    ) -> Optional[CollectionEntity]:
        return self._collection(slug) if slug.startswith("demo") else None

    async def get_short_link(self, slug: str) -> Optional[ShortLinkEntity]:
        if slug == "abc123":
            return ShortLinkEntity(
                id="demo-link-1",
                workspace_id=DEMO_WORKSPACE_ID,
                slug=slug,
                asset_id="demo-asset:/demo/product-demo.pdf",
                view_count=42,
                created_at=DEMO_CREATED_AT,
                asset=build_placeholder_asset("/demo/product-demo.pdf"),
            )
        if slug == "xyz789":
            return ShortLinkEntity(
                id="demo-link-2",
                workspace_id=DEMO_WORKSPACE_ID,
                slug=slug,
                asset_id="demo-asset:/demo/confidential-report.docx",
                password_hash=_demo_link_password_hash(),
                expires_at=self.clock() + timedelta(days=30),
                max_views=100,
                view_count=15,
                created_at=DEMO_CREATED_AT,
                asset=build_placeholder_asset("/demo/confidential-report.docx"),
            )
        if slug == "demo":
            collection = self._collection("demo-collection")
            return ShortLinkEntity(
                id="demo-link-3",
                workspace_id=DEMO_WORKSPACE_ID,
                slug=slug,
                collection_id=collection.id,
                view_count=100,
                created_at=DEMO_CREATED_AT,
                collection=collection,
            )
        return None

    async def get_domain_binding(self, host: str) -> Optional[DomainBinding]:
        host = host.lower()
        return DomainBinding(
            id=f"demo-binding:{host}",
            domain=host,
            status=DomainStatus.VERIFIED,
            document_id=f"{DEMO_DOMAIN_PREFIX}{host}",
        )

    async def list_public_documents(
        self, workspace_id: str, limit: int
    ) -> list[DocumentSummary]:
        if workspace_id != DEMO_WORKSPACE_ID:
            return []
        return [
            DocumentSummary(
                slug="demo", title="Demo Document", created_at=DEMO_CREATED_AT
            )
        ][:limit]

    async def list_webhook_endpoints(
        self, document_id: str
    ) -> list[WebhookEndpoint]:
        return []

    async def list_webhook_logs(
        self,
        document_id: str,
        skip: int = 0,
        limit: int = 50,
        endpoint_id: Optional[str] = None,
        success: Optional[bool] = None,
    ) -> tuple[list[WebhookDeliveryLogEntry], int]:
        return [], 0

    async def increment_view_count(
        self, kind: EntityKind, entity_id: str
    ) -> None:
        logger.debug(
            "Demo mode: view count not persisted",
            extra={"kind": kind.value, "entity_id": entity_id},
        )

    async def insert_analytics_event(self, event: AnalyticsEvent) -> None:
        logger.debug("Demo mode: analytics event dropped")

    async def insert_webhook_log(self, entry: WebhookDeliveryLogEntry) -> None:
        logger.debug("Demo mode: webhook log dropped")

    async def update_endpoint_status(
        self, endpoint_id: str, success: bool, at: datetime
    ) -> None:
        logger.debug("Demo mode: endpoint status not persisted")
