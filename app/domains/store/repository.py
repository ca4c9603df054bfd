"""SQLAlchemy 기반 Entity Store Adapter

작업마다 독립된 세션을 열기 때문에 요청 밖의 백그라운드 태스크에서도
안전하게 사용할 수 있습니다. 카운터는 UPDATE ... SET x = x + 1 로
원자적으로 갱신합니다.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional, cast

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.logging import get_logger
from app.core.utils.datetime import now_utc
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
from app.domains.store.exceptions import StoreUnavailableError
from app.domains.store.models import (
    AnalyticsEventModel,
    Asset,
    Collection,
    CollectionAsset,
    CustomDomain,
    Document,
    ShortLink,
    WebhookEndpointModel,
    WebhookLog,
)

logger = get_logger(__name__)

# 연결 수준 오류 (저장소 장애로 간주)
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, OSError, TimeoutError)

VIEW_COUNTED_MODELS = {
    EntityKind.DOCUMENT: Document,
    EntityKind.ASSET: Asset,
    EntityKind.COLLECTION: Collection,
    EntityKind.SHORT_LINK: ShortLink,
}


def _is_uuid(value: str) -> bool:
    """UUID 컬럼에 바인딩할 수 있는 값인지 여부 (외부 입력 ID 검사용)"""
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


class SqlStoreAdapter(EntityStoreAdapter):
    """PostgreSQL 저장소 어댑터"""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_maker() as session:
                yield session
        except UNAVAILABLE_ERRORS as e:
            logger.warning(
                "Store operation failed",
                extra={"operation": operation, "error": str(e)},
            )
            raise StoreUnavailableError(operation, str(e)) from e

    async def get_document_by_slug(
        self, slug: str, workspace_id: Optional[str] = None
    ) -> Optional[DocumentEntity]:
        query = select(Document).where(Document.slug == slug)
        if workspace_id is not None:
            if not _is_uuid(workspace_id):
                return None
            query = query.where(Document.workspace_id == workspace_id)

        async with self._session("get_document_by_slug") as session:
            row = (await session.execute(query)).scalar_one_or_none()
        return DocumentEntity.model_validate(row) if row else None

    async def get_document_by_id(
        self, document_id: str
    ) -> Optional[DocumentEntity]:
        if not _is_uuid(document_id):
            return None
        async with self._session("get_document_by_id") as session:
            row = await session.get(Document, document_id)
        return DocumentEntity.model_validate(row) if row else None

    async def get_asset_by_public_path(
        self, public_path: str
    ) -> Optional[AssetEntity]:
        query = select(Asset).where(
            and_(
                Asset.public_path == public_path,
                Asset.is_public.is_(True),
                Asset.is_archived.is_(False),
            )
        )
        async with self._session("get_asset_by_public_path") as session:
            row = (await session.execute(query)).scalar_one_or_none()
        return AssetEntity.model_validate(row) if row else None

    async def get_collection_by_slug(
        self, slug: str
    ) -> Optional[CollectionEntity]:
        items_query = (
            select(CollectionAsset, Asset)
            .join(Asset, Asset.id == CollectionAsset.asset_id)
            .join(Collection, Collection.id == CollectionAsset.collection_id)
            .where(
                and_(
                    Collection.slug == slug,
                    Asset.is_public.is_(True),
                    Asset.is_archived.is_(False),
                )
            )
            .order_by(CollectionAsset.position)
        )

        async with self._session("get_collection_by_slug") as session:
            row = (
                await session.execute(
                    select(Collection).where(Collection.slug == slug)
                )
            ).scalar_one_or_none()
            if row is None:
                return None
            item_rows = (await session.execute(items_query)).all()

        items = [
            CollectionItem(
                asset_id=asset.id,
                position=link.position,
                custom_title=link.custom_title,
                filename=asset.filename,
                mime_type=asset.mime_type,
                size_bytes=asset.size_bytes,
                public_path=asset.public_path,
            )
            for link, asset in item_rows
        ]
        collection = CollectionEntity.model_validate(row)
        return collection.model_copy(update={"items": items})

    async def get_short_link(self, slug: str) -> Optional[ShortLinkEntity]:
        async with self._session("get_short_link") as session:
            row = (
                await session.execute(
                    select(ShortLink).where(ShortLink.slug == slug)
                )
            ).scalar_one_or_none()
        return ShortLinkEntity.model_validate(row) if row else None

    async def get_domain_binding(self, host: str) -> Optional[DomainBinding]:
        query = select(CustomDomain).where(
            and_(
                CustomDomain.domain == host.lower(),
                CustomDomain.status == DomainStatus.VERIFIED.value,
            )
        )
        async with self._session("get_domain_binding") as session:
            row = (await session.execute(query)).scalar_one_or_none()
        return DomainBinding.model_validate(row) if row else None

    async def list_public_documents(
        self, workspace_id: str, limit: int
    ) -> list[DocumentSummary]:
        if not _is_uuid(workspace_id):
            return []
        query = (
            select(Document.slug, Document.title, Document.created_at)
            .where(
                and_(
                    Document.workspace_id == workspace_id,
                    Document.is_public.is_(True),
                    or_(
                        Document.expires_at.is_(None),
                        Document.expires_at > now_utc(),
                    ),
                )
            )
            .order_by(Document.created_at.desc())
            .limit(limit)
        )
        async with self._session("list_public_documents") as session:
            rows = (await session.execute(query)).all()
        return [
            DocumentSummary(slug=slug, title=title, created_at=created_at)
            for slug, title, created_at in rows
        ]

    async def list_webhook_endpoints(
        self, document_id: str
    ) -> list[WebhookEndpoint]:
        if not _is_uuid(document_id):
            return []
        query = (
            select(WebhookEndpointModel)
            .where(WebhookEndpointModel.document_id == document_id)
            .order_by(WebhookEndpointModel.created_at)
        )
        async with self._session("list_webhook_endpoints") as session:
            rows = (await session.execute(query)).scalars().all()
        return [WebhookEndpoint.model_validate(row) for row in rows]

    async def list_webhook_logs(
        self,
        document_id: str,
        skip: int = 0,
        limit: int = 50,
        endpoint_id: Optional[str] = None,
        success: Optional[bool] = None,
    ) -> tuple[list[WebhookDeliveryLogEntry], int]:
        if not _is_uuid(document_id) or (
            endpoint_id is not None and not _is_uuid(endpoint_id)
        ):
            return [], 0

        conditions = [WebhookLog.document_id == document_id]
        if endpoint_id is not None:
            conditions.append(WebhookLog.endpoint_id == endpoint_id)
        if success is not None:
            conditions.append(WebhookLog.success.is_(success))

        query = (
            select(WebhookLog)
            .where(and_(*conditions))
            .order_by(WebhookLog.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        count_query = (
            select(func.count()).select_from(WebhookLog).where(and_(*conditions))
        )

        async with self._session("list_webhook_logs") as session:
            rows = (await session.execute(query)).scalars().all()
            total = (await session.execute(count_query)).scalar_one()
        return (
            [WebhookDeliveryLogEntry.model_validate(row) for row in rows],
            cast(int, total),
        )

    async def increment_view_count(
        self, kind: EntityKind, entity_id: str
    ) -> None:
        model = VIEW_COUNTED_MODELS[kind]
        async with self._session("increment_view_count") as session:
            await session.execute(
                update(model)
                .where(model.id == entity_id)
                .values(view_count=model.view_count + 1)
            )
            await session.commit()

    async def insert_analytics_event(self, event: AnalyticsEvent) -> None:
        async with self._session("insert_analytics_event") as session:
            session.add(
                AnalyticsEventModel(
                    workspace_id=event.workspace_id,
                    target_type=event.target_type.value,
                    target_id=event.target_id,
                    event_type=event.event_type,
                    ip_address=event.ip_address,
                    user_agent=event.user_agent,
                    referrer=event.referrer,
                    utm_source=event.utm_source,
                    utm_medium=event.utm_medium,
                    utm_campaign=event.utm_campaign,
                    created_at=event.created_at,
                )
            )
            await session.commit()

    async def insert_webhook_log(self, entry: WebhookDeliveryLogEntry) -> None:
        if not (_is_uuid(entry.endpoint_id) and _is_uuid(entry.document_id)):
            logger.warning(
                "Webhook log skipped: malformed id",
                extra={
                    "endpoint_id": entry.endpoint_id,
                    "document_id": entry.document_id,
                },
            )
            return
        async with self._session("insert_webhook_log") as session:
            session.add(
                WebhookLog(
                    endpoint_id=entry.endpoint_id,
                    document_id=entry.document_id,
                    event_type=entry.event_type,
                    success=entry.success,
                    status_code=entry.status_code,
                    error_message=entry.error_message,
                    created_at=entry.created_at,
                )
            )
            await session.commit()

    async def update_endpoint_status(
        self, endpoint_id: str, success: bool, at: datetime
    ) -> None:
        statement = update(WebhookEndpointModel).where(
            WebhookEndpointModel.id == endpoint_id
        )
        if success:
            statement = statement.values(failure_count=0, last_triggered_at=at)
        else:
            statement = statement.values(
                failure_count=WebhookEndpointModel.failure_count + 1
            )

        async with self._session("update_endpoint_status") as session:
            await session.execute(statement)
            await session.commit()
