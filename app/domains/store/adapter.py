"""Entity Store Adapter 계약

공개 전달 엔진이 저장소에 접근하는 유일한 경로입니다.
조회 결과가 없으면 None, 저장소에 연결할 수 없으면 StoreUnavailableError를
발생시킵니다.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from app.core.exceptions import UpstreamUnavailableException
from app.core.logging import get_logger
from app.domains.store.entities import (
    AnalyticsEvent,
    AssetEntity,
    CollectionEntity,
    DocumentEntity,
    DocumentSummary,
    DomainBinding,
    EntityKind,
    ShortLinkEntity,
    WebhookDeliveryLogEntry,
    WebhookEndpoint,
)
from app.domains.store.exceptions import StoreUnavailableError

logger = get_logger(__name__)


class EntityStoreAdapter(ABC):
    """저장소 어댑터 인터페이스"""

    def owns_entity(self, entity_id: str) -> bool:
        """이 어댑터만 쓰기를 처리하는 엔티티인지 여부 (합성 엔티티용)"""
        return False

    # 읽기

    @abstractmethod
    async def get_document_by_slug(
        self, slug: str, workspace_id: Optional[str] = None
    ) -> Optional[DocumentEntity]:
        """슬러그로 문서 조회 (workspace_id가 있으면 해당 워크스페이스로 한정)"""

    @abstractmethod
    async def get_document_by_id(
        self, document_id: str
    ) -> Optional[DocumentEntity]:
        ...

    @abstractmethod
    async def get_asset_by_public_path(
        self, public_path: str
    ) -> Optional[AssetEntity]:
        """공개(is_public)이고 보관되지 않은 에셋만 반환"""

    @abstractmethod
    async def get_collection_by_slug(
        self, slug: str
    ) -> Optional[CollectionEntity]:
        """공개·미보관 에셋 목록을 포함한 컬렉션 반환"""

    @abstractmethod
    async def get_short_link(self, slug: str) -> Optional[ShortLinkEntity]:
        """대상 에셋/컬렉션을 함께 담은 짧은 링크 반환"""

    @abstractmethod
    async def get_domain_binding(self, host: str) -> Optional[DomainBinding]:
        """검증 완료(verified)된 바인딩만 반환"""

    @abstractmethod
    async def list_public_documents(
        self, workspace_id: str, limit: int
    ) -> list[DocumentSummary]:
        """워크스페이스의 공개 문서 (최신순)"""

    @abstractmethod
    async def list_webhook_endpoints(
        self, document_id: str
    ) -> list[WebhookEndpoint]:
        ...

    @abstractmethod
    async def list_webhook_logs(
        self,
        document_id: str,
        skip: int = 0,
        limit: int = 50,
        endpoint_id: Optional[str] = None,
        success: Optional[bool] = None,
    ) -> tuple[list[WebhookDeliveryLogEntry], int]:
        """웹훅 전송 기록 (최신순)과 전체 개수"""

    # 쓰기

    @abstractmethod
    async def increment_view_count(
        self, kind: EntityKind, entity_id: str
    ) -> None:
        """조회수 원자적 증가"""

    @abstractmethod
    async def insert_analytics_event(self, event: AnalyticsEvent) -> None:
        ...

    @abstractmethod
    async def insert_webhook_log(self, entry: WebhookDeliveryLogEntry) -> None:
        ...

    @abstractmethod
    async def update_endpoint_status(
        self, endpoint_id: str, success: bool, at: datetime
    ) -> None:
        """성공 시 failure_count=0, last_triggered_at=at / 실패 시 failure_count+1"""


class FallbackStoreAdapter(EntityStoreAdapter):
    """저장소 장애 시 읽기를 데모 어댑터로 대체하는 어댑터

    대체 어댑터가 합성한 엔티티의 쓰기는 대체 어댑터로 보내고, 그 외 쓰기의
    저장소 장애는 UpstreamUnavailableException(500)으로 변환합니다.
    """

    def __init__(
        self, primary: EntityStoreAdapter, fallback: EntityStoreAdapter
    ):
        self.primary = primary
        self.fallback = fallback

    def owns_entity(self, entity_id: str) -> bool:
        return self.fallback.owns_entity(entity_id)

    def _writer(self, entity_id: str) -> EntityStoreAdapter:
        if self.fallback.owns_entity(entity_id):
            return self.fallback
        return self.primary

    def _log_fallback(self, error: StoreUnavailableError) -> None:
        logger.warning(
            "Store unavailable, serving demo data",
            extra={"operation": error.operation, "reason": error.reason},
        )

    def _write_failed(
        self, error: StoreUnavailableError
    ) -> UpstreamUnavailableException:
        logger.error(
            "Store unavailable for write",
            extra={"operation": error.operation, "reason": error.reason},
        )
        return UpstreamUnavailableException(
            detail={"operation": error.operation}
        )

    async def get_document_by_slug(
        self, slug: str, workspace_id: Optional[str] = None
    ) -> Optional[DocumentEntity]:
        try:
            return await self.primary.get_document_by_slug(slug, workspace_id)
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.get_document_by_slug(slug, workspace_id)

    async def get_document_by_id(
        self, document_id: str
    ) -> Optional[DocumentEntity]:
        try:
            return await self.primary.get_document_by_id(document_id)
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.get_document_by_id(document_id)

    async def get_asset_by_public_path(
        self, public_path: str
    ) -> Optional[AssetEntity]:
        try:
            return await self.primary.get_asset_by_public_path(public_path)
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.get_asset_by_public_path(public_path)

    async def get_collection_by_slug(
        self, slug: str
    ) -> Optional[CollectionEntity]:
        try:
            return await self.primary.get_collection_by_slug(slug)
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.get_collection_by_slug(slug)

    async def get_short_link(self, slug: str) -> Optional[ShortLinkEntity]:
        try:
            return await self.primary.get_short_link(slug)
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.get_short_link(slug)

    async def get_domain_binding(self, host: str) -> Optional[DomainBinding]:
        try:
            return await self.primary.get_domain_binding(host)
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.get_domain_binding(host)

    async def list_public_documents(
        self, workspace_id: str, limit: int
    ) -> list[DocumentSummary]:
        try:
            return await self.primary.list_public_documents(workspace_id, limit)
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.list_public_documents(
                workspace_id, limit
            )

    async def list_webhook_endpoints(
        self, document_id: str
    ) -> list[WebhookEndpoint]:
        try:
            return await self.primary.list_webhook_endpoints(document_id)
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.list_webhook_endpoints(document_id)

    async def list_webhook_logs(
        self,
        document_id: str,
        skip: int = 0,
        limit: int = 50,
        endpoint_id: Optional[str] = None,
        success: Optional[bool] = None,
    ) -> tuple[list[WebhookDeliveryLogEntry], int]:
        try:
            return await self.primary.list_webhook_logs(
                document_id, skip, limit, endpoint_id, success
            )
        except StoreUnavailableError as e:
            self._log_fallback(e)
            return await self.fallback.list_webhook_logs(
                document_id, skip, limit, endpoint_id, success
            )

    async def increment_view_count(
        self, kind: EntityKind, entity_id: str
    ) -> None:
        try:
            await self._writer(entity_id).increment_view_count(kind, entity_id)
        except StoreUnavailableError as e:
            raise self._write_failed(e) from e

    async def insert_analytics_event(self, event: AnalyticsEvent) -> None:
        try:
            await self._writer(event.target_id).insert_analytics_event(event)
        except StoreUnavailableError as e:
            raise self._write_failed(e) from e

    async def insert_webhook_log(self, entry: WebhookDeliveryLogEntry) -> None:
        try:
            await self._writer(entry.document_id).insert_webhook_log(entry)
        except StoreUnavailableError as e:
            raise self._write_failed(e) from e

    async def update_endpoint_status(
        self, endpoint_id: str, success: bool, at: datetime
    ) -> None:
        try:
            await self._writer(endpoint_id).update_endpoint_status(
                endpoint_id, success, at
            )
        except StoreUnavailableError as e:
            raise self._write_failed(e) from e
