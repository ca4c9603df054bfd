"""테스트 설정"""

import itertools
import os
import uuid
from datetime import datetime, timedelta
from typing import Any, Generator, Optional
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from docker import from_env
from docker.errors import DockerException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.minio import MinioContainer
from testcontainers.postgres import PostgresContainer

from app.core.config import Settings, settings
from app.core.database import Base
from app.core.security import hash_password
from app.core.storage import S3Client, get_s3_client
from app.core.utils.datetime import is_past, now_utc
from app.domains.events.dependencies import get_side_effect_emitter
from app.domains.events.emitter import SideEffectEmitter
from app.domains.resolver.service import ContentResolver
from app.domains.store.adapter import EntityStoreAdapter
from app.domains.store.dependencies import get_store_adapter
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
from app.main import app

TEST_PASSWORD = "s3cret-pass"
WORKSPACE_ID = "11111111-1111-4111-8111-111111111111"


def normalize_endpoint(endpoint: str) -> str:
    """endpoint URL에 프로토콜이 없으면 http:// 추가"""
    if not endpoint.startswith(("http://", "https://")):
        return f"http://{endpoint}"
    return endpoint


def _is_docker_available() -> bool:
    """로컬 환경에서 Docker 접근 가능 여부 확인"""
    if os.getenv("FORCE_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return True
    if os.getenv("SKIP_DOCKER_TESTS", "").lower() in {"1", "true"}:
        return False

    try:
        client = from_env()
        client.ping()
        return True
    except DockerException:
        return False
    except Exception:
        return False


DOCKER_AVAILABLE = _is_docker_available()


# 인메모리 저장소


class InMemoryStoreAdapter(EntityStoreAdapter):
    """테스트용 저장소 어댑터

    조회 계약(공개 에셋만, 검증된 도메인만 등)은 SQL 어댑터와 같게 유지하고,
    쓰기 작업은 리스트에 기록합니다.
    """

    def __init__(self) -> None:
        self.documents: dict[str, DocumentEntity] = {}
        self.assets: dict[str, AssetEntity] = {}
        self.collections: dict[str, CollectionEntity] = {}
        self.short_links: dict[str, ShortLinkEntity] = {}
        self.bindings: dict[str, DomainBinding] = {}
        self.endpoints: dict[str, list[WebhookEndpoint]] = {}

        self.view_increments: list[tuple[EntityKind, str]] = []
        self.analytics_events: list[AnalyticsEvent] = []
        self.webhook_logs: list[WebhookDeliveryLogEntry] = []
        self.endpoint_updates: list[tuple[str, bool, datetime]] = []

    # 시딩

    def add(self, entity: Any) -> Any:
        if isinstance(entity, DocumentEntity):
            self.documents[entity.id] = entity
        elif isinstance(entity, AssetEntity):
            self.assets[entity.public_path] = entity
        elif isinstance(entity, CollectionEntity):
            self.collections[entity.slug] = entity
        elif isinstance(entity, ShortLinkEntity):
            self.short_links[entity.slug] = entity
        elif isinstance(entity, DomainBinding):
            self.bindings[entity.domain] = entity
        elif isinstance(entity, WebhookEndpoint):
            self.endpoints.setdefault(entity.document_id, []).append(entity)
        else:
            raise TypeError(type(entity))
        return entity

    # 읽기

    async def get_document_by_slug(
        self, slug: str, workspace_id: Optional[str] = None
    ) -> Optional[DocumentEntity]:
        for document in self.documents.values():
            if document.slug != slug:
                continue
            if workspace_id is not None and document.workspace_id != workspace_id:
                continue
            return document
        return None

    async def get_document_by_id(
        self, document_id: str
    ) -> Optional[DocumentEntity]:
        return self.documents.get(document_id)

    async def get_asset_by_public_path(
        self, public_path: str
    ) -> Optional[AssetEntity]:
        asset = self.assets.get(public_path)
        if asset is None or not asset.is_public or asset.is_archived:
            return None
        return asset

    async def get_collection_by_slug(
        self, slug: str
    ) -> Optional[CollectionEntity]:
        return self.collections.get(slug)

    async def get_short_link(self, slug: str) -> Optional[ShortLinkEntity]:
        return self.short_links.get(slug)

    async def get_domain_binding(self, host: str) -> Optional[DomainBinding]:
        binding = self.bindings.get(host.lower())
        if binding is None or not binding.is_verified:
            return None
        return binding

    async def list_public_documents(
        self, workspace_id: str, limit: int
    ) -> list[DocumentSummary]:
        now = now_utc()
        documents = sorted(
            (
                document
                for document in self.documents.values()
                if document.workspace_id == workspace_id
                and document.is_public
                and not is_past(document.expires_at, now)
            ),
            key=lambda document: document.created_at,
            reverse=True,
        )
        return [
            DocumentSummary(
                slug=document.slug,
                title=document.title,
                created_at=document.created_at,
            )
            for document in documents[:limit]
        ]

    async def list_webhook_endpoints(
        self, document_id: str
    ) -> list[WebhookEndpoint]:
        return list(self.endpoints.get(document_id, []))

    async def list_webhook_logs(
        self,
        document_id: str,
        skip: int = 0,
        limit: int = 50,
        endpoint_id: Optional[str] = None,
        success: Optional[bool] = None,
    ) -> tuple[list[WebhookDeliveryLogEntry], int]:
        logs = [
            entry
            for entry in self.webhook_logs
            if entry.document_id == document_id
            and (endpoint_id is None or entry.endpoint_id == endpoint_id)
            and (success is None or entry.success is success)
        ]
        logs.sort(key=lambda entry: entry.created_at, reverse=True)
        return logs[skip : skip + limit], len(logs)

    # 쓰기

    async def increment_view_count(
        self, kind: EntityKind, entity_id: str
    ) -> None:
        self.view_increments.append((kind, entity_id))

    async def insert_analytics_event(self, event: AnalyticsEvent) -> None:
        self.analytics_events.append(event)

    async def insert_webhook_log(self, entry: WebhookDeliveryLogEntry) -> None:
        self.webhook_logs.append(entry.model_copy(update={"id": str(uuid.uuid4())}))

    async def update_endpoint_status(
        self, endpoint_id: str, success: bool, at: datetime
    ) -> None:
        self.endpoint_updates.append((endpoint_id, success, at))


# 엔티티 팩토리


@pytest.fixture(scope="session")
def id_factory():
    """테스트마다 겹치지 않는 UUID 문자열 생성"""
    counter = itertools.count(1)

    def _factory() -> str:
        return str(uuid.UUID(int=next(counter), version=4))

    return _factory


@pytest.fixture(scope="session")
def password_hash() -> str:
    """TEST_PASSWORD의 bcrypt 해시 (세션당 1회 계산)"""
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def make_document(id_factory):
    def _factory(**overrides: Any) -> DocumentEntity:
        values: dict[str, Any] = {
            "id": id_factory(),
            "workspace_id": WORKSPACE_ID,
            "slug": "quarterly-report",
            "title": "Quarterly Report",
            "html": "<html><body><h1>Q3</h1></body></html>",
            "theme": "light",
            "created_at": now_utc() - timedelta(days=1),
        }
        values.update(overrides)
        return DocumentEntity(**values)

    return _factory


@pytest.fixture
def make_asset(id_factory):
    def _factory(**overrides: Any) -> AssetEntity:
        values: dict[str, Any] = {
            "id": id_factory(),
            "workspace_id": WORKSPACE_ID,
            "filename": "guide.pdf",
            "public_path": "/acme/guide.pdf",
            "storage_path": "acme/guide.pdf",
            "mime_type": "application/pdf",
            "size_bytes": 11,
            "created_at": now_utc() - timedelta(days=1),
        }
        values.update(overrides)
        return AssetEntity(**values)

    return _factory


@pytest.fixture
def make_collection(id_factory):
    def _factory(**overrides: Any) -> CollectionEntity:
        values: dict[str, Any] = {
            "id": id_factory(),
            "workspace_id": WORKSPACE_ID,
            "slug": "press-kit",
            "name": "Press Kit",
            "description": "Logos and photos",
            "created_at": now_utc() - timedelta(days=1),
            "items": [
                CollectionItem(
                    asset_id=id_factory(),
                    position=0,
                    filename="logo.png",
                    mime_type="image/png",
                    size_bytes=2048,
                    public_path="/acme/logo.png",
                )
            ],
        }
        values.update(overrides)
        return CollectionEntity(**values)

    return _factory


@pytest.fixture
def make_short_link(id_factory, make_asset):
    def _factory(**overrides: Any) -> ShortLinkEntity:
        asset = overrides.pop("asset", None)
        collection = overrides.pop("collection", None)
        if asset is None and collection is None:
            asset = make_asset()

        values: dict[str, Any] = {
            "id": id_factory(),
            "workspace_id": WORKSPACE_ID,
            "slug": "k9x2p",
            "asset_id": asset.id if asset else None,
            "collection_id": collection.id if collection else None,
            "asset": asset,
            "collection": collection,
            "created_at": now_utc() - timedelta(days=1),
        }
        values.update(overrides)
        return ShortLinkEntity(**values)

    return _factory


@pytest.fixture
def make_binding(id_factory):
    def _factory(domain: str, **overrides: Any) -> DomainBinding:
        values: dict[str, Any] = {
            "id": id_factory(),
            "domain": domain,
            "status": DomainStatus.VERIFIED,
        }
        values.update(overrides)
        return DomainBinding(**values)

    return _factory


# 서비스 픽스처


@pytest.fixture
def test_settings() -> Settings:
    """.env와 무관한 테스트 설정 (데모 모드)"""
    return Settings(_env_file=None, database_url=None)


@pytest.fixture
def memory_store() -> InMemoryStoreAdapter:
    return InMemoryStoreAdapter()


@pytest.fixture
def emitter(memory_store) -> SideEffectEmitter:
    """웹훅 발송 없이 저장소 쓰기만 하는 Emitter"""
    return SideEffectEmitter(memory_store, webhook_service=None)


@pytest.fixture
def resolver(memory_store, test_settings, emitter) -> ContentResolver:
    return ContentResolver(memory_store, test_settings, emitter)


@pytest.fixture
def fake_storage() -> MagicMock:
    """오브젝트 스토리지 Mock (download_object 반환값을 테스트에서 지정)"""
    storage = MagicMock(spec=S3Client)
    storage.download_object.return_value = b"hello world"
    return storage


# NOTE:
# pytest-asyncio(0.21+)는 기본적으로 테스트마다 독립적인 event loop를 생성
# session 스코프 async fixture는 이 구조와 충돌하여 ScopeMismatch 에러를 유발할 수 있음
# 이를 방지하기 위해 async fixture는 모두 function 스코프로 유지
@pytest_asyncio.fixture
async def client(memory_store, emitter, fake_storage):
    """비동기 테스트 클라이언트 (인메모리 저장소, Mock 스토리지 사용)

    base_url의 호스트는 메인 도메인(localhost)이어야 커스텀 도메인으로
    재작성되지 않습니다.
    """
    app.dependency_overrides[get_store_adapter] = lambda: memory_store
    app.dependency_overrides[get_side_effect_emitter] = lambda: emitter
    app.dependency_overrides[get_s3_client] = lambda: fake_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://localhost"
    ) as client:
        yield client

    await emitter.drain(timeout=1.0)
    app.dependency_overrides.clear()


@pytest.fixture
def api_key_header():
    """Internal API Key 헤더"""
    return {"X-Internal-Api-Key": settings.internal_api_key}


# 컨테이너 기반 픽스처


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """PostgreSQL 테스트 컨테이너"""
    if not DOCKER_AVAILABLE:
        pytest.skip("Docker is not available; skipping container-based tests.")

    with PostgresContainer("postgres:16-alpine") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def test_database_url(postgres_container: PostgresContainer) -> str:
    """테스트 데이터베이스 URL"""
    # asyncpg를 위한 URL 생성
    return str(
        postgres_container.get_connection_url().replace(
            "postgresql+psycopg2://", "postgresql+asyncpg://"
        )
    )


@pytest_asyncio.fixture
async def session_maker(test_database_url: str):
    """테스트 데이터베이스 세션 팩토리 (테스트마다 깨끗한 스키마)"""
    engine = create_async_engine(test_database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    await engine.dispose()


@pytest.fixture(scope="session")
def minio_container() -> Generator[MinioContainer, None, None]:
    """MinIO 테스트 컨테이너"""
    if not DOCKER_AVAILABLE:
        pytest.skip("Docker is not available; skipping container-based tests.")

    with MinioContainer() as minio:
        yield minio


@pytest.fixture
def test_s3_client(minio_container: MinioContainer):
    """테스트용 S3 클라이언트 (MinIO 사용)"""
    config = minio_container.get_config()
    endpoint = normalize_endpoint(config["endpoint"])

    s3_settings = Settings(
        _env_file=None,
        s3_endpoint=endpoint,
        s3_access_key=config["access_key"],
        s3_secret_key=config["secret_key"],
        s3_bucket_assets="test-assets",
        s3_region="us-east-1",
        s3_use_ssl=False,
    )

    client = S3Client(s3_settings)

    # 테스트 버킷 생성 (이미 존재하면 무시)
    try:
        client.client.create_bucket(Bucket=s3_settings.s3_bucket_assets)
    except (
        client.client.exceptions.BucketAlreadyOwnedByYou,
        client.client.exceptions.BucketAlreadyExists,
    ):
        # 버킷이 이미 존재하는 경우 무시하고 계속 진행
        pass

    return client
