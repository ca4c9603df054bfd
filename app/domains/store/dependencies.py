"""Store 어댑터 선택 및 FastAPI 의존성"""

from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core import database
from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.domains.store.adapter import EntityStoreAdapter, FallbackStoreAdapter
from app.domains.store.demo import DemoStoreAdapter
from app.domains.store.repository import SqlStoreAdapter

logger = get_logger(__name__)


def build_store_adapter(
    settings: Settings,
    session_maker: Optional[async_sessionmaker[AsyncSession]] = None,
) -> EntityStoreAdapter:
    """설정에 따라 어댑터를 한 번 선택

    - DATABASE_URL 미설정: DemoStoreAdapter
    - 설정됨: SqlStoreAdapter (장애 시 읽기는 데모 데이터로 대체)
    """
    if settings.is_demo_mode or session_maker is None:
        logger.info("🧪 데모 모드: 합성 데이터로 응답합니다.")
        return DemoStoreAdapter()

    return FallbackStoreAdapter(
        primary=SqlStoreAdapter(session_maker),
        fallback=DemoStoreAdapter(),
    )


@lru_cache
def _create_store_adapter() -> EntityStoreAdapter:
    return build_store_adapter(settings, database.async_session_maker)


def get_store_adapter() -> EntityStoreAdapter:
    """FastAPI DI용 저장소 어댑터 의존성"""
    return _create_store_adapter()
