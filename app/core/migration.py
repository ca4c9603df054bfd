"""마이그레이션 자동 실행 유틸리티

백엔드 저장소가 설정된 경우에만 서버 시작 시 Alembic 마이그레이션을 확인합니다.
"""

from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def to_sync_url(database_url: str) -> str:
    """async 드라이버 URL을 alembic용 sync(psycopg2) URL로 변환"""
    return database_url.replace("postgresql+asyncpg", "postgresql+psycopg2")


def get_alembic_config(database_url: str) -> Config:
    """Alembic 설정 객체 반환"""
    project_root = Path(__file__).resolve().parents[2]

    config = Config(str(project_root / "alembic.ini"))
    config.set_main_option("script_location", str(project_root / "migrations"))
    config.set_main_option("sqlalchemy.url", to_sync_url(database_url))
    return config


def get_current_revision(database_url: str) -> Optional[str]:
    """현재 데이터베이스의 마이그레이션 버전 조회"""
    engine = create_engine(to_sync_url(database_url))
    try:
        with engine.connect() as conn:
            rev = MigrationContext.configure(conn).get_current_revision()
            return str(rev) if rev else None
    finally:
        engine.dispose()


def get_head_revision(database_url: str) -> Optional[str]:
    """최신 마이그레이션 버전 조회"""
    script = ScriptDirectory.from_config(get_alembic_config(database_url))
    head = script.get_current_head()
    return str(head) if head else None


def run_migrations_on_startup(
    database_url: Optional[str], auto_migrate: bool = True
) -> None:
    """서버 시작 시 마이그레이션 확인 및 실행

    Args:
        database_url: 백엔드 저장소 URL (None이면 데모 모드로 건너뜀)
        auto_migrate: True면 자동 마이그레이션, False면 상태만 확인
    """
    if not database_url:
        logger.info("🧪 데모 모드: 마이그레이션을 건너뜁니다.")
        return

    try:
        current = get_current_revision(database_url)
        head = get_head_revision(database_url)

        if current == head:
            logger.info(f"✅ 마이그레이션 상태: 최신 (revision: {current})")
            return

        logger.warning(
            f"⚠️ 마이그레이션이 최신 상태가 아닙니다. (현재: {current}, 최신: {head})"
        )
        if auto_migrate:
            command.upgrade(get_alembic_config(database_url), "head")
            logger.info(f"✅ 마이그레이션 완료 (revision: {head})")

    except (SQLAlchemyError, OSError) as e:
        logger.error(f"❌ 마이그레이션 확인 실패: {e}")
        # 저장소 장애 시에도 읽기 경로는 데모 데이터로 응답할 수 있음
        if settings.is_production:
            raise RuntimeError("프로덕션 환경에서 마이그레이션 확인 실패") from e
        logger.warning("⚠️ 개발 환경이므로 서버를 계속 시작합니다.")
