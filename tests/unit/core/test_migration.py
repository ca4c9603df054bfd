"""마이그레이션 유틸리티 테스트"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.core import migration
from app.core.migration import run_migrations_on_startup, to_sync_url

DATABASE_URL = "postgresql+asyncpg://user:pass@db:5432/pagelink"


def test_to_sync_url():
    """asyncpg URL을 psycopg2 URL로 변환"""
    assert to_sync_url(DATABASE_URL) == (
        "postgresql+psycopg2://user:pass@db:5432/pagelink"
    )


def test_alembic_config_points_to_migrations():
    """Alembic 설정의 스크립트 위치와 URL"""
    config = migration.get_alembic_config(DATABASE_URL)

    assert config.get_main_option("script_location").endswith("migrations")
    assert config.get_main_option("sqlalchemy.url").startswith(
        "postgresql+psycopg2://"
    )


def test_head_revision_exists():
    """마이그레이션 스크립트의 head 리비전"""
    assert migration.get_head_revision(DATABASE_URL) == "8f3c2a1d4b7e"


def test_demo_mode_skips_migrations():
    """DATABASE_URL이 없으면 아무것도 하지 않음"""
    with patch.object(migration, "get_current_revision") as current:
        run_migrations_on_startup(None)

    current.assert_not_called()


def test_up_to_date_does_not_upgrade():
    """이미 최신이면 upgrade를 호출하지 않음"""
    with patch.object(
        migration, "get_current_revision", return_value="8f3c2a1d4b7e"
    ), patch.object(migration.command, "upgrade") as upgrade:
        run_migrations_on_startup(DATABASE_URL)

    upgrade.assert_not_called()


def test_outdated_upgrades_when_auto_migrate():
    """최신이 아니면 자동 마이그레이션"""
    with patch.object(
        migration, "get_current_revision", return_value=None
    ), patch.object(migration.command, "upgrade") as upgrade:
        run_migrations_on_startup(DATABASE_URL, auto_migrate=True)

    upgrade.assert_called_once()


def test_outdated_without_auto_migrate():
    """auto_migrate=False면 상태만 확인"""
    with patch.object(
        migration, "get_current_revision", return_value=None
    ), patch.object(migration.command, "upgrade") as upgrade:
        run_migrations_on_startup(DATABASE_URL, auto_migrate=False)

    upgrade.assert_not_called()


def test_store_failure_outside_production_continues():
    """개발 환경에서는 저장소 연결 실패 시에도 계속 진행"""
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch.object(migration, "get_current_revision", side_effect=error):
        run_migrations_on_startup(DATABASE_URL)


def test_store_failure_in_production_raises():
    """프로덕션에서는 연결 실패 시 시작 중단"""
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    with patch.object(
        migration, "get_current_revision", side_effect=error
    ), patch.object(migration.settings, "app_env", "production"):
        with pytest.raises(RuntimeError):
            run_migrations_on_startup(DATABASE_URL)
