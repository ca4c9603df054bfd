from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings


class Base(DeclarativeBase):
    """SQLAlchemy 모델 베이스 클래스"""

    pass


def create_engine_and_session_maker(
    database_url: str, echo: bool = False
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """비동기 엔진과 세션 팩토리 생성"""
    engine = create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    return engine, session_maker


# 데이터베이스가 설정되지 않은 경우(데모 모드) 엔진을 만들지 않음
engine: Optional[AsyncEngine] = None
async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None

if settings.database_url:
    engine, async_session_maker = create_engine_and_session_maker(
        settings.database_url, echo=settings.database_echo
    )


async def close_db() -> None:
    """데이터베이스 연결 종료"""
    if engine is not None:
        await engine.dispose()
