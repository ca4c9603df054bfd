"""Store 도메인 모듈

공개 전달 엔진이 사용하는 저장소 계약과 구현입니다.

구조:
    - entities.py: 어댑터가 반환하는 Pydantic 엔티티
    - models.py: SQLAlchemy 테이블
    - adapter.py: EntityStoreAdapter 계약, FallbackStoreAdapter
    - repository.py: SqlStoreAdapter
    - demo.py: DemoStoreAdapter
    - dependencies.py: 어댑터 선택과 DI
"""

from app.domains.store.adapter import EntityStoreAdapter, FallbackStoreAdapter
from app.domains.store.demo import DemoStoreAdapter
from app.domains.store.exceptions import StoreUnavailableError

__all__ = [
    "EntityStoreAdapter",
    "FallbackStoreAdapter",
    "DemoStoreAdapter",
    "StoreUnavailableError",
]
