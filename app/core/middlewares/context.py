"""요청 ID 컨텍스트 관리

백그라운드 태스크(부수 효과)에서도 요청 ID를 로그에 남길 수 있도록
contextvars로 관리합니다. asyncio 태스크는 생성 시점의 컨텍스트를 복사합니다.
"""

import contextvars
import uuid
from typing import Optional

# 요청 ID를 저장하는 컨텍스트 변수
request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)


def get_request_id() -> Optional[str]:
    """현재 요청 ID 반환"""
    return request_id_ctx.get()


def set_request_id(request_id: Optional[str] = None) -> str:
    """요청 ID 설정 (없으면 새로 생성)"""
    if not request_id:
        request_id = str(uuid.uuid4())
    request_id_ctx.set(request_id)
    return request_id
