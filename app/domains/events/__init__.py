"""Events 도메인 모듈

공개 조회 이후의 부수 효과(조회수, 분석, 웹훅)를 분리 실행합니다.
"""

from app.domains.events.emitter import SideEffectEmitter
from app.domains.events.schemas import RequestMeta

__all__ = ["SideEffectEmitter", "RequestMeta"]
