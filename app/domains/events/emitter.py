"""Side-Effect Emitter

조회수 증가, 분석 이벤트 기록, document.viewed 웹훅 발송을 응답과 분리된
asyncio 태스크로 실행합니다. 태스크 실패는 로그로만 남고 응답에 영향을 주지 않습니다.
"""

import asyncio
from typing import Any, Coroutine, Optional

from app.core.logging import get_logger
from app.core.utils.datetime import now_utc
from app.domains.events.schemas import RequestMeta
from app.domains.store.adapter import EntityStoreAdapter
from app.domains.store.entities import (
    AnalyticsEvent,
    ContentEntity,
    DocumentEntity,
    EntityKind,
)
from app.domains.webhooks.service import WebhookDeliveryService

logger = get_logger(__name__)

DOCUMENT_VIEWED_EVENT = "document.viewed"


class SideEffectEmitter:
    """분리 실행(fire-and-forget) 디스패처

    실행 중인 태스크는 완료될 때까지 강한 참조로 보관합니다.
    """

    def __init__(
        self,
        store: EntityStoreAdapter,
        webhook_service: Optional[WebhookDeliveryService] = None,
        emit_document_viewed: bool = True,
    ):
        self.store = store
        self.webhook_service = webhook_service
        self.emit_document_viewed = emit_document_viewed
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(
        self, name: str, coro: Coroutine[Any, Any, Any]
    ) -> asyncio.Task[None]:
        """코루틴을 분리된 태스크로 시작 (결과를 기다리지 않음)"""
        task = asyncio.create_task(self._run(name, coro), name=f"side-effect:{name}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, name: str, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            await coro
        except asyncio.CancelledError:
            logger.warning("Side effect cancelled", extra={"side_effect": name})
            raise
        except Exception:
            logger.exception("Side effect failed", extra={"side_effect": name})

    def record_view(self, entity: ContentEntity, meta: RequestMeta) -> None:
        """조회 1회에 대한 부수 효과 예약"""
        self.dispatch(
            f"increment_view_count:{entity.kind.value}",
            self.store.increment_view_count(entity.kind, entity.id),
        )
        self.dispatch(
            "insert_analytics_event",
            self.store.insert_analytics_event(
                AnalyticsEvent(
                    workspace_id=entity.workspace_id,
                    target_type=EntityKind(entity.kind),
                    target_id=entity.id,
                    event_type="view",
                    created_at=now_utc(),
                    **meta.model_dump(),
                )
            ),
        )

        if (
            isinstance(entity, DocumentEntity)
            and self.emit_document_viewed
            and self.webhook_service is not None
        ):
            self.dispatch(
                DOCUMENT_VIEWED_EVENT,
                self.webhook_service.deliver(
                    entity.id,
                    DOCUMENT_VIEWED_EVENT,
                    {
                        "slug": entity.slug,
                        "title": entity.title,
                        "referrer": meta.referrer,
                        "utm_source": meta.utm_source,
                    },
                ),
            )

    async def drain(self, timeout: Optional[float] = None) -> None:
        """실행 중인 태스크가 끝날 때까지 대기

        timeout이 지나면 남은 태스크를 취소합니다.
        """
        if not self._tasks:
            return

        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        if pending:
            logger.warning(
                "Cancelling unfinished side effects",
                extra={"pending": len(pending)},
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
