"""Side-Effect Emitter 의존성"""

from functools import lru_cache

from app.core.config import settings
from app.domains.events.emitter import SideEffectEmitter
from app.domains.store.dependencies import get_store_adapter
from app.domains.webhooks.service import WebhookDeliveryService


@lru_cache
def _create_emitter() -> SideEffectEmitter:
    store = get_store_adapter()
    return SideEffectEmitter(
        store,
        webhook_service=WebhookDeliveryService(store, settings),
        emit_document_viewed=settings.emit_document_viewed_webhooks,
    )


def get_side_effect_emitter() -> SideEffectEmitter:
    """FastAPI DI용 Emitter 의존성 (프로세스 단위 싱글톤)"""
    return _create_emitter()
