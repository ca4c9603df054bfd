"""Resolver 의존성"""

from fastapi import Depends

from app.core.config import settings
from app.domains.events.dependencies import get_side_effect_emitter
from app.domains.events.emitter import SideEffectEmitter
from app.domains.resolver.service import ContentResolver
from app.domains.store.adapter import EntityStoreAdapter
from app.domains.store.dependencies import get_store_adapter


def get_content_resolver(
    store: EntityStoreAdapter = Depends(get_store_adapter),
    emitter: SideEffectEmitter = Depends(get_side_effect_emitter),
) -> ContentResolver:
    """ContentResolver 의존성"""
    return ContentResolver(store, settings, emitter)
