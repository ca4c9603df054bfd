"""Delivery 도메인 헬퍼

해석 결과를 HTTP 상태 코드, 예외, 응답 데이터로 변환합니다.
"""

from typing import cast

from fastapi import status
from starlette.concurrency import run_in_threadpool

from app.core.storage import S3Client
from app.domains.access.evaluator import VERDICT_STATUS, Verdict
from app.domains.access.exceptions import (
    AccessDeniedException,
    EmailNotAllowedException,
)
from app.domains.resolver.schemas import ResolutionResult
from app.domains.store.entities import (
    AssetEntity,
    CollectionEntity,
    DocumentEntity,
    ShortLinkEntity,
)
from app.domains.delivery.schemas import (
    CollectionResponse,
    ShortLinkResponse,
)

DOMAIN_DOCUMENT_CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=300"
PROTECTED_CACHE_CONTROL = "private, no-store"


def status_for(result: ResolutionResult) -> int:
    """해석 결과의 HTTP 상태 코드"""
    if result.verdict == Verdict.OK and not result.email_allowed:
        return status.HTTP_403_FORBIDDEN
    return VERDICT_STATUS[result.verdict]


def raise_for_denial(result: ResolutionResult) -> None:
    """JSON 라우트용: 제공 불가 결과를 예외로 변환"""
    if result.served:
        return
    if result.verdict == Verdict.OK:
        raise EmailNotAllowedException()

    detail = {}
    if result.verdict == Verdict.PASSWORD_REQUIRED:
        detail["password_protected"] = True
    raise AccessDeniedException(result.verdict, detail)


def is_protected(document: DocumentEntity) -> bool:
    """비밀번호 또는 이메일 제한이 있는 문서 (공유 캐시 금지)"""
    return bool(document.password_hash or document.allowed_emails)


async def load_asset_bytes(asset: AssetEntity, storage: S3Client) -> bytes:
    """에셋 원본 바이트 (데모 플레이스홀더는 인라인 바이트)

    Raises:
        StorageException: 오브젝트 스토리지 조회 실패
    """
    if asset.inline_bytes is not None:
        return asset.inline_bytes
    content = await run_in_threadpool(storage.download_object, asset.storage_path)
    return cast(bytes, content)


def short_link_response(link: ShortLinkEntity) -> ShortLinkResponse:
    """짧은 링크 → 대상 URL 정보"""
    if link.asset is not None:
        target_url = link.asset.public_path
        target_name = link.asset.filename
        target_type = "asset"
    else:
        collection = cast(CollectionEntity, link.collection)
        target_url = f"/c/{collection.slug}"
        target_name = collection.name
        target_type = "collection"

    return ShortLinkResponse(
        id=link.id,
        slug=link.slug,
        is_active=link.is_active,
        expires_at=link.expires_at,
        max_views=link.max_views,
        view_count=link.view_count,
        password_protected=bool(link.password_hash),
        target_url=target_url,
        target_name=target_name,
        target_type=target_type,
    )


def collection_response(collection: CollectionEntity) -> CollectionResponse:
    return CollectionResponse(
        id=collection.id,
        slug=collection.slug,
        name=collection.name,
        description=collection.description,
        branding=collection.branding,
        items=collection.items,
    )
