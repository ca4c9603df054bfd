"""Delivery 도메인 라우터

익명 공개 요청을 처리합니다.

- api_router: /api 아래의 커스텀 도메인, 짧은 링크, 컬렉션, 검증 엔드포인트
- public_router: /{slug} 문서 페이지와 /{owner}/{path} 에셋 (가장 마지막에 등록)
"""

from typing import Optional, cast

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import BadRequestException
from app.core.logging import get_logger
from app.core.schemas import APIResponse, create_response
from app.core.storage import S3Client, get_s3_client
from app.domains.access.evaluator import Verdict
from app.domains.access.exceptions import (
    InvalidPasswordException,
    PasswordMissingException,
)
from app.domains.delivery.pages import (
    denied_page,
    domain_not_configured_page,
    inject_badge,
    landing_page,
)
from app.domains.delivery.schemas import (
    CollectionResponse,
    DocumentVerifyResponse,
    ShortLinkResponse,
    VerifyAccessRequest,
)
from app.domains.delivery.service import (
    DOMAIN_DOCUMENT_CACHE_CONTROL,
    PROTECTED_CACHE_CONTROL,
    collection_response,
    is_protected,
    load_asset_bytes,
    raise_for_denial,
    short_link_response,
    status_for,
)
from app.domains.events.schemas import RequestMeta
from app.domains.media.mime import guess_mime_type
from app.domains.media.pipeline import transform
from app.domains.media.schemas import TransformParams
from app.domains.resolver.dependencies import get_content_resolver
from app.domains.resolver.schemas import (
    AccessCredentials,
    RenderHint,
    ResolutionResult,
    RouteKind,
)
from app.domains.resolver.service import ContentResolver
from app.domains.store.entities import (
    AssetEntity,
    CollectionEntity,
    DocumentEntity,
    ShortLinkEntity,
)

logger = get_logger(__name__)

api_router = APIRouter()
public_router = APIRouter()


def _request_context(
    request: Request,
) -> tuple[str, dict[str, str], AccessCredentials, RequestMeta]:
    query = dict(request.query_params)
    return (
        request.headers.get("host", ""),
        query,
        AccessCredentials.from_headers(request.headers),
        RequestMeta.from_headers(request.headers, query),
    )


def _denied_html(result: ResolutionResult) -> HTMLResponse:
    title = None
    if result.entity is not None and result.verdict != Verdict.NOT_FOUND:
        title = getattr(result.entity, "title", None)
    return HTMLResponse(
        denied_page(result.verdict, title, email_denied=not result.email_allowed),
        status_code=status_for(result),
        headers={"Cache-Control": PROTECTED_CACHE_CONTROL},
    )


def _raise_for_password(result: ResolutionResult, data: VerifyAccessRequest) -> None:
    """검증 요청에서 비밀번호 누락/불일치를 구분"""
    if result.verdict == Verdict.PASSWORD_REQUIRED:
        if data.password:
            raise InvalidPasswordException()
        raise PasswordMissingException()


# /api 라우트


@api_router.get("/custom-domain", response_class=HTMLResponse, include_in_schema=False)
@api_router.get(
    "/custom-domain/{path:path}", response_class=HTMLResponse, include_in_schema=False
)
async def serve_custom_domain(
    request: Request,
    path: str = "",
    host: Optional[str] = Query(None, alias="_host"),
    resolver: ContentResolver = Depends(get_content_resolver),
):
    """커스텀 도메인 요청 (미들웨어가 재작성한 요청)"""
    if not host:
        raise BadRequestException(message="호스트 정보가 없습니다.")

    _, query, credentials, meta = _request_context(request)
    result = await resolver.resolve(
        host,
        path.split("/"),
        query,
        route=RouteKind.DOMAIN,
        credentials=credentials,
        meta=meta,
    )

    if result.render_hint == RenderHint.DOMAIN_NOT_CONFIGURED:
        return HTMLResponse(
            domain_not_configured_page(host), status_code=status_for(result)
        )

    if result.render_hint == RenderHint.LANDING:
        return HTMLResponse(landing_page(host, result.documents))

    if not result.served:
        return _denied_html(result)

    document = cast(DocumentEntity, result.entity)
    cache_control = (
        PROTECTED_CACHE_CONTROL
        if is_protected(document)
        else DOMAIN_DOCUMENT_CACHE_CONTROL
    )
    return HTMLResponse(document.html, headers={"Cache-Control": cache_control})


@api_router.get("/e/{token}", response_model=APIResponse[ShortLinkResponse])
async def resolve_short_link(
    token: str,
    request: Request,
    resolver: ContentResolver = Depends(get_content_resolver),
):
    """짧은 링크 해석"""
    host, query, credentials, meta = _request_context(request)
    result = await resolver.resolve(
        host,
        [token],
        query,
        route=RouteKind.SHORT_LINK,
        credentials=credentials,
        meta=meta,
    )
    raise_for_denial(result)
    return create_response(
        data=short_link_response(cast(ShortLinkEntity, result.entity)),
        message="링크를 확인했습니다.",
    )


@api_router.post("/e/{token}/verify", response_model=APIResponse[ShortLinkResponse])
async def verify_short_link(
    token: str,
    data: VerifyAccessRequest,
    request: Request,
    resolver: ContentResolver = Depends(get_content_resolver),
):
    """짧은 링크 비밀번호/이메일 검증"""
    host, query, _, meta = _request_context(request)
    result = await resolver.resolve(
        host,
        [token],
        query,
        route=RouteKind.SHORT_LINK,
        credentials=AccessCredentials(password=data.password, email=data.email),
        meta=meta,
    )
    _raise_for_password(result, data)
    raise_for_denial(result)
    return create_response(
        data=short_link_response(cast(ShortLinkEntity, result.entity)),
        message="검증되었습니다.",
    )


@api_router.get("/c/{slug}", response_model=APIResponse[CollectionResponse])
async def get_public_collection(
    slug: str,
    request: Request,
    resolver: ContentResolver = Depends(get_content_resolver),
):
    """공개 컬렉션 조회"""
    host, query, credentials, meta = _request_context(request)
    result = await resolver.resolve(
        host,
        [slug],
        query,
        route=RouteKind.COLLECTION,
        credentials=credentials,
        meta=meta,
    )
    raise_for_denial(result)
    return create_response(
        data=collection_response(cast(CollectionEntity, result.entity)),
        message="컬렉션을 조회했습니다.",
    )


@api_router.post(
    "/pagelink/documents/{slug}/verify",
    response_model=APIResponse[DocumentVerifyResponse],
)
async def verify_document(
    slug: str,
    data: VerifyAccessRequest,
    request: Request,
    resolver: ContentResolver = Depends(get_content_resolver),
):
    """문서 비밀번호/이메일 검증 후 내용 반환"""
    if not data.password:
        raise PasswordMissingException()

    host, query, _, meta = _request_context(request)
    result = await resolver.resolve(
        host,
        [slug],
        query,
        route=RouteKind.DOCUMENT,
        credentials=AccessCredentials(password=data.password, email=data.email),
        meta=meta,
    )
    _raise_for_password(result, data)
    raise_for_denial(result)

    document = cast(DocumentEntity, result.entity)
    return create_response(
        data=DocumentVerifyResponse(
            title=document.title,
            html=document.html,
            theme=document.theme,
            show_badge=document.show_badge,
        ),
        message="검증되었습니다.",
    )


# 공개 라우트 (catch-all, 가장 마지막에 등록)


@public_router.get("/{slug}", response_class=HTMLResponse, include_in_schema=False)
async def serve_document(
    slug: str,
    request: Request,
    resolver: ContentResolver = Depends(get_content_resolver),
):
    """공개 문서 페이지"""
    host, query, credentials, meta = _request_context(request)
    result = await resolver.resolve(
        host,
        [slug],
        query,
        route=RouteKind.DOCUMENT,
        credentials=credentials,
        meta=meta,
    )
    if not result.served:
        return _denied_html(result)

    document = cast(DocumentEntity, result.entity)
    content = inject_badge(document.html) if document.show_badge else document.html
    headers = {"Cache-Control": PROTECTED_CACHE_CONTROL} if is_protected(document) else {}
    return HTMLResponse(content, headers=headers)


@public_router.api_route(
    "/{owner}/{path:path}", methods=["GET", "HEAD"], include_in_schema=False
)
async def serve_asset(
    owner: str,
    path: str,
    request: Request,
    resolver: ContentResolver = Depends(get_content_resolver),
    storage: S3Client = Depends(get_s3_client),
):
    """공개 에셋 (w, h, q, f, fit, g 변환 파라미터 지원)

    HEAD는 같은 해석과 변환을 수행하고 본문 없이 헤더만 반환합니다.
    """
    is_head = request.method == "HEAD"
    host, query, credentials, meta = _request_context(request)
    result = await resolver.resolve(
        host,
        [owner, *path.split("/")],
        query,
        route=RouteKind.ASSET,
        credentials=credentials,
        meta=meta,
        record_view=not is_head,
    )
    raise_for_denial(result)

    asset = cast(AssetEntity, result.entity)
    original = await load_asset_bytes(asset, storage)
    mime_type = asset.mime_type or guess_mime_type(asset.filename)
    output = await run_in_threadpool(
        transform, original, mime_type, TransformParams.from_query(query)
    )

    headers = {
        **output.headers,
        "Content-Length": str(len(output.content)),
        "X-Content-Type-Options": "nosniff",
        "Accept-Ranges": "bytes",
    }
    if asset.cache_control:
        headers["Cache-Control"] = asset.cache_control
    if asset.password_hash or asset.allowed_emails:
        headers["Cache-Control"] = PROTECTED_CACHE_CONTROL

    return Response(
        content=b"" if is_head else output.content,
        media_type=output.mime_type,
        headers=headers,
    )
