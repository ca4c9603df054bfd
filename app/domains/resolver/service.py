"""Content Resolver

호스트, 경로, 쿼리로부터 주소 지정 방식(커스텀 도메인, 짧은 링크, 슬러그, 공개 경로)을
결정하고 엔티티를 조회한 뒤 접근 판정을 내립니다.

우선순위 (처음 일치하는 규칙 적용):
    1. 검증된 커스텀 도메인
    2. 예약 슬러그 → not_found
    3. 문서 슬러그
    4. 에셋 공개 경로

짧은 링크와 컬렉션은 각자의 API 네임스페이스로만 들어옵니다.
"""

import asyncio
from datetime import datetime
from typing import Callable, Mapping, Optional, Sequence

from app.core.config import Settings
from app.core.logging import get_logger
from app.core.middlewares.custom_domain import is_custom_domain, normalize_host
from app.core.security import verify_password
from app.core.utils.datetime import now_utc
from app.domains.access.evaluator import (
    AccessContext,
    Verdict,
    evaluate,
    is_email_allowed,
)
from app.domains.events.emitter import SideEffectEmitter
from app.domains.events.schemas import RequestMeta
from app.domains.resolver.schemas import (
    AccessCredentials,
    RenderHint,
    ResolutionResult,
    RouteKind,
)
from app.domains.store.adapter import EntityStoreAdapter
from app.domains.store.entities import ContentEntity, ShortLinkEntity

logger = get_logger(__name__)

HOST_ROUTED_KINDS = {RouteKind.DOCUMENT, RouteKind.ASSET, RouteKind.DOMAIN}


def _not_found(
    hint: RenderHint = RenderHint.DENIED, host: Optional[str] = None
) -> ResolutionResult:
    return ResolutionResult(Verdict.NOT_FOUND, None, hint, host=host)


class ContentResolver:
    """공개 요청 해석기"""

    def __init__(
        self,
        store: EntityStoreAdapter,
        settings: Settings,
        emitter: SideEffectEmitter,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.store = store
        self.settings = settings
        self.emitter = emitter
        self.clock = clock
        self.reserved_slugs = frozenset(settings.reserved_slugs)

    async def resolve(
        self,
        host: str,
        path_segments: Sequence[str],
        query_params: Optional[Mapping[str, str]] = None,
        *,
        route: RouteKind = RouteKind.DOCUMENT,
        credentials: Optional[AccessCredentials] = None,
        meta: Optional[RequestMeta] = None,
        record_view: bool = True,
    ) -> ResolutionResult:
        """요청 해석

        Args:
            host: 요청 Host (포트 포함 가능)
            path_segments: 경로 세그먼트
            query_params: 쿼리 파라미터 (UTM 등)
            route: 요청이 들어온 라우트 종류
            credentials: 비밀번호/이메일
            meta: 분석 이벤트용 요청 메타데이터
            record_view: False면 조회수/분석 부수 효과를 예약하지 않음 (HEAD)
        """
        hostname = normalize_host(host or "")
        segments = [segment for segment in path_segments if segment]
        credentials = credentials or AccessCredentials()
        if meta is None:
            meta = RequestMeta.from_headers({}, query_params or {})

        if route == RouteKind.DOMAIN or (
            route in HOST_ROUTED_KINDS
            and is_custom_domain(hostname, self.settings.main_domains)
        ):
            result = await self._resolve_domain(hostname, segments, credentials)
        elif route == RouteKind.SHORT_LINK:
            result = await self._resolve_short_link(segments, credentials)
        elif route == RouteKind.COLLECTION:
            result = await self._resolve_collection(segments, credentials)
        elif not segments or segments[0].lower() in self.reserved_slugs:
            result = _not_found()
        elif route == RouteKind.DOCUMENT:
            document = await self.store.get_document_by_slug(segments[0])
            result = await self._decide(
                document, RenderHint.DOCUMENT_PAGE, credentials
            )
        else:
            asset = await self.store.get_asset_by_public_path(
                "/" + "/".join(segments)
            )
            result = await self._decide(asset, RenderHint.ASSET_BYTES, credentials)

        logger.debug(
            "Resolved request",
            extra={
                "host": hostname,
                "route": route.value,
                "verdict": result.verdict.value,
                "render_hint": result.render_hint.value,
            },
        )

        if record_view and result.served and result.entity is not None:
            self.emitter.record_view(result.entity, meta)

        return result

    async def _resolve_domain(
        self,
        host: str,
        segments: list[str],
        credentials: AccessCredentials,
    ) -> ResolutionResult:
        binding = await self.store.get_domain_binding(host)
        if binding is None or not binding.is_verified:
            return _not_found(RenderHint.DOMAIN_NOT_CONFIGURED, host)

        if binding.document_id:
            document = await self.store.get_document_by_id(binding.document_id)
            result = await self._decide(
                document, RenderHint.DOMAIN_DOCUMENT, credentials
            )
            result.host = host
            return result

        workspace_id = binding.workspace_id
        if workspace_id is None:
            return _not_found(host=host)

        if segments:
            document = await self.store.get_document_by_slug(
                segments[0], workspace_id=workspace_id
            )
            if document is not None:
                result = await self._decide(
                    document, RenderHint.DOMAIN_DOCUMENT, credentials
                )
                result.host = host
                return result

        documents = await self.store.list_public_documents(
            workspace_id, self.settings.landing_page_limit
        )
        if not documents:
            return _not_found(host=host)

        return ResolutionResult(
            Verdict.OK,
            None,
            RenderHint.LANDING,
            host=host,
            documents=documents,
        )

    async def _resolve_short_link(
        self, segments: list[str], credentials: AccessCredentials
    ) -> ResolutionResult:
        if not segments:
            return _not_found()

        link = await self.store.get_short_link(segments[0])
        if link is None or not self._has_live_target(link):
            return _not_found()
        return await self._decide(link, RenderHint.SHORT_LINK_TARGET, credentials)

    async def _resolve_collection(
        self, segments: list[str], credentials: AccessCredentials
    ) -> ResolutionResult:
        if not segments:
            return _not_found()

        collection = await self.store.get_collection_by_slug(segments[0])
        return await self._decide(
            collection, RenderHint.COLLECTION_PAGE, credentials
        )

    @staticmethod
    def _has_live_target(link: ShortLinkEntity) -> bool:
        target = link.asset or link.collection
        return target is not None and not target.is_archived

    async def _decide(
        self,
        entity: Optional[ContentEntity],
        hint: RenderHint,
        credentials: AccessCredentials,
    ) -> ResolutionResult:
        """접근 판정 후 결과 생성 (비밀번호는 필요할 때만 검증)"""
        now = self.clock()
        verdict = evaluate(entity, now, AccessContext(email=credentials.email))

        if (
            verdict == Verdict.PASSWORD_REQUIRED
            and entity is not None
            and entity.password_hash
            and credentials.password
        ):
            verified = await asyncio.to_thread(
                verify_password, credentials.password, entity.password_hash
            )
            if verified:
                verdict = evaluate(
                    entity,
                    now,
                    AccessContext(password_verified=True, email=credentials.email),
                )

        if verdict != Verdict.OK or entity is None:
            return ResolutionResult(verdict, entity, RenderHint.DENIED)

        if not is_email_allowed(entity, credentials.email):
            return ResolutionResult(
                verdict, entity, RenderHint.DENIED, email_allowed=False
            )

        return ResolutionResult(verdict, entity, hint)
