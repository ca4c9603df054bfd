"""Webhook Delivery 서비스

문서에 설정된 엔드포인트로 서명된 이벤트를 한 번씩 전송하고,
시도마다 전송 기록을 남기며 엔드포인트 실패 횟수를 갱신합니다.
재시도는 하지 않습니다.
"""

import asyncio
import uuid
from datetime import datetime
from typing import Any, Callable, Optional

import httpx

from app.core.config import Settings
from app.core.logging import get_logger
from app.core.utils.datetime import format_iso, now_utc
from app.domains.store.adapter import EntityStoreAdapter
from app.domains.store.entities import WebhookDeliveryLogEntry, WebhookEndpoint
from app.domains.webhooks.exceptions import (
    InvalidWebhookUrlException,
    WebhookDocumentNotFoundException,
)
from app.domains.webhooks.schemas import (
    DeliveryReport,
    EndpointDeliveryResult,
    WebhookTestResult,
)
from app.domains.webhooks.signing import (
    build_envelope,
    build_headers,
    serialize_envelope,
    sign_payload,
)
from app.domains.webhooks.url_policy import validate_webhook_url

logger = get_logger(__name__)

TEST_EVENT = "test"
DEFAULT_TEST_SECRET = "test_secret"

ClientFactory = Callable[[], httpx.AsyncClient]


class WebhookDeliveryService:
    """웹훅 전송 서비스"""

    def __init__(
        self,
        store: EntityStoreAdapter,
        settings: Settings,
        client_factory: Optional[ClientFactory] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.store = store
        self.settings = settings
        self.client_factory = client_factory or self._default_client
        self.clock = clock

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.webhook_timeout_seconds,
            follow_redirects=False,
        )

    async def deliver(
        self,
        document_id: str,
        event_type: str,
        data: Optional[dict[str, Any]] = None,
    ) -> DeliveryReport:
        """이벤트를 구독 중인 활성 엔드포인트 전체에 전송

        엔드포인트별 전송은 동시에 진행되며, 모두 끝난 뒤 결과를 반환합니다.
        """
        endpoints = [
            endpoint
            for endpoint in await self.store.list_webhook_endpoints(document_id)
            if endpoint.enabled and event_type in endpoint.events
        ]
        if not endpoints:
            return DeliveryReport(attempted=0, delivered=0, results=[])

        async with self.client_factory() as client:
            results = await asyncio.gather(
                *(
                    self._deliver_one(client, document_id, endpoint, event_type, data)
                    for endpoint in endpoints
                )
            )

        report = DeliveryReport(
            attempted=len(results),
            delivered=sum(1 for result in results if result.success),
            results=list(results),
        )
        logger.info(
            "Webhook delivery finished",
            extra={
                "document_id": document_id,
                "event": event_type,
                "attempted": report.attempted,
                "delivered": report.delivered,
            },
        )
        return report

    async def _deliver_one(
        self,
        client: httpx.AsyncClient,
        document_id: str,
        endpoint: WebhookEndpoint,
        event_type: str,
        data: Optional[dict[str, Any]],
    ) -> EndpointDeliveryResult:
        at = self.clock()
        validation = validate_webhook_url(endpoint.url)

        if not validation.valid:
            logger.warning(
                "Webhook URL rejected",
                extra={"endpoint_id": endpoint.id, "reason": validation.error},
            )
            result = EndpointDeliveryResult(
                endpoint_id=endpoint.id,
                success=False,
                error=validation.error or "Invalid URL",
            )
        else:
            status_code, error = await self._post(
                client,
                validation.url,
                build_envelope(event_type, document_id, data, at),
                endpoint.secret,
            )
            result = EndpointDeliveryResult(
                endpoint_id=endpoint.id,
                success=error is None,
                status_code=status_code,
                error=error,
            )

        await self.store.insert_webhook_log(
            WebhookDeliveryLogEntry(
                endpoint_id=endpoint.id,
                document_id=document_id,
                event_type=event_type,
                success=result.success,
                status_code=result.status_code,
                error_message=result.error,
                created_at=at,
            )
        )
        await self.store.update_endpoint_status(endpoint.id, result.success, at)
        return result

    async def _post(
        self,
        client: httpx.AsyncClient,
        url: str,
        envelope: dict[str, Any],
        secret: str,
    ) -> tuple[Optional[int], Optional[str]]:
        """서명된 POST 1회 전송

        Returns:
            (상태 코드, 에러 메시지) 2xx면 에러 메시지는 None
        """
        body = serialize_envelope(envelope)
        headers = build_headers(
            signature=sign_payload(body, secret),
            event=envelope["event"],
            timestamp=envelope["timestamp"],
            user_agent=self.settings.webhook_user_agent,
        )

        try:
            response = await client.post(url, content=body, headers=headers)
        except httpx.TimeoutException:
            logger.warning("Webhook request timed out", extra={"url": url})
            return None, "Timeout"
        except httpx.HTTPError as e:
            logger.warning(
                "Webhook request failed",
                extra={"url": url, "error": f"{type(e).__name__}: {e}"},
            )
            return None, "Network error"

        if response.is_success:
            return response.status_code, None
        return response.status_code, f"HTTP {response.status_code}"

    async def send_test(
        self,
        document_id: str,
        url: str,
        secret: Optional[str] = None,
        endpoint_id: Optional[str] = None,
    ) -> WebhookTestResult:
        """테스트 이벤트 전송

        엔드포인트 실패 횟수는 갱신하지 않습니다. endpoint_id가 있으면
        전송 기록만 남깁니다.

        Raises:
            InvalidWebhookUrlException: URL이 정책에 맞지 않는 경우
            WebhookDocumentNotFoundException: 문서가 없는 경우
        """
        validation = validate_webhook_url(url)
        if not validation.valid:
            raise InvalidWebhookUrlException(validation.error)

        document = await self.store.get_document_by_id(document_id)
        if document is None:
            raise WebhookDocumentNotFoundException(document_id)

        at = self.clock()
        envelope = build_envelope(
            TEST_EVENT,
            document_id,
            {
                "message": "This is a test webhook from Pagelink",
                "documentTitle": document.title,
                "testId": str(uuid.uuid4()),
            },
            at,
        )

        async with self.client_factory() as client:
            status_code, error = await self._post(
                client, validation.url, envelope, secret or DEFAULT_TEST_SECRET
            )

        if endpoint_id:
            await self.store.insert_webhook_log(
                WebhookDeliveryLogEntry(
                    endpoint_id=endpoint_id,
                    document_id=document_id,
                    event_type=TEST_EVENT,
                    success=error is None,
                    status_code=status_code,
                    error_message=error,
                    created_at=at,
                )
            )

        logger.info(
            "Test webhook sent",
            extra={
                "document_id": document_id,
                "status_code": status_code,
                "timestamp": format_iso(at),
            },
        )
        return WebhookTestResult(
            success=error is None, status_code=status_code, error=error
        )
