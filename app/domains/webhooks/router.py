"""Webhooks 도메인 라우터

문서 웹훅 수동 발송, 테스트 발송, 전송 기록 조회 API입니다.
운영자용이므로 모든 엔드포인트에 Internal API Key가 필요합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.config import settings
from app.core.dependencies import verify_internal_api_key
from app.core.schemas import (
    APIResponse,
    ListAPIResponse,
    create_list_response,
    create_response,
)
from app.core.utils.pagination import PageParams
from app.domains.store.adapter import EntityStoreAdapter
from app.domains.store.dependencies import get_store_adapter
from app.domains.webhooks.schemas import (
    DeliveryReport,
    TriggerWebhookRequest,
    WebhookLogResponse,
    WebhookTestRequest,
    WebhookTestResult,
)
from app.domains.webhooks.service import WebhookDeliveryService

router = APIRouter(dependencies=[Depends(verify_internal_api_key)])


def get_webhook_service(
    store: EntityStoreAdapter = Depends(get_store_adapter),
) -> WebhookDeliveryService:
    """WebhookDeliveryService 의존성"""
    return WebhookDeliveryService(store, settings)


@router.post(
    "/{document_id}/webhooks",
    response_model=APIResponse[DeliveryReport],
)
async def trigger_webhook(
    document_id: str,
    data: TriggerWebhookRequest,
    service: WebhookDeliveryService = Depends(get_webhook_service),
):
    """웹훅 수동 발송"""
    report = await service.deliver(document_id, data.event, data.data)
    return create_response(
        data=report,
        message=f"{report.delivered}/{report.attempted}개 엔드포인트에 전송했습니다.",
    )


@router.post(
    "/{document_id}/webhooks/test",
    response_model=APIResponse[WebhookTestResult],
)
async def send_test_webhook(
    document_id: str,
    data: WebhookTestRequest,
    service: WebhookDeliveryService = Depends(get_webhook_service),
):
    """테스트 웹훅 발송"""
    result = await service.send_test(
        document_id, data.url, data.secret, data.endpoint_id
    )
    message = (
        "테스트 웹훅을 전송했습니다."
        if result.success
        else "테스트 웹훅 전송에 실패했습니다."
    )
    return create_response(data=result, message=message, success=result.success)


@router.get(
    "/{document_id}/webhooks/logs",
    response_model=ListAPIResponse[WebhookLogResponse],
)
async def list_webhook_logs(
    document_id: str,
    endpoint_id: Optional[str] = Query(None, description="엔드포인트 ID"),
    success: Optional[bool] = Query(None, description="성공/실패 필터"),
    page_params: PageParams = Depends(),
    store: EntityStoreAdapter = Depends(get_store_adapter),
):
    """웹훅 전송 기록 조회 (최신순)"""
    logs, total = await store.list_webhook_logs(
        document_id,
        skip=page_params.skip,
        limit=page_params.limit,
        endpoint_id=endpoint_id,
        success=success,
    )
    return create_list_response(
        data=[WebhookLogResponse.model_validate(log) for log in logs],
        total=total,
        page=page_params.page,
        size=page_params.size,
        message="웹훅 전송 기록을 조회했습니다.",
    )
