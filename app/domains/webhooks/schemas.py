"""Webhooks 도메인 스키마 정의"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from app.core.schemas import BaseSchema

# Request Schemas


class TriggerWebhookRequest(BaseModel):
    """웹훅 수동 발송 요청"""

    event: str = Field(
        ..., min_length=1, max_length=100, description="이벤트 이름"
    )
    data: dict[str, Any] = Field(default_factory=dict, description="이벤트 데이터")


class WebhookTestRequest(BaseModel):
    """테스트 웹훅 발송 요청"""

    url: str = Field(..., min_length=1, description="대상 URL")
    secret: Optional[str] = Field(None, description="서명 비밀키")
    endpoint_id: Optional[str] = Field(
        None, description="기록을 남길 엔드포인트 ID"
    )


# Response Schemas


class EndpointDeliveryResult(BaseModel):
    """엔드포인트별 전송 결과"""

    endpoint_id: str
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


class DeliveryReport(BaseModel):
    """웹훅 발송 결과"""

    attempted: int = Field(..., description="시도한 엔드포인트 수")
    delivered: int = Field(..., description="성공한 엔드포인트 수")
    results: list[EndpointDeliveryResult] = Field(default_factory=list)


class WebhookTestResult(BaseModel):
    """테스트 웹훅 결과"""

    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


class WebhookLogResponse(BaseSchema):
    """웹훅 전송 기록"""

    id: Optional[str] = None
    endpoint_id: str
    event_type: str
    success: bool
    status_code: Optional[int] = None
    error_message: Optional[str] = None
    created_at: datetime
