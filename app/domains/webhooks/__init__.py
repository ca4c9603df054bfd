"""Webhooks 도메인 모듈

문서 이벤트를 외부 엔드포인트로 전송합니다.

구조:
    - url_policy.py: SSRF 방지 URL 검증
    - signing.py: 페이로드 구성 및 HMAC-SHA256 서명
    - service.py: 전송, 기록, 실패 횟수 갱신
    - router.py: 운영자 API (Internal API Key)
"""

from app.domains.webhooks.service import WebhookDeliveryService
from app.domains.webhooks.signing import sign_payload, verify_signature
from app.domains.webhooks.url_policy import validate_webhook_url

__all__ = [
    "WebhookDeliveryService",
    "sign_payload",
    "verify_signature",
    "validate_webhook_url",
]
