"""웹훅 페이로드 구성 및 HMAC-SHA256 서명

수신 측은 요청 본문 바이트 그대로 같은 방식으로 서명을 계산해 비교하면 됩니다.

    expected = "sha256=" + hmac_sha256(secret, raw_body).hexdigest()
"""

import hashlib
import hmac
import json
from datetime import datetime
from typing import Any, Optional

from app.core.utils.datetime import format_iso

SIGNATURE_PREFIX = "sha256="

SIGNATURE_HEADER = "X-Webhook-Signature"
EVENT_HEADER = "X-Webhook-Event"
TIMESTAMP_HEADER = "X-Webhook-Timestamp"


def build_envelope(
    event: str,
    document_id: str,
    data: Optional[dict[str, Any]],
    at: datetime,
) -> dict[str, Any]:
    """웹훅 본문 {event, documentId, timestamp, data}"""
    return {
        "event": event,
        "documentId": document_id,
        "timestamp": format_iso(at),
        "data": data or {},
    }


def serialize_envelope(envelope: dict[str, Any]) -> bytes:
    """공백 없는 JSON 직렬화 (서명 대상 바이트)"""
    return json.dumps(
        envelope, separators=(",", ":"), ensure_ascii=False, default=str
    ).encode("utf-8")


def sign_payload(body: bytes, secret: str) -> str:
    """sha256=<hex> 형식의 서명 생성"""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(body: bytes, secret: str, signature: str) -> bool:
    """서명 검증 (상수 시간 비교)"""
    return hmac.compare_digest(sign_payload(body, secret), signature)


def build_headers(
    signature: str, event: str, timestamp: str, user_agent: str
) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "User-Agent": user_agent,
        SIGNATURE_HEADER: signature,
        EVENT_HEADER: event,
        TIMESTAMP_HEADER: timestamp,
    }
