"""웹훅 서명 테스트"""

import hashlib
import hmac
import json
from datetime import datetime, timezone

from app.domains.webhooks.signing import (
    EVENT_HEADER,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    build_envelope,
    build_headers,
    serialize_envelope,
    sign_payload,
    verify_signature,
)

AT = datetime(2025, 3, 4, 5, 6, 7, 890000, tzinfo=timezone.utc)


def test_envelope_shape():
    """본문 구조 {event, documentId, timestamp, data}"""
    envelope = build_envelope("document.viewed", "doc-1", {"slug": "q3"}, AT)

    assert envelope == {
        "event": "document.viewed",
        "documentId": "doc-1",
        "timestamp": "2025-03-04T05:06:07.890Z",
        "data": {"slug": "q3"},
    }


def test_envelope_empty_data():
    assert build_envelope("test", "doc-1", None, AT)["data"] == {}


def test_serialize_is_compact_utf8():
    """공백 없는 JSON, 비ASCII 문자 유지"""
    body = serialize_envelope({"event": "test", "data": {"title": "보고서"}})

    assert body == '{"event":"test","data":{"title":"보고서"}}'.encode("utf-8")
    assert json.loads(body)["data"]["title"] == "보고서"


def test_signature_matches_receiver_computation():
    """수신 측과 같은 방식으로 계산한 서명"""
    body = serialize_envelope(build_envelope("test", "doc-1", {}, AT))

    expected = hmac.new(b"whsec", body, hashlib.sha256).hexdigest()

    assert sign_payload(body, "whsec") == f"sha256={expected}"


def test_verify_signature():
    body = b'{"event":"test"}'
    signature = sign_payload(body, "whsec")

    assert verify_signature(body, "whsec", signature) is True
    assert verify_signature(body, "other", signature) is False
    assert verify_signature(body + b" ", "whsec", signature) is False


def test_headers():
    headers = build_headers(
        signature="sha256=abc",
        event="test",
        timestamp="2025-03-04T05:06:07.890Z",
        user_agent="Pagelink-Webhooks/1.0",
    )

    assert headers["Content-Type"] == "application/json"
    assert headers["User-Agent"] == "Pagelink-Webhooks/1.0"
    assert headers[SIGNATURE_HEADER] == "sha256=abc"
    assert headers[EVENT_HEADER] == "test"
    assert headers[TIMESTAMP_HEADER] == "2025-03-04T05:06:07.890Z"
