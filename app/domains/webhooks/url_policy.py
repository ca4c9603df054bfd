"""웹훅 대상 URL 검증 (SSRF 방지)

공개 인터넷의 HTTP/HTTPS 주소만 허용합니다.
"""

import ipaddress
import socket
from dataclasses import dataclass
from typing import Optional, Union

import httpx

MAX_URL_LENGTH = 2000
ALLOWED_SCHEMES = {"http", "https"}

BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "metadata.google.internal",  # GCP metadata
    "metadata",
    "169.254.169.254",  # AWS/Azure/GCP metadata
    "169.254.170.2",  # AWS ECS metadata
    "instance-data",
    "kubernetes.default",
    "kubernetes.default.svc",
}

BLOCKED_SUFFIXES = (".internal", ".local", ".localhost", ".localdomain")

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class UrlValidation:
    """URL 검증 결과"""

    valid: bool
    url: str = ""
    error: Optional[str] = None


def _parse_ip(host: str) -> Optional[IPAddress]:
    """호스트를 IP 주소로 해석 (IP 리터럴이 아니면 None)

    IPv4는 OS 리졸버와 같이 inet_aton으로 해석하므로 127.1, 2130706433,
    0x7f000001 같은 축약/정수/16진수 표기도 127.0.0.1이 됩니다.
    """
    try:
        return ipaddress.IPv4Address(socket.inet_aton(host))
    except (OSError, ValueError):
        pass

    try:
        return ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return None


def _is_non_routable_ip(host: str) -> bool:
    address = _parse_ip(host)
    if address is None:
        return False

    # ::ffff:10.0.0.1 같은 IPv4 매핑 주소
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        address = address.ipv4_mapped

    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_reserved
        or address.is_multicast
        or address.is_unspecified
    )


def is_blocked_host(host: str) -> bool:
    """내부/비공개 호스트 여부"""
    host = host.lower().rstrip(".")
    if not host:
        return True
    if host in BLOCKED_HOSTNAMES:
        return True
    if host.endswith(BLOCKED_SUFFIXES):
        return True
    return _is_non_routable_ip(host)


def validate_webhook_url(raw_url: Optional[str]) -> UrlValidation:
    """웹훅 URL 검증

    Returns:
        UrlValidation (valid가 False면 error에 사유)
    """
    if not raw_url or not raw_url.strip():
        return UrlValidation(valid=False, error="URL is required")

    trimmed = raw_url.strip()
    if len(trimmed) > MAX_URL_LENGTH:
        return UrlValidation(valid=False, error="URL is too long")

    try:
        url = httpx.URL(trimmed)
    except httpx.InvalidURL:
        return UrlValidation(valid=False, error="Invalid URL format")

    if url.scheme not in ALLOWED_SCHEMES:
        return UrlValidation(
            valid=False, error="Only HTTP and HTTPS URLs are allowed"
        )

    if is_blocked_host(url.host):
        return UrlValidation(
            valid=False, error="Private/internal URLs are not allowed"
        )

    if url.userinfo:
        return UrlValidation(
            valid=False, error="URLs with credentials are not allowed"
        )

    return UrlValidation(valid=True, url=str(url))
