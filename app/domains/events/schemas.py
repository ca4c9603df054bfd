"""분석 이벤트에 첨부할 요청 메타데이터"""

from typing import Mapping, Optional

from pydantic import BaseModel


class RequestMeta(BaseModel):
    """조회 요청 메타데이터 (IP, User-Agent, Referer, UTM)"""

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None

    @classmethod
    def from_headers(
        cls, headers: Mapping[str, str], query: Mapping[str, str]
    ) -> "RequestMeta":
        """프록시 헤더 기준으로 클라이언트 정보 추출

        IP는 X-Forwarded-For의 첫 번째 값, 없으면 X-Real-IP를 사용합니다.
        """
        forwarded = headers.get("x-forwarded-for")
        ip_address = (
            forwarded.split(",")[0].strip()
            if forwarded
            else headers.get("x-real-ip")
        )
        return cls(
            ip_address=ip_address or None,
            user_agent=headers.get("user-agent"),
            referrer=headers.get("referer"),
            utm_source=query.get("utm_source"),
            utm_medium=query.get("utm_medium"),
            utm_campaign=query.get("utm_campaign"),
        )
