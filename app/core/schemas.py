"""공통 API 응답 스키마

JSON 엔드포인트(짧은 링크, 컬렉션, 웹훅 관리 등)가 공유하는 응답 구조입니다.

Usage::

    from app.core.schemas import create_response, create_list_response

    return create_response(data=link, message="링크 조회 성공")
    return create_list_response(data=logs, total=120, page=2, size=50)
"""

import math
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

DataT = TypeVar("DataT")

DEFAULT_MESSAGE = "요청이 성공적으로 처리되었습니다."


class BaseSchema(BaseModel):
    """기본 스키마 (ORM/엔티티 변환용)"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class APIResponse(BaseModel, Generic[DataT]):
    """단일 데이터 API 응답"""

    success: bool = True
    message: str = DEFAULT_MESSAGE
    data: Optional[DataT] = None


class PageMeta(BaseModel):
    """페이지네이션 메타 정보"""

    total: int = Field(..., description="전체 아이템 수")
    page: int = Field(..., description="현재 페이지")
    size: int = Field(..., description="페이지 크기")
    total_pages: int = Field(..., description="전체 페이지 수")
    has_next: bool = Field(..., description="다음 페이지 존재 여부")
    has_prev: bool = Field(..., description="이전 페이지 존재 여부")


class ListAPIResponse(BaseModel, Generic[DataT]):
    """목록 데이터 API 응답 (페이지네이션 포함)"""

    success: bool = True
    message: str = DEFAULT_MESSAGE
    data: list[DataT] = Field(default_factory=list)
    meta: PageMeta


def create_response(
    data: Optional[DataT] = None,
    message: str = DEFAULT_MESSAGE,
    success: bool = True,
) -> APIResponse[DataT]:
    """API 응답 생성 팩토리 함수"""
    return APIResponse(success=success, message=message, data=data)


def create_list_response(
    data: list[DataT],
    total: int,
    page: int,
    size: int,
    message: str = DEFAULT_MESSAGE,
) -> ListAPIResponse[DataT]:
    """목록 API 응답 생성 팩토리 함수

    Args:
        data: 현재 페이지의 아이템
        total: 전체 아이템 수
        page: 현재 페이지 (1부터)
        size: 페이지 크기
        message: 응답 메시지
    """
    total_pages = math.ceil(total / size) if size > 0 else 0
    return ListAPIResponse(
        success=True,
        message=message,
        data=data,
        meta=PageMeta(
            total=total,
            page=page,
            size=size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )


class ErrorDetail(BaseModel):
    """에러 상세 정보"""

    code: str = Field(..., description="에러 코드")
    message: str = Field(..., description="에러 메시지")
    detail: Optional[dict[str, Any]] = Field(default=None, description="추가 정보")


class ErrorResponse(BaseModel):
    """에러 API 응답

    Example::

        {
            "success": false,
            "message": "비밀번호가 필요합니다.",
            "error": {
                "code": "PASSWORD_REQUIRED",
                "message": "비밀번호가 필요합니다.",
                "detail": {"verdict": "password_required"}
            }
        }
    """

    success: bool = False
    message: str
    error: ErrorDetail
