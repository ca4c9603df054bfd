"""페이지네이션 유틸리티"""

from fastapi import Query


class PageParams:
    """페이지네이션 파라미터 의존성

    Example::

        @router.get("/logs", response_model=ListAPIResponse[WebhookLogResponse])
        async def list_logs(page_params: PageParams = Depends()):
            logs, total = await store.list_webhook_logs(
                document_id,
                skip=page_params.skip,
                limit=page_params.limit,
            )
            return create_list_response(
                data=logs,
                total=total,
                page=page_params.page,
                size=page_params.size,
            )
    """

    def __init__(
        self,
        page: int = Query(1, ge=1, description="페이지 번호"),
        size: int = Query(50, ge=1, le=100, description="페이지 크기"),
    ):
        self.page = page
        self.size = size

    @property
    def skip(self) -> int:
        """오프셋 계산"""
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        """리미트 (size와 동일)"""
        return self.size
