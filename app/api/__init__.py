"""API 라우터"""

from fastapi import APIRouter

from app.domains.delivery.router import api_router as delivery_api_router
from app.domains.webhooks.router import router as webhooks_router

api_router = APIRouter()

# 도메인 라우터 등록
api_router.include_router(delivery_api_router, tags=["Delivery"])
api_router.include_router(
    webhooks_router, prefix="/pagelink/documents", tags=["Webhooks"]
)
