from fastapi import APIRouter

from onetap.webhooks.router import router as webhooks_router

api_router = APIRouter()
api_router.include_router(webhooks_router, prefix="/webhooks", tags=["webhooks"])
