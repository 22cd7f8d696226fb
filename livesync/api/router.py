from fastapi import APIRouter

from livesync.api.http import health_router, methods_router, publications_router
from livesync.api.ws.sync import router as websocket_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(methods_router)
api_router.include_router(publications_router)
api_router.include_router(websocket_router)
