"""Router da API — agrega os sub-routers do painel administrativo."""

from fastapi import APIRouter

from app.presentation.api.endpoints.ouvidoria import router as ouvidoria_router
from app.presentation.api.endpoints.settings import router as settings_router

api_router = APIRouter()

api_router.include_router(ouvidoria_router, prefix="/ouvidoria", tags=["📣 Ouvidoria"])
api_router.include_router(settings_router, prefix="/settings", tags=["⚙️ Settings"])
