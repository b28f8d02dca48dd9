"""
Ponto de entrada da API da Ouvidoria (painel administrativo FAFIH).

    uvicorn app.main:app --reload --port 8000

Inclui: middleware (CORS, Request ID, security headers), exception handlers
globais, logging configurável via settings e health check com ping ao banco.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.shared.exceptions import StoreError
from app.infrastructure.config import get_settings
from app.infrastructure.config.logging_config import (
    LoggingConfig,
    setup_logging,
    sync_with_settings,
)
from app.infrastructure.database import AsyncSessionLocal, get_db, ping_database
from app.infrastructure.systems.settings.repository import SettingsRepository
from app.presentation.api.router import api_router
from app.presentation.middleware.exception_handlers import register_exception_handlers
from app.presentation.middleware.request_id import RequestIdMiddleware
from app.presentation.middleware.security_headers import SecurityHeadersMiddleware

settings = get_settings()

# ── Logging ──
logging_config = LoggingConfig.from_settings(settings)
setup_logging(logging_config)
logger = logging.getLogger(__name__)


async def _load_site_settings() -> dict | None:
    """Linha de settings do banco; None se indisponível (startup não depende dela)."""
    try:
        async with AsyncSessionLocal() as session:
            return await SettingsRepository(session).get()
    except (StoreError, OSError) as exc:
        logger.warning("Settings indisponíveis no startup: %s", exc)
        return None


# ════════════════════════════════════════════════════════════════
# LIFESPAN — startup / shutdown
# ════════════════════════════════════════════════════════════════
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    from app.application.shared.event_handlers import register_all_handlers
    register_all_handlers()

    app.state.logging_config = sync_with_settings(
        app.state.logging_config, await _load_site_settings(),
    )
    logger.info("✅ App started — event handlers registered")
    yield
    # Shutdown
    logger.info("🛑 App shutting down")


# ════════════════════════════════════════════════════════════════
# APP
# ════════════════════════════════════════════════════════════════
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "API do painel administrativo da Ouvidoria: listagem e atendimento de "
        "chamados, resposta por e-mail ao manifestante e configurações do site."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
    responses={
        400: {"description": "Requisição inválida"},
        401: {"description": "Sessão ausente ou inválida"},
        403: {"description": "Perfil sem acesso"},
        404: {"description": "Recurso não encontrado"},
        500: {"description": "Erro interno do servidor"},
    },
)
app.state.logging_config = logging_config

# ── Middleware ──
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(SecurityHeadersMiddleware)

# ── Exception handlers globais ──
register_exception_handlers(app)

# ── Rotas ──
app.include_router(api_router, prefix="/api")


# ════════════════════════════════════════════════════════════════
# HEALTH CHECK
# ════════════════════════════════════════════════════════════════
@app.get(
    "/health",
    tags=["❤️ Health"],
    summary="Verificação de saúde da API",
    description="Retorna status da API e conectividade com o banco de dados.",
)
async def health_check(db: AsyncSession = Depends(get_db)):
    db_ok = await ping_database(db)
    return {
        "status": "ok" if db_ok else "degraded",
        "version": settings.APP_VERSION,
        "database": "connected" if db_ok else "disconnected",
        "logs_ativos": app.state.logging_config.enabled,
    }
