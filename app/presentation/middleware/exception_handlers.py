"""
Exception handlers globais — converte exceções de domínio/aplicação
em respostas JSON padronizadas: {success: false, message, request_id}.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.shared.exceptions import (
    BadRequestError,
    NaoAutenticadoError,
    NotFoundError,
    StoreError,
)
from app.domain.systems.users.authorization_service import AuthorizationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Erro interno do servidor"


def _error_response(request: Request, status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "request_id": getattr(request.state, "request_id", None),
            **extra,
        },
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    # Corpo inteiro ausente, JSON malformado ou não-objeto
    if any(tuple(e.get("loc", ())) == ("body",) or e.get("type") == "json_invalid" for e in errors):
        return "Payload inválido."
    parts = []
    for e in errors:
        field = ".".join(str(p) for p in e.get("loc", ())[1:]) or "payload"
        msg = str(e.get("msg", "")).removeprefix("Value error, ")
        parts.append(f"{field}: {msg}")
    return ", ".join(parts) or "Payload inválido."


def register_exception_handlers(app: FastAPI) -> None:
    """Registra todos os handlers de exceção na app FastAPI."""

    @app.exception_handler(NaoAutenticadoError)
    async def unauthenticated_error_handler(request: Request, exc: NaoAutenticadoError):
        return _error_response(request, status.HTTP_401_UNAUTHORIZED, str(exc))

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        return _error_response(request, status.HTTP_403_FORBIDDEN, str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError):
        return _error_response(request, status.HTTP_404_NOT_FOUND, str(exc), resource=exc.resource)

    @app.exception_handler(BadRequestError)
    async def bad_request_error_handler(request: Request, exc: BadRequestError):
        return _error_response(request, status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        issues = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]
        return _error_response(
            request, status.HTTP_400_BAD_REQUEST, _validation_message(exc), issues=issues,
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _error_response(request, status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = _error_response(request, exc.status_code, str(exc.detail))
        for name, value in (getattr(exc, "headers", None) or {}).items():
            response.headers[name] = value
        return response

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(
            "Store error on %s %s: %s (%r)",
            request.method,
            request.url.path,
            exc,
            exc.__cause__,
        )
        # Detalhes do banco ficam só no log
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            exc,
            traceback.format_exc(),
        )
        return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)
