"""
Endpoints de configurações do site — /api/settings (somente admin).

Alterar ``log_ativo`` reaplica a configuração de logging da app na hora.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from app.application.shared.unit_of_work import UnitOfWork
from app.domain.shared.exceptions import NotFoundError
from app.domain.systems.users.entity import PerfilUsuario, Usuario
from app.infrastructure.config.logging_config import sync_with_settings
from app.infrastructure.systems.settings.repository import SettingsRepository
from app.presentation.api.deps import get_settings_repo, get_uow, require_perfis
from app.presentation.api.schemas import ErrorResponse, SettingsOut, SettingUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)


@router.get(
    "",
    response_model=SettingsOut,
    summary="Configurações atuais do site",
)
async def get_site_settings(
    repo: SettingsRepository = Depends(get_settings_repo),
    _: Usuario = Depends(require_perfis(PerfilUsuario.ADMIN)),
):
    data = await repo.get()
    if data is None:
        raise NotFoundError("Settings", 1, message="Configurações não encontradas.")
    return data


@router.post(
    "",
    response_model=SettingsOut,
    summary="Alterar uma configuração ({key, value})",
    responses={400: {"model": ErrorResponse}},
)
async def update_site_setting(
    payload: SettingUpdate,
    request: Request,
    repo: SettingsRepository = Depends(get_settings_repo),
    uow: UnitOfWork = Depends(get_uow),
    current_user: Usuario = Depends(require_perfis(PerfilUsuario.ADMIN)),
):
    data = await repo.update(payload.key, payload.value)
    await uow.commit()
    logger.info("Setting %s alterada por %s", payload.key, current_user.id)

    if payload.key == "log_ativo":
        request.app.state.logging_config = sync_with_settings(
            request.app.state.logging_config, data,
        )
    return data
