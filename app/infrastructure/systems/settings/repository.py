"""Repositório da linha única de configurações do site (settings.id = 1)."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.shared.exceptions import BadRequestError, StoreError
from app.infrastructure.database.models import SettingsModel

SETTINGS_ID = 1
EDITABLE_KEYS = ("nome_site", "manutencao", "drmsocial", "log_ativo")


class SettingsRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_dict(model: SettingsModel) -> dict[str, Any]:
        return {
            "id": model.id,
            "nome_site": model.nome_site,
            "manutencao": model.manutencao,
            "drmsocial": model.drmsocial,
            "log_ativo": model.log_ativo,
        }

    async def get(self) -> Optional[dict[str, Any]]:
        try:
            model = await self._session.get(SettingsModel, SETTINGS_ID)
        except SQLAlchemyError as exc:
            raise StoreError("Erro ao buscar configurações.") from exc
        return self._to_dict(model) if model else None

    async def update(self, key: str, value: Any) -> dict[str, Any]:
        if key not in EDITABLE_KEYS:
            raise BadRequestError(f"Configuração desconhecida: {key}")
        if key == "nome_site":
            if not isinstance(value, str) or not value.strip():
                raise BadRequestError("nome_site deve ser um texto não vazio")
        elif not isinstance(value, bool) and not (key == "log_ativo" and value is None):
            raise BadRequestError(f"{key} deve ser booleano")
        try:
            model = await self._session.get(SettingsModel, SETTINGS_ID)
            if model is None:
                model = SettingsModel(id=SETTINGS_ID)
                self._session.add(model)
            setattr(model, key, value)
            await self._session.flush()
            await self._session.refresh(model)
        except SQLAlchemyError as exc:
            raise StoreError("Erro ao atualizar configurações.") from exc
        return self._to_dict(model)
