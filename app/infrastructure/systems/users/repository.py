"""Implementação concreta do diretório de usuários — SQLAlchemy."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.systems.users.entity import PerfilUsuario, Usuario
from app.domain.systems.users.repository import IUsuarioRepository
from app.infrastructure.database.models import UsuarioDetalhesModel


class UsuarioRepository(IUsuarioRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # ── Helpers de mapeamento ──
    @staticmethod
    def _to_entity(model: UsuarioDetalhesModel) -> Usuario:
        return Usuario(
            id=model.id,
            display_name=model.display_name,
            email=model.email,
            perfil=PerfilUsuario(model.perfil),
            ativo=model.ativo,
            created_at=model.created_at,
        )

    @staticmethod
    def _to_model(entity: Usuario) -> UsuarioDetalhesModel:
        return UsuarioDetalhesModel(
            id=entity.id,
            display_name=entity.display_name,
            email=entity.email,
            perfil=entity.perfil.value,
            ativo=entity.ativo,
        )

    # ── Interface ──
    async def get_by_id(self, user_id: str) -> Optional[Usuario]:
        model = await self._session.get(UsuarioDetalhesModel, user_id)
        return self._to_entity(model) if model else None

    async def get_display_names(self, ids: Sequence[str]) -> list[dict]:
        if not ids:
            return []
        stmt = (
            select(UsuarioDetalhesModel.id, UsuarioDetalhesModel.display_name)
            .where(UsuarioDetalhesModel.id.in_(list(ids)))
        )
        result = await self._session.execute(stmt)
        return [{"id": row.id, "display_name": row.display_name} for row in result.all()]

    async def create(self, usuario: Usuario) -> Usuario:
        model = self._to_model(usuario)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)
