"""Implementação concreta do repositório de chamados da Ouvidoria — SQLAlchemy."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.shared.exceptions import StoreError
from app.domain.systems.ouvidoria.entity import Chamado, StatusChamado
from app.domain.systems.ouvidoria.repository import IChamadoRepository
from app.infrastructure.database.models import OuvidoriaModel

# Campo da entidade → coluna da tabela (apenas campos atualizáveis)
_UPDATABLE_COLUMNS: dict[str, str] = {
    "status": "status",
    "responsavel_id": "id_usuario_recebimento",
    "reply": "reply",
}


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreError(f"Erro ao {action}.") from exc


class ChamadoRepository(IChamadoRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_entity(model: OuvidoriaModel) -> Chamado:
        return Chamado(
            id=model.id,
            identificacao_tipo=model.identificacao_tipo,
            nome_completo=model.nome_completo,
            email=model.email,
            telefone=model.telefone,
            vinculo=model.vinculo,
            tipo_manifestacao=model.tipo_manifestacao,
            assunto=model.assunto,
            mensagem=model.mensagem,
            created_at=model.created_at,
            status=StatusChamado.normalize(model.status),
            responsavel_id=model.id_usuario_recebimento,
            reply=model.reply,
        )

    @staticmethod
    def _to_columns(campos: dict[str, Any]) -> dict[str, Any]:
        columns = {}
        for field_name, value in campos.items():
            column = _UPDATABLE_COLUMNS.get(field_name)
            if column is None:
                raise ValueError(f"Campo não atualizável: {field_name}")
            columns[column] = value.value if isinstance(value, StatusChamado) else value
        return columns

    @staticmethod
    def _status_filter(status: StatusChamado):
        if status != StatusChamado.ENVIADO:
            return OuvidoriaModel.status == status.value
        # Registros legados sem status (ou com valor desconhecido) contam como Enviado
        return or_(
            OuvidoriaModel.status.is_(None),
            OuvidoriaModel.status.not_in([s.value for s in StatusChamado if s != StatusChamado.ENVIADO]),
        )

    async def _get_fresh(self, chamado_id: str) -> Optional[OuvidoriaModel]:
        stmt = (
            select(OuvidoriaModel)
            .where(OuvidoriaModel.id == chamado_id)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, chamado_id: str) -> Optional[Chamado]:
        with _store_errors("buscar chamado"):
            model = await self._get_fresh(chamado_id)
        return self._to_entity(model) if model else None

    async def list_all(
        self,
        *,
        chamado_id: Optional[str] = None,
        status: Optional[StatusChamado] = None,
        search: Optional[str] = None,
    ) -> Sequence[Chamado]:
        stmt = select(OuvidoriaModel)
        if chamado_id is not None:
            stmt = stmt.where(OuvidoriaModel.id == chamado_id)
        if status is not None:
            stmt = stmt.where(self._status_filter(status))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                OuvidoriaModel.assunto.ilike(pattern),
                OuvidoriaModel.mensagem.ilike(pattern),
                OuvidoriaModel.nome_completo.ilike(pattern),
            ))
        stmt = stmt.order_by(OuvidoriaModel.created_at.desc())

        with _store_errors("buscar chamados"):
            result = await self._session.execute(stmt)
            return [self._to_entity(m) for m in result.scalars().all()]

    async def update(self, chamado_id: str, campos: dict[str, Any]) -> Optional[Chamado]:
        columns = self._to_columns(campos)
        with _store_errors("atualizar chamado"):
            model = await self._session.get(OuvidoriaModel, chamado_id)
            if not model:
                return None
            for column, value in columns.items():
                setattr(model, column, value)
            await self._session.flush()
            await self._session.refresh(model)
        return self._to_entity(model)

    async def update_if_status(
        self,
        chamado_id: str,
        expected_status: StatusChamado,
        campos: dict[str, Any],
    ) -> Optional[Chamado]:
        stmt = (
            update(OuvidoriaModel)
            .where(OuvidoriaModel.id == chamado_id)
            .where(self._status_filter(expected_status))
            .values(**self._to_columns(campos))
            .execution_options(synchronize_session=False)
        )
        with _store_errors("atualizar chamado"):
            result = await self._session.execute(stmt)
            if result.rowcount == 0:
                return None
            model = await self._get_fresh(chamado_id)
        return self._to_entity(model) if model else None

    async def count_by_status(self) -> dict[StatusChamado, int]:
        stmt = select(OuvidoriaModel.status, func.count(OuvidoriaModel.id)).group_by(OuvidoriaModel.status)
        with _store_errors("contar chamados"):
            result = await self._session.execute(stmt)
            rows = result.all()

        counts = {s: 0 for s in StatusChamado}
        for raw_status, total in rows:
            counts[StatusChamado.normalize(raw_status)] += total
        return counts

    async def create(self, chamado: Chamado) -> Chamado:
        model = OuvidoriaModel(
            id=chamado.id,
            identificacao_tipo=chamado.identificacao_tipo,
            nome_completo=chamado.nome_completo,
            email=chamado.email,
            telefone=chamado.telefone,
            vinculo=chamado.vinculo,
            tipo_manifestacao=chamado.tipo_manifestacao,
            assunto=chamado.assunto,
            mensagem=chamado.mensagem,
            status=chamado.status.value,
            id_usuario_recebimento=chamado.responsavel_id,
            reply=chamado.reply,
        )
        if chamado.created_at is not None:
            model.created_at = chamado.created_at
        with _store_errors("criar chamado"):
            self._session.add(model)
            await self._session.flush()
            await self._session.refresh(model)
        return self._to_entity(model)
