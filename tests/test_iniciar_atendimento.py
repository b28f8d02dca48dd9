"""Início de atendimento com duas aberturas simultâneas: só uma atribuição vence."""

import pytest

from app.application.dtos.ouvidoria_dtos import IniciarAtendimentoCommand
from app.application.shared.event_dispatcher import register_handler
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.ouvidoria.resolver import ResponsavelResolver
from app.application.systems.ouvidoria.use_cases import IniciarAtendimentoUseCase
from app.domain.events.ouvidoria_events import ChamadoAtendimentoIniciado
from app.domain.systems.ouvidoria.entity import StatusChamado
from app.infrastructure.systems.ouvidoria.repository import ChamadoRepository
from app.infrastructure.systems.users.repository import UsuarioRepository
from tests.conftest import TestSessionLocal, create_chamado


class _RepoComConcorrente(ChamadoRepository):
    """Depois da primeira leitura, outra sessão assume o chamado e grava."""

    def __init__(self, session, vencedor_id: str) -> None:
        super().__init__(session)
        self._vencedor_id = vencedor_id
        self._leituras = 0

    async def get_by_id(self, chamado_id):
        chamado = await super().get_by_id(chamado_id)
        self._leituras += 1
        if self._leituras == 1:
            async with TestSessionLocal() as outra:
                await ChamadoRepository(outra).update(chamado_id, {
                    "status": StatusChamado.EM_ATENDIMENTO,
                    "responsavel_id": self._vencedor_id,
                })
                await outra.commit()
        return chamado


@pytest.mark.asyncio
async def test_abertura_que_perde_a_corrida_mantem_o_vencedor(admin, secretaria):
    chamado = await create_chamado()
    iniciados = []
    register_handler(ChamadoAtendimentoIniciado, iniciados.append)

    async with TestSessionLocal() as session:
        repo = _RepoComConcorrente(session, vencedor_id=secretaria.id)
        uc = IniciarAtendimentoUseCase(
            repo, ResponsavelResolver(UsuarioRepository(session)), UnitOfWork(session),
        )
        result = await uc.execute(IniciarAtendimentoCommand(chamado_id=chamado.id), admin)

    assert result.status == "Em atendimento"
    assert result.responsavel_id == secretaria.id
    assert result.responsavel_nome == "Sérgio Secretaria"
    assert iniciados == []

    async with TestSessionLocal() as session:
        gravado = await ChamadoRepository(session).get_by_id(chamado.id)
    assert gravado.responsavel_id == secretaria.id


@pytest.mark.asyncio
async def test_update_condicional_nao_sobrescreve_chamado_assumido(secretaria, admin):
    chamado = await create_chamado(status=StatusChamado.EM_ATENDIMENTO, responsavel_id=secretaria.id)

    async with TestSessionLocal() as session:
        updated = await ChamadoRepository(session).update_if_status(
            chamado.id,
            StatusChamado.ENVIADO,
            {"status": StatusChamado.EM_ATENDIMENTO, "responsavel_id": admin.id},
        )
        await session.rollback()
    assert updated is None
