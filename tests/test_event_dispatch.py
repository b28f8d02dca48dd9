"""Testes do registro/despacho de eventos e do UnitOfWork."""

import pytest

from app.application.shared.event_dispatcher import (
    clear_handlers,
    dispatch_events,
    handlers_for,
    register_handler,
)
from app.application.shared.event_handlers import register_all_handlers
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.ouvidoria.reply_dispatcher import ReplyDispatcher
from app.domain.events.ouvidoria_events import ChamadoRespondido, ChamadoStatusAlterado
from app.domain.systems.ouvidoria.entity import Chamado, StatusChamado
from tests.conftest import FakeEmailSender, TestSessionLocal


def test_registro_idempotente():
    clear_handlers()
    dispatcher = ReplyDispatcher(FakeEmailSender())
    register_all_handlers(dispatcher)
    register_all_handlers(dispatcher)
    # auditoria + e-mail, uma vez cada
    assert len(handlers_for(ChamadoRespondido)) == 2


@pytest.mark.asyncio
async def test_falha_em_handler_nao_impede_os_demais():
    clear_handlers()
    chamados = []

    def quebra(event):
        raise RuntimeError("boom")

    async def registra(event):
        chamados.append(event.chamado_id)

    register_handler(ChamadoStatusAlterado, quebra)
    register_handler(ChamadoStatusAlterado, registra)

    await dispatch_events([ChamadoStatusAlterado(chamado_id="c-1")])
    assert chamados == ["c-1"]


@pytest.mark.asyncio
async def test_uow_so_despacha_apos_commit():
    clear_handlers()
    recebidos = []
    register_handler(ChamadoStatusAlterado, recebidos.append)

    chamado = Chamado(id="c-1", status=StatusChamado.ENVIADO)
    chamado.alterar_status(StatusChamado.FINALIZADO)

    async with TestSessionLocal() as session:
        uow = UnitOfWork(session)
        uow.collect_events_from(chamado)
        assert recebidos == []
        await uow.commit()

    assert [e.new_status for e in recebidos] == ["Finalizado"]
    assert chamado.pending_events == ()


@pytest.mark.asyncio
async def test_uow_rollback_descarta_eventos():
    clear_handlers()
    recebidos = []
    register_handler(ChamadoStatusAlterado, recebidos.append)

    chamado = Chamado(id="c-1")
    chamado.alterar_status(StatusChamado.EM_ATENDIMENTO)

    async with TestSessionLocal() as session:
        uow = UnitOfWork(session)
        uow.collect_events_from(chamado)
        await uow.rollback()
        await uow.commit()

    assert recebidos == []
