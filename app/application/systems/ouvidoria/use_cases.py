"""
Use Cases da Ouvidoria — camada de Aplicação.

Orquestram autorização, repositório, state machine do chamado, resolução
de responsáveis e eventos de domínio (e-mail de resposta após o commit).
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from app.application.dtos.ouvidoria_dtos import (
    AtualizarChamadoCommand,
    ChamadoResult,
    GetChamadoQuery,
    IniciarAtendimentoCommand,
    ListarChamadosQuery,
    ResumoOuvidoriaResult,
)
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.ouvidoria.resolver import ResponsavelResolver
from app.domain.shared.exceptions import BadRequestError, NotFoundError
from app.domain.systems.ouvidoria.entity import Chamado, StatusChamado
from app.domain.systems.ouvidoria.repository import IChamadoRepository
from app.domain.systems.users.authorization_service import AuthorizationService
from app.domain.systems.users.entity import Usuario

logger = logging.getLogger(__name__)


def _not_found(chamado_id: str) -> NotFoundError:
    return NotFoundError("Chamado", chamado_id, message="Chamado não encontrado.")


def _to_result(c: Chamado, responsaveis: Optional[Mapping[str, str]] = None) -> ChamadoResult:
    responsavel_nome = None
    if c.responsavel_id and responsaveis:
        responsavel_nome = responsaveis.get(c.responsavel_id)
    return ChamadoResult(
        id=c.id,
        identificacao_tipo=c.identificacao_tipo,
        nome_completo=c.nome_completo,
        email=c.email,
        telefone=c.telefone,
        vinculo=c.vinculo,
        tipo_manifestacao=c.tipo_manifestacao,
        assunto=c.assunto,
        mensagem=c.mensagem,
        created_at=c.created_at.isoformat() if c.created_at else None,
        status=c.status.value,
        responsavel_id=c.responsavel_id,
        responsavel_nome=responsavel_nome,
        reply=c.reply,
    )


class ListarChamadosUseCase:
    def __init__(self, repo: IChamadoRepository, resolver: ResponsavelResolver) -> None:
        self._repo = repo
        self._resolver = resolver

    async def execute(self, query: ListarChamadosQuery, actor: Usuario) -> list[ChamadoResult]:
        AuthorizationService.ensure_can_manage_ouvidoria(actor)
        status = StatusChamado(query.status) if query.status else None
        chamados = await self._repo.list_all(status=status, search=query.search)
        responsaveis = await self._resolver.resolve(chamados)
        return [_to_result(c, responsaveis) for c in chamados]


class GetChamadoUseCase:
    """Leitura pura: abrir o detalhe não altera o chamado (ver IniciarAtendimentoUseCase)."""

    def __init__(self, repo: IChamadoRepository, resolver: ResponsavelResolver) -> None:
        self._repo = repo
        self._resolver = resolver

    async def execute(self, query: GetChamadoQuery, actor: Usuario) -> ChamadoResult:
        AuthorizationService.ensure_can_manage_ouvidoria(actor)
        chamados = await self._repo.list_all(chamado_id=query.chamado_id)
        if not chamados:
            raise _not_found(query.chamado_id)
        responsaveis = await self._resolver.resolve(chamados)
        return _to_result(chamados[0], responsaveis)


class AtualizarChamadoUseCase:
    def __init__(
        self,
        repo: IChamadoRepository,
        resolver: ResponsavelResolver,
        uow: UnitOfWork,
    ) -> None:
        self._repo = repo
        self._resolver = resolver
        self._uow = uow

    async def execute(self, cmd: AtualizarChamadoCommand, actor: Usuario) -> ChamadoResult:
        AuthorizationService.ensure_can_manage_ouvidoria(actor)
        if not cmd.has_changes:
            raise BadRequestError("Informe ao menos um campo para atualizar.")

        chamado = await self._repo.get_by_id(cmd.chamado_id)
        if not chamado:
            raise _not_found(cmd.chamado_id)

        campos: dict = {}
        if cmd.status:
            chamado.alterar_status(StatusChamado(cmd.status), changed_by=actor.id)
            campos["status"] = chamado.status
        if cmd.responsavel_id:
            chamado.atribuir_responsavel(cmd.responsavel_id, assigned_by=actor.id)
            campos["responsavel_id"] = cmd.responsavel_id
        if cmd.reply is not None:
            chamado.registrar_resposta(cmd.reply, respondido_por=actor.id)
            campos["reply"] = cmd.reply

        updated = await self._repo.update(cmd.chamado_id, campos)
        if not updated:
            raise _not_found(cmd.chamado_id)

        # Eventos (e-mail de resposta) só são despachados após o commit
        self._uow.collect_events_from(chamado)
        await self._uow.commit()

        responsaveis = await self._resolver.resolve([updated])
        return _to_result(updated, responsaveis)


class IniciarAtendimentoUseCase:
    """
    Enviado → Em atendimento na primeira abertura por alguém da equipe,
    atribuindo o chamado a essa pessoa. Idempotente: chamados já em
    andamento (ou finalizados) voltam inalterados.
    """

    def __init__(
        self,
        repo: IChamadoRepository,
        resolver: ResponsavelResolver,
        uow: UnitOfWork,
    ) -> None:
        self._repo = repo
        self._resolver = resolver
        self._uow = uow

    async def execute(self, cmd: IniciarAtendimentoCommand, actor: Usuario) -> ChamadoResult:
        AuthorizationService.ensure_can_manage_ouvidoria(actor)

        chamado = await self._repo.get_by_id(cmd.chamado_id)
        if not chamado:
            raise _not_found(cmd.chamado_id)

        if chamado.iniciar_atendimento(actor.id):
            # UPDATE condicional ao status Enviado: só uma abertura simultânea vence
            updated = await self._repo.update_if_status(
                cmd.chamado_id,
                StatusChamado.ENVIADO,
                {"status": chamado.status, "responsavel_id": actor.id},
            )
            if updated:
                self._uow.collect_events_from(chamado)
                await self._uow.commit()
                chamado = updated
            else:
                await self._uow.rollback()
                logger.info(
                    "Chamado %s já havia sido assumido; mantendo responsável atual",
                    cmd.chamado_id,
                )
                chamado = await self._repo.get_by_id(cmd.chamado_id)
                if not chamado:
                    raise _not_found(cmd.chamado_id)

        responsaveis = await self._resolver.resolve([chamado])
        return _to_result(chamado, responsaveis)


class ResumoOuvidoriaUseCase:
    def __init__(self, repo: IChamadoRepository) -> None:
        self._repo = repo

    async def execute(self, actor: Usuario) -> ResumoOuvidoriaResult:
        AuthorizationService.ensure_can_manage_ouvidoria(actor)
        counts = await self._repo.count_by_status()
        total = sum(counts.values())
        return ResumoOuvidoriaResult(
            total=total,
            nao_recebidos=counts.get(StatusChamado.ENVIADO, 0),
            nao_atendidos=total - counts.get(StatusChamado.FINALIZADO, 0),
            por_status={s.value: counts.get(s, 0) for s in StatusChamado},
        )
