"""
Endpoints da Ouvidoria — /api/ouvidoria

Listagem/detalhe, atualização parcial (status, responsável, resposta),
início de atendimento e resumo para o dashboard.
"""

from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, Query

from app.application.dtos.ouvidoria_dtos import (
    AtualizarChamadoCommand,
    ChamadoResult,
    GetChamadoQuery,
    IniciarAtendimentoCommand,
    ListarChamadosQuery,
)
from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.ouvidoria.resolver import ResponsavelResolver
from app.application.systems.ouvidoria.use_cases import (
    AtualizarChamadoUseCase,
    GetChamadoUseCase,
    IniciarAtendimentoUseCase,
    ListarChamadosUseCase,
    ResumoOuvidoriaUseCase,
)
from app.domain.shared.exceptions import BadRequestError
from app.domain.systems.users.entity import Usuario
from app.infrastructure.systems.ouvidoria.repository import ChamadoRepository
from app.presentation.api.deps import (
    get_chamado_repo,
    get_current_usuario,
    get_resolver,
    get_uow,
)
from app.presentation.api.schemas import (
    ChamadoListResponse,
    ChamadoOut,
    ChamadoResponse,
    ChamadoUpdate,
    ErrorResponse,
    ResumoOuvidoriaOut,
    ResumoOuvidoriaResponse,
    StatusChamadoEnum,
)

router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


def _to_out(r: ChamadoResult) -> ChamadoOut:
    return ChamadoOut.model_validate(r)


def _require_id(chamado_id: Optional[str]) -> str:
    if not chamado_id or not chamado_id.strip():
        raise BadRequestError("Informe o ID do chamado.")
    return chamado_id.strip()


@router.get(
    "",
    response_model=Union[ChamadoResponse, ChamadoListResponse],
    summary="Listar chamados (ou um chamado via ?id=)",
    description="Mais recentes primeiro. Filtros opcionais: status e search (assunto, mensagem, nome).",
)
async def list_chamados(
    chamado_id: Optional[str] = Query(default=None, alias="id", description="ID do chamado"),
    status: Optional[StatusChamadoEnum] = Query(default=None, description="Filtrar por status"),
    search: Optional[str] = Query(default=None, max_length=255, description="Busca textual"),
    repo: ChamadoRepository = Depends(get_chamado_repo),
    resolver: ResponsavelResolver = Depends(get_resolver),
    current_user: Usuario = Depends(get_current_usuario),
):
    if chamado_id:
        uc = GetChamadoUseCase(repo, resolver)
        result = await uc.execute(GetChamadoQuery(chamado_id=chamado_id), current_user)
        return ChamadoResponse(chamado=_to_out(result))

    uc = ListarChamadosUseCase(repo, resolver)
    results = await uc.execute(
        ListarChamadosQuery(status=status.value if status else None, search=search),
        current_user,
    )
    return ChamadoListResponse(chamados=[_to_out(r) for r in results])


@router.patch(
    "",
    response_model=ChamadoResponse,
    summary="Atualizar chamado (status, responsável e/ou resposta)",
    description=(
        "Atualização parcial: só os campos enviados mudam. "
        "Uma resposta não vazia dispara e-mail ao manifestante identificado."
    ),
)
async def update_chamado(
    payload: ChamadoUpdate,
    chamado_id: Optional[str] = Query(default=None, alias="id", description="ID do chamado"),
    repo: ChamadoRepository = Depends(get_chamado_repo),
    resolver: ResponsavelResolver = Depends(get_resolver),
    uow: UnitOfWork = Depends(get_uow),
    current_user: Usuario = Depends(get_current_usuario),
):
    uc = AtualizarChamadoUseCase(repo, resolver, uow)
    result = await uc.execute(
        AtualizarChamadoCommand(
            chamado_id=_require_id(chamado_id),
            status=payload.status.value if payload.status else None,
            responsavel_id=payload.responsavel_id,
            reply=payload.reply,
        ),
        current_user,
    )
    return ChamadoResponse(chamado=_to_out(result))


@router.post(
    "/iniciar-atendimento",
    response_model=ChamadoResponse,
    summary="Iniciar atendimento (Enviado → Em atendimento, atribuído a quem abriu)",
    description="Idempotente: chamados que já saíram de Enviado voltam inalterados.",
)
async def iniciar_atendimento(
    chamado_id: Optional[str] = Query(default=None, alias="id", description="ID do chamado"),
    repo: ChamadoRepository = Depends(get_chamado_repo),
    resolver: ResponsavelResolver = Depends(get_resolver),
    uow: UnitOfWork = Depends(get_uow),
    current_user: Usuario = Depends(get_current_usuario),
):
    uc = IniciarAtendimentoUseCase(repo, resolver, uow)
    result = await uc.execute(
        IniciarAtendimentoCommand(chamado_id=_require_id(chamado_id)),
        current_user,
    )
    return ChamadoResponse(chamado=_to_out(result))


@router.get(
    "/resumo",
    response_model=ResumoOuvidoriaResponse,
    summary="Resumo de chamados por status (dashboard)",
)
async def resumo_ouvidoria(
    repo: ChamadoRepository = Depends(get_chamado_repo),
    current_user: Usuario = Depends(get_current_usuario),
):
    uc = ResumoOuvidoriaUseCase(repo)
    result = await uc.execute(current_user)
    return ResumoOuvidoriaResponse(resumo=ResumoOuvidoriaOut.model_validate(result, from_attributes=True))
