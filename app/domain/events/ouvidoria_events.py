"""Eventos de domínio relacionados a chamados da Ouvidoria."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.domain.events.base import DomainEvent


@dataclass(frozen=True)
class ChamadoAtendimentoIniciado(DomainEvent):
    chamado_id: str = ""
    responsavel_id: Optional[str] = None


@dataclass(frozen=True)
class ChamadoStatusAlterado(DomainEvent):
    chamado_id: str = ""
    old_status: str = ""
    new_status: str = ""
    changed_by: Optional[str] = None


@dataclass(frozen=True)
class ChamadoAtribuido(DomainEvent):
    chamado_id: str = ""
    old_responsavel: Optional[str] = None
    new_responsavel: Optional[str] = None
    assigned_by: Optional[str] = None


@dataclass(frozen=True)
class ChamadoRespondido(DomainEvent):
    """Resposta registrada; carrega os dados de contato para o envio do e-mail."""
    chamado_id: str = ""
    identificacao_tipo: str = ""
    email: Optional[str] = None
    assunto: str = ""
    aberto_em: Optional[datetime] = None
    reply: str = ""
    respondido_por: Optional[str] = None
