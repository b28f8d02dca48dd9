"""Entidade de domínio Chamado (Ouvidoria) — state machine de atendimento e eventos."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from app.domain.events.base import AggregateRoot
from app.domain.events.ouvidoria_events import (
    ChamadoAtendimentoIniciado,
    ChamadoAtribuido,
    ChamadoRespondido,
    ChamadoStatusAlterado,
)
from app.domain.shared.exceptions import TransicaoInvalidaError


class StatusChamado(str, enum.Enum):
    ENVIADO = "Enviado"
    EM_ATENDIMENTO = "Em atendimento"
    FINALIZADO = "Finalizado"

    @classmethod
    def normalize(cls, value: Optional[str]) -> "StatusChamado":
        """Valores nulos ou desconhecidos no banco são lidos como Enviado."""
        try:
            return cls(value)
        except ValueError:
            return cls.ENVIADO


class TipoIdentificacao(str, enum.Enum):
    IDENTIFICADO = "identificado"
    ANONIMO = "anonimo"


# Ordem do ciclo de vida: o status só avança
_ORDEM: dict[StatusChamado, int] = {
    StatusChamado.ENVIADO: 0,
    StatusChamado.EM_ATENDIMENTO: 1,
    StatusChamado.FINALIZADO: 2,
}


@dataclass
class Chamado(AggregateRoot):
    id: Optional[str] = None
    identificacao_tipo: str = TipoIdentificacao.ANONIMO.value
    nome_completo: Optional[str] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    vinculo: Optional[str] = None
    tipo_manifestacao: str = ""
    assunto: str = ""
    mensagem: str = ""
    created_at: Optional[datetime] = None
    status: StatusChamado = StatusChamado.ENVIADO
    responsavel_id: Optional[str] = None
    reply: Optional[str] = None

    def __post_init__(self):
        AggregateRoot.__init__(self)

    # ── State machine ──

    def can_transition_to(self, new_status: StatusChamado) -> bool:
        return _ORDEM[new_status] >= _ORDEM[self.status]

    def alterar_status(self, new_status: StatusChamado, changed_by: Optional[str] = None) -> None:
        if new_status == self.status:
            return
        if not self.can_transition_to(new_status):
            raise TransicaoInvalidaError(
                f"Transição inválida: {self.status.value} → {new_status.value}"
            )
        old_status = self.status
        self.status = new_status
        self._record_event(ChamadoStatusAlterado(
            chamado_id=self.id,
            old_status=old_status.value,
            new_status=new_status.value,
            changed_by=changed_by,
        ))

    def iniciar_atendimento(self, staff_id: str) -> bool:
        """
        Primeira abertura por alguém da equipe: Enviado → Em atendimento,
        atribuindo o chamado a quem abriu. Chamados já em andamento não mudam.
        """
        if self.status != StatusChamado.ENVIADO:
            return False
        self.status = StatusChamado.EM_ATENDIMENTO
        self.responsavel_id = staff_id
        self._record_event(ChamadoAtendimentoIniciado(
            chamado_id=self.id,
            responsavel_id=staff_id,
        ))
        return True

    # ── Atribuição ──

    def atribuir_responsavel(self, user_id: str, assigned_by: Optional[str] = None) -> None:
        old = self.responsavel_id
        self.responsavel_id = user_id
        self._record_event(ChamadoAtribuido(
            chamado_id=self.id,
            old_responsavel=old,
            new_responsavel=user_id,
            assigned_by=assigned_by,
        ))

    # ── Resposta ──

    def registrar_resposta(self, reply: str, respondido_por: Optional[str] = None) -> None:
        """Grava a resposta sem mexer no status; só respostas não vazias geram evento."""
        self.reply = reply
        if not reply.strip():
            return
        self._record_event(ChamadoRespondido(
            chamado_id=self.id,
            identificacao_tipo=self.identificacao_tipo,
            email=self.email,
            assunto=self.assunto,
            aberto_em=self.created_at,
            reply=reply,
            respondido_por=respondido_por,
        ))
