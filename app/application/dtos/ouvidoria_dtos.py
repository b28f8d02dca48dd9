"""DTOs da camada de aplicação para a Ouvidoria — commands e queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


# ════════════════════════════════════════════════════════════════
# COMMANDS
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AtualizarChamadoCommand:
    chamado_id: str
    status: Optional[str] = None
    responsavel_id: Optional[str] = None
    reply: Optional[str] = None

    @property
    def has_changes(self) -> bool:
        # reply vazio ("") conta como alteração: limpa a resposta
        return bool(self.status) or bool(self.responsavel_id) or self.reply is not None


@dataclass(frozen=True)
class IniciarAtendimentoCommand:
    chamado_id: str


# ════════════════════════════════════════════════════════════════
# QUERIES
# ════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GetChamadoQuery:
    chamado_id: str


@dataclass(frozen=True)
class ListarChamadosQuery:
    status: Optional[str] = None
    search: Optional[str] = None


# ════════════════════════════════════════════════════════════════
# RESULT DTOs
# ════════════════════════════════════════════════════════════════

@dataclass
class ChamadoResult:
    id: str
    identificacao_tipo: str
    nome_completo: Optional[str]
    email: Optional[str]
    telefone: Optional[str]
    vinculo: Optional[str]
    tipo_manifestacao: str
    assunto: str
    mensagem: str
    created_at: Optional[str]
    status: str
    responsavel_id: Optional[str]
    responsavel_nome: Optional[str]
    reply: Optional[str]


@dataclass
class ResumoOuvidoriaResult:
    total: int
    nao_recebidos: int
    nao_atendidos: int
    por_status: dict[str, int] = field(default_factory=dict)
