"""
Schemas Pydantic — camada de Apresentação.

Payloads e respostas da API em camelCase (nomes usados pelo painel),
envelope {success, ...} e error model para OpenAPI.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.application.systems.ouvidoria.resolver import is_valid_uuid


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ════════════════════════════════════════════════════════════════
# ERROR MODEL (para Swagger docs)
# ════════════════════════════════════════════════════════════════
class ErrorResponse(BaseModel):
    success: bool = False
    message: str = Field(..., examples=["Chamado não encontrado."])
    request_id: Optional[str] = None


# ════════════════════════════════════════════════════════════════
# OUVIDORIA
# ════════════════════════════════════════════════════════════════
class StatusChamadoEnum(str, Enum):
    enviado = "Enviado"
    em_atendimento = "Em atendimento"
    finalizado = "Finalizado"


class ChamadoOut(CamelModel):
    id: str
    identificacao_tipo: str
    nome_completo: Optional[str] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    vinculo: Optional[str] = None
    tipo_manifestacao: str
    assunto: str
    mensagem: str
    created_at: Optional[str] = None
    status: StatusChamadoEnum
    responsavel_id: Optional[str] = None
    responsavel_nome: Optional[str] = None
    reply: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ChamadoUpdate(CamelModel):
    status: Optional[StatusChamadoEnum] = None
    responsavel_id: Optional[str] = Field(None, alias="idUsuarioRecebimento")
    reply: Optional[str] = None

    @field_validator("responsavel_id")
    @classmethod
    def _responsavel_uuid(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_uuid(value):
            raise ValueError("ID de usuário inválido.")
        return value

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"example": {"status": "Finalizado", "reply": "<p>Resolvido</p>"}},
    }


class ChamadoResponse(BaseModel):
    success: bool = True
    chamado: ChamadoOut


class ChamadoListResponse(BaseModel):
    success: bool = True
    chamados: list[ChamadoOut]


class ResumoOuvidoriaOut(CamelModel):
    total: int
    nao_recebidos: int
    nao_atendidos: int
    por_status: dict[str, int]


class ResumoOuvidoriaResponse(BaseModel):
    success: bool = True
    resumo: ResumoOuvidoriaOut


# ════════════════════════════════════════════════════════════════
# SETTINGS
# ════════════════════════════════════════════════════════════════
class SettingUpdate(BaseModel):
    key: str = Field(..., min_length=1, examples=["log_ativo"])
    value: Any = Field(..., examples=[True])


class SettingsOut(BaseModel):
    id: int
    nome_site: str
    manutencao: bool
    drmsocial: bool
    log_ativo: Optional[bool] = None
