"""
Modelos SQLAlchemy — camada de Infraestrutura.

Tabelas:
  - usuarios_detalhes  (diretório de usuários da equipe, com perfil)
  - ouvidoria          (chamados da ouvidoria)
  - settings           (configurações do site, linha única id=1)
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    func,
)

from app.infrastructure.database.session import Base


def _uuid_str() -> str:
    return str(uuid.uuid4())


# ────────────────────────────────────────────────────────────────
# USUÁRIOS (diretório)
# ────────────────────────────────────────────────────────────────
class UsuarioDetalhesModel(Base):
    __tablename__ = "usuarios_detalhes"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    display_name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, nullable=True, index=True)
    perfil = Column(String(50), nullable=False, server_default="professor", index=True)
    ativo = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


# ────────────────────────────────────────────────────────────────
# OUVIDORIA
# ────────────────────────────────────────────────────────────────
class OuvidoriaModel(Base):
    __tablename__ = "ouvidoria"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    identificacao_tipo = Column(String(50), nullable=False)
    nome_completo = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    telefone = Column(String(50), nullable=True)
    vinculo = Column(String(100), nullable=True)
    tipo_manifestacao = Column(String(100), nullable=False)
    assunto = Column(String(255), nullable=False)
    mensagem = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    status = Column(String(50), nullable=True, server_default="Enviado", index=True)
    # Referência fraca: sem FK, o diretório de usuários é só consulta
    id_usuario_recebimento = Column(String(36), nullable=True, index=True)
    reply = Column(Text, nullable=True)


# ────────────────────────────────────────────────────────────────
# SETTINGS
# ────────────────────────────────────────────────────────────────
class SettingsModel(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    nome_site = Column(String(255), nullable=False, server_default="FAFIH")
    manutencao = Column(Boolean, nullable=False, default=False)
    drmsocial = Column(Boolean, nullable=False, default=False)
    log_ativo = Column(Boolean, nullable=True)
