"""Entidade de domínio Usuário da equipe — perfil e regras de acesso."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


class PerfilUsuario(str, enum.Enum):
    ADMIN = "admin"
    SECRETARIA = "secretaria"
    COORDENADOR = "coordenador"
    PROFESSOR = "professor"
    ANALISTA = "analista"


# Perfis com acesso aos chamados da ouvidoria
PERFIS_OUVIDORIA: frozenset[PerfilUsuario] = frozenset({
    PerfilUsuario.ADMIN,
    PerfilUsuario.SECRETARIA,
})

DISPLAY_NAME_PADRAO = "Responsável"


@dataclass
class Usuario:
    id: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    perfil: PerfilUsuario = PerfilUsuario.PROFESSOR
    ativo: bool = True
    created_at: Optional[datetime] = None

    # ── RBAC helpers ──

    def can_manage_ouvidoria(self) -> bool:
        return self.ativo and self.perfil in PERFIS_OUVIDORIA
