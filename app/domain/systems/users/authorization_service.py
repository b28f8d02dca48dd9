"""
Regras de acesso ao painel da Ouvidoria.

Só perfis da equipe de atendimento (admin e secretaria), com cadastro
ativo, enxergam e alteram chamados.
"""

from __future__ import annotations

from app.domain.systems.users.entity import Usuario


class AuthorizationError(Exception):
    """Usuário autenticado, mas sem perfil para a operação."""


class AuthorizationService:

    @staticmethod
    def ensure_can_manage_ouvidoria(actor: Usuario) -> None:
        if not actor.can_manage_ouvidoria():
            raise AuthorizationError("Acesso negado.")
