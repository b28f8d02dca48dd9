"""
Dependências de sessão (JWT em cookie), RBAC e factories de DI.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyCookie
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.shared.unit_of_work import UnitOfWork
from app.application.systems.ouvidoria.resolver import ResponsavelResolver, is_valid_uuid
from app.domain.shared.exceptions import NaoAutenticadoError
from app.domain.systems.users.authorization_service import AuthorizationError
from app.domain.systems.users.entity import PerfilUsuario, Usuario
from app.infrastructure.config import get_settings
from app.infrastructure.database import get_db
from app.infrastructure.systems.ouvidoria.repository import ChamadoRepository
from app.infrastructure.systems.settings.repository import SettingsRepository
from app.infrastructure.systems.users.repository import UsuarioRepository

settings = get_settings()
session_cookie = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)


# ════════════════════════════════════════════════════════════════
# JWT — token de sessão
# ════════════════════════════════════════════════════════════════

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decodifica e valida um token JWT. Raises JWTError."""
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


async def get_profile_from_token(token: Optional[str], repo: UsuarioRepository) -> Optional[Usuario]:
    """Usuário ativo dono do token, ou None se o token for inválido/expirado."""
    if not token:
        return None
    try:
        payload = decode_token(token)
    except JWTError:
        return None
    user_id = payload.get("sub")
    if payload.get("type") != "access" or not is_valid_uuid(user_id):
        return None

    usuario = await repo.get_by_id(user_id)
    if usuario is None or not usuario.ativo:
        return None
    return usuario


# ════════════════════════════════════════════════════════════════
# DI FACTORIES — Repositórios, UoW e serviços
# ════════════════════════════════════════════════════════════════

def get_uow(db: AsyncSession = Depends(get_db)) -> UnitOfWork:
    return UnitOfWork(db)


def get_usuario_repo(db: AsyncSession = Depends(get_db)) -> UsuarioRepository:
    return UsuarioRepository(db)


def get_chamado_repo(db: AsyncSession = Depends(get_db)) -> ChamadoRepository:
    return ChamadoRepository(db)


def get_settings_repo(db: AsyncSession = Depends(get_db)) -> SettingsRepository:
    return SettingsRepository(db)


def get_resolver(user_repo: UsuarioRepository = Depends(get_usuario_repo)) -> ResponsavelResolver:
    return ResponsavelResolver(user_repo)


# ════════════════════════════════════════════════════════════════
# FASTAPI DEPENDENCIES — sessão e RBAC
# ════════════════════════════════════════════════════════════════

async def get_current_usuario(
    token: Optional[str] = Depends(session_cookie),
    repo: UsuarioRepository = Depends(get_usuario_repo),
) -> Usuario:
    """Extrai o usuário do cookie de sessão; 401 se ausente ou inválido."""
    usuario = await get_profile_from_token(token, repo)
    if usuario is None:
        raise NaoAutenticadoError()
    return usuario


def require_perfis(*perfis: PerfilUsuario):
    """Dependency factory para RBAC baseado em perfis."""
    async def _check(current_user: Usuario = Depends(get_current_usuario)) -> Usuario:
        if current_user.perfil not in perfis:
            raise AuthorizationError("Acesso negado.")
        return current_user
    return _check
