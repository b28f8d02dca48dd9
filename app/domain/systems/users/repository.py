"""Interface (porta) do diretório de usuários — camada de domínio."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .entity import Usuario


class IUsuarioRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[Usuario]:
        ...

    @abstractmethod
    async def get_display_names(self, ids: Sequence[str]) -> list[dict]:
        """Busca em lote: [{"id": ..., "display_name": ...}]."""
        ...

    @abstractmethod
    async def create(self, usuario: Usuario) -> Usuario:
        ...
