from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from .entity import Chamado, StatusChamado


class IChamadoRepository(ABC):

    @abstractmethod
    async def get_by_id(self, chamado_id: str) -> Optional[Chamado]:
        ...

    @abstractmethod
    async def list_all(
        self,
        *,
        chamado_id: Optional[str] = None,
        status: Optional[StatusChamado] = None,
        search: Optional[str] = None,
    ) -> Sequence[Chamado]:
        """Mais recentes primeiro (created_at desc)."""
        ...

    @abstractmethod
    async def update(self, chamado_id: str, campos: dict[str, Any]) -> Optional[Chamado]:
        """Atualização parcial, só as colunas informadas. None se o id não existe."""
        ...

    @abstractmethod
    async def update_if_status(
        self,
        chamado_id: str,
        expected_status: StatusChamado,
        campos: dict[str, Any],
    ) -> Optional[Chamado]:
        """Atualização condicional ao status atual. None se a condição falhou."""
        ...

    @abstractmethod
    async def count_by_status(self) -> dict[StatusChamado, int]:
        ...

    @abstractmethod
    async def create(self, chamado: Chamado) -> Chamado:
        ...
