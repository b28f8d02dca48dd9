"""Resolve os responsáveis dos chamados para nomes de exibição (enriquecimento best-effort)."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError

from app.domain.shared.exceptions import StoreError
from app.domain.systems.ouvidoria.entity import Chamado
from app.domain.systems.users.entity import DISPLAY_NAME_PADRAO
from app.domain.systems.users.repository import IUsuarioRepository

logger = logging.getLogger(__name__)

UUID_REGEX = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: object) -> bool:
    return isinstance(value, str) and bool(UUID_REGEX.match(value))


class ResponsavelResolver:
    def __init__(self, user_repo: IUsuarioRepository) -> None:
        self._user_repo = user_repo

    async def resolve(self, chamados: Iterable[Chamado]) -> dict[str, str]:
        # Ids fora do formato (dados legados) ficam de fora da busca em lote
        ids = sorted({c.responsavel_id for c in chamados if is_valid_uuid(c.responsavel_id)})
        if not ids:
            return {}

        try:
            rows = await self._user_repo.get_display_names(ids)
        except (SQLAlchemyError, StoreError) as exc:
            logger.warning("Não foi possível carregar responsáveis: %s", exc)
            return {}

        return {
            row["id"]: row.get("display_name") or DISPLAY_NAME_PADRAO
            for row in rows
            if isinstance(row.get("id"), str)
        }
