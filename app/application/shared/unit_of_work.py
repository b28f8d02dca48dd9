"""
Unit of Work da requisição.

Guarda os eventos recolhidos das entidades e só os despacha depois do commit.
Se o commit falhar, os eventos são descartados: nenhum e-mail sai para uma
resposta que não foi gravada.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.shared.event_dispatcher import dispatch_events
from app.domain.events.base import AggregateRoot, DomainEvent
from app.domain.shared.exceptions import StoreError

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._outbox: list[DomainEvent] = []

    def collect_events_from(self, *aggregates: AggregateRoot) -> None:
        for aggregate in aggregates:
            self._outbox.extend(aggregate.collect_events())

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            self._outbox.clear()
            raise StoreError("Erro ao gravar alterações.") from exc

        events, self._outbox = self._outbox, []
        if events:
            logger.debug("Despachando %d evento(s) após commit", len(events))
            await dispatch_events(events)

    async def rollback(self) -> None:
        self._outbox.clear()
        await self._session.rollback()
