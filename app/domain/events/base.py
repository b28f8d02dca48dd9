"""
Eventos de domínio.

A entidade registra o que aconteceu (status alterado, resposta registrada);
o UnitOfWork recolhe esses eventos e só os entrega aos handlers depois que
a escrita foi confirmada no banco.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=_utcnow)

    @property
    def event_type(self) -> str:
        return type(self).__name__


class AggregateRoot:
    """Mixin de entidades que acumulam eventos até serem recolhidos."""

    def __init__(self) -> None:
        self._events: list[DomainEvent] = []

    def _record_event(self, event: DomainEvent) -> None:
        self._events.append(event)

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._events)

    def collect_events(self) -> list[DomainEvent]:
        """Entrega e esvazia a fila: cada evento é despachado uma única vez."""
        events, self._events = self._events, []
        return events
