"""
Dispatcher de eventos de domínio.

Os eventos chegam do UnitOfWork depois do commit: o chamado já está gravado,
então a falha de um handler (ex.: provedor de e-mail fora do ar) é logada e
os demais handlers seguem normalmente.
"""

from __future__ import annotations

import inspect
import logging
from typing import Awaitable, Callable, Type, Union

from app.domain.events.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], Union[Awaitable[object], object]]

# tipo do evento → handlers, na ordem de registro
_handlers: dict[Type[DomainEvent], list[EventHandler]] = {}


def register_handler(event_type: Type[DomainEvent], handler: EventHandler) -> None:
    """Registra um handler; registrar o mesmo handler de novo não duplica o envio."""
    handlers = _handlers.setdefault(event_type, [])
    if handler not in handlers:
        handlers.append(handler)


def handlers_for(event_type: Type[DomainEvent]) -> tuple[EventHandler, ...]:
    return tuple(_handlers.get(event_type, ()))


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


async def _run_handler(handler: EventHandler, event: DomainEvent) -> None:
    result = handler(event)
    if inspect.isawaitable(result):
        await result


async def dispatch_events(events: list[DomainEvent]) -> None:
    for event in events:
        for handler in handlers_for(type(event)):
            try:
                await _run_handler(handler, event)
            except Exception:
                logger.exception(
                    "Handler %s falhou para %s (evento %s, chamado %s)",
                    _handler_name(handler),
                    event.event_type,
                    event.event_id,
                    getattr(event, "chamado_id", None),
                )


def clear_handlers() -> None:
    """Limpa o registro (testes)."""
    _handlers.clear()
