"""
Event Handlers da Ouvidoria.

Registrados na inicialização da app (app/main.py): trilha de auditoria em
log e envio do e-mail de resposta ao manifestante.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.application.shared.event_dispatcher import register_handler
from app.application.systems.ouvidoria.reply_dispatcher import ReplyDispatcher
from app.domain.events.ouvidoria_events import (
    ChamadoAtendimentoIniciado,
    ChamadoAtribuido,
    ChamadoRespondido,
    ChamadoStatusAlterado,
)

logger = logging.getLogger("ouvidoria.audit")


# ════════════════════════════════════════════════════════════════
# AUDIT HANDLERS
# ════════════════════════════════════════════════════════════════

def handle_atendimento_iniciado(event: ChamadoAtendimentoIniciado) -> None:
    logger.info("Audit: Chamado %s em atendimento por %s", event.chamado_id, event.responsavel_id)


def handle_status_alterado(event: ChamadoStatusAlterado) -> None:
    logger.info(
        "Audit: Chamado %s status %s→%s por %s",
        event.chamado_id, event.old_status, event.new_status, event.changed_by,
    )


def handle_chamado_atribuido(event: ChamadoAtribuido) -> None:
    logger.info(
        "Audit: Chamado %s responsável %s→%s por %s",
        event.chamado_id, event.old_responsavel, event.new_responsavel, event.assigned_by,
    )


def handle_chamado_respondido(event: ChamadoRespondido) -> None:
    logger.info("Audit: Chamado %s respondido por %s", event.chamado_id, event.respondido_por)


# ════════════════════════════════════════════════════════════════
# REGISTRATION
# ════════════════════════════════════════════════════════════════

def register_all_handlers(reply_dispatcher: Optional[ReplyDispatcher] = None) -> None:
    """Registra os handlers no dispatcher; o ReplyDispatcher vem das settings se omitido."""
    dispatcher = reply_dispatcher or ReplyDispatcher.from_settings()

    register_handler(ChamadoAtendimentoIniciado, handle_atendimento_iniciado)
    register_handler(ChamadoStatusAlterado, handle_status_alterado)
    register_handler(ChamadoAtribuido, handle_chamado_atribuido)
    register_handler(ChamadoRespondido, handle_chamado_respondido)
    register_handler(ChamadoRespondido, dispatcher.handle_chamado_respondido)

    logging.getLogger(__name__).info("Ouvidoria event handlers registered")
