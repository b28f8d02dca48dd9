"""
Reply Dispatcher — notifica o manifestante por e-mail quando uma resposta é registrada.

Roda como handler do evento ChamadoRespondido, depois do commit: o chamado
já está gravado, então qualquer falha aqui é apenas logada.
"""

from __future__ import annotations

import html as html_module
import logging
import re
from datetime import datetime, timezone
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx

from app.domain.events.ouvidoria_events import ChamadoRespondido
from app.domain.systems.ouvidoria.entity import TipoIdentificacao
from app.infrastructure.config import Settings, get_settings
from app.infrastructure.services.email_service import (
    EmailDeliveryError,
    EmailMessage,
    ResendEmailSender,
)

logger = logging.getLogger(__name__)

ASSUNTO_EMAIL = "Resposta à sua solicitação: {assunto} - Ouvidoria FAFIH"
INTRO_EMAIL = "Sobre sua solicitação aberta em {aberto_em}, nossa instituição diz:"
DATA_NAO_INFORMADA = "data não informada"

_MESES = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)

_SCRIPT_STYLE = re.compile(r"<(script|style)[^>]*>.*?</\1>", re.DOTALL | re.I)
_LINE_BREAK = re.compile(r"<br\s*/?>", re.I)
_LIST_ITEM = re.compile(r"<li[^>]*>", re.I)
_BLOCK_END = re.compile(r"</(p|div|h[1-6]|ul|ol|blockquote|pre)\s*>", re.I)
_TAG = re.compile(r"<[^>]+>")
_INLINE_SPACE = re.compile(r"[ \t\r\f\v\u00a0]+")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


class EmailSender(Protocol):
    async def send(self, to: str, message: EmailMessage) -> None:
        ...


def html_para_texto(content: str) -> str:
    """Versão texto puro do HTML do editor: parágrafos, quebras e listas viram linhas."""
    text = _SCRIPT_STYLE.sub("", content)
    text = _LINE_BREAK.sub("\n", text)
    text = _LIST_ITEM.sub("\n- ", text)
    text = _BLOCK_END.sub("\n\n", text)
    text = _TAG.sub("", text)
    text = html_module.unescape(text)

    lines = [_INLINE_SPACE.sub(" ", line).strip() for line in text.split("\n")]
    text = _EXTRA_BLANK_LINES.sub("\n\n", "\n".join(lines))
    return text.strip()


def formatar_data_hora(value: Optional[datetime], tz_name: str = "America/Sao_Paulo") -> str:
    """Data longa pt-BR com hora curta, ex.: '5 de março de 2026 às 14:30'."""
    if value is None:
        return DATA_NAO_INFORMADA
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        local = value.astimezone(ZoneInfo(tz_name))
    except ZoneInfoNotFoundError:
        logger.warning("Timezone %s indisponível; usando UTC", tz_name)
        local = value.astimezone(timezone.utc)
    return f"{local.day} de {_MESES[local.month - 1]} de {local.year} às {local:%H:%M}"


def montar_mensagem(
    assunto: str,
    aberto_em: Optional[datetime],
    reply_html: str,
    tz_name: str = "America/Sao_Paulo",
) -> EmailMessage:
    intro = INTRO_EMAIL.format(aberto_em=formatar_data_hora(aberto_em, tz_name))
    return EmailMessage(
        subject=ASSUNTO_EMAIL.format(assunto=assunto),
        html=f"<p>{html_module.escape(intro)}</p>{reply_html}",
        text=f"{intro}\n\n{html_para_texto(reply_html)}",
    )


def _build_sender(settings: Settings) -> Optional[EmailSender]:
    if not settings.RESEND_API_KEY:
        return None
    return ResendEmailSender(
        settings.RESEND_API_KEY,
        settings.RESEND_FROM_EMAIL,
        api_url=settings.RESEND_API_URL,
        timeout=settings.EMAIL_TIMEOUT_SECONDS,
    )


class ReplyDispatcher:
    def __init__(self, sender: Optional[EmailSender], tz_name: str = "America/Sao_Paulo") -> None:
        self._sender = sender
        self._tz_name = tz_name

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ReplyDispatcher":
        settings = settings or get_settings()
        return cls(_build_sender(settings), tz_name=settings.OUVIDORIA_TIMEZONE)

    @staticmethod
    def deve_enviar(identificacao_tipo: str, email: Optional[str], reply: Optional[str]) -> bool:
        return (
            bool(reply and reply.strip())
            and identificacao_tipo == TipoIdentificacao.IDENTIFICADO.value
            and bool(email and email.strip())
        )

    async def dispatch(
        self,
        *,
        chamado_id: str,
        identificacao_tipo: str,
        email: Optional[str],
        assunto: str,
        aberto_em: Optional[datetime],
        reply: Optional[str],
    ) -> bool:
        """Envia a resposta por e-mail. Retorna True se o envio foi tentado."""
        if not self.deve_enviar(identificacao_tipo, email, reply):
            return False

        if self._sender is None:
            logger.warning("RESEND_API_KEY não configurada. E-mail do chamado %s não enviado.", chamado_id)
            return False

        message = montar_mensagem(assunto, aberto_em, reply, self._tz_name)
        try:
            await self._sender.send(email.strip(), message)
        except (EmailDeliveryError, httpx.HTTPError) as exc:
            logger.error("Falha ao enviar e-mail do chamado %s: %s", chamado_id, exc)
        else:
            logger.info("Resposta do chamado %s enviada por e-mail", chamado_id)
        return True

    async def handle_chamado_respondido(self, event: ChamadoRespondido) -> bool:
        return await self.dispatch(
            chamado_id=event.chamado_id,
            identificacao_tipo=event.identificacao_tipo,
            email=event.email,
            assunto=event.assunto,
            aberto_em=event.aberto_em,
            reply=event.reply,
        )
