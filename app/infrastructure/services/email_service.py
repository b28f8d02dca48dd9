"""Envio de e-mails transacionais via API HTTP do Resend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        prefix = f"[{self.status_code}] " if self.status_code is not None else ""
        return f"{prefix}{super().__str__()}"


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    html: str
    text: str


def _extract_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or "Erro desconhecido do provedor de e-mail"
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return "Erro desconhecido do provedor de e-mail"


class ResendEmailSender:
    """Cliente mínimo da API de envio do Resend (POST /emails)."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        *,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._from_email = from_email
        self._api_url = api_url
        self._timeout = timeout
        self._transport = transport

    async def send(self, to: str, message: EmailMessage) -> None:
        payload = {
            "from": self._from_email,
            "to": [to],
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Falha de rede ao enviar e-mail: {exc}") from exc

        if response.status_code >= 400:
            raise EmailDeliveryError(_extract_error_message(response), status_code=response.status_code)

        logger.info("E-mail enviado: %s", message.subject)
