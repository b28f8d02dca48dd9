"""Exceções de domínio/aplicação — convertidas em HTTP pelos exception handlers."""

from __future__ import annotations


class NotFoundError(Exception):
    """Recurso não encontrado."""
    def __init__(self, resource: str = "Recurso", resource_id: int | str = "", message: str | None = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(message or f"{resource} {resource_id} não encontrado")


class BadRequestError(Exception):
    """Requisição inválida de domínio."""
    pass


class TransicaoInvalidaError(BadRequestError):
    """Transição de status não permitida pela state machine."""
    pass


class NaoAutenticadoError(Exception):
    """Sessão ausente ou inválida."""
    def __init__(self, message: str = "Não autenticado."):
        super().__init__(message)


class StoreError(Exception):
    """Falha no banco de dados (conectividade ou query)."""
    def __init__(self, message: str = "Erro ao acessar o banco de dados."):
        super().__init__(message)
