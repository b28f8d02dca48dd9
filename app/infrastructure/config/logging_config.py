"""
Configuração de logging da aplicação.

O estado "logs ativos" é um objeto explícito (LoggingConfig) guardado em
``app.state`` e reaplicado em pontos definidos do ciclo de vida: no startup
e sempre que a configuração ``log_ativo`` muda na tabela settings.

Com logs desativados o root logger sobe para WARNING: avisos e erros
continuam sendo emitidos.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from app.infrastructure.config.settings import Settings

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoggingConfig:
    enabled: bool = True
    level: str = "INFO"

    @classmethod
    def from_settings(cls, settings: Settings) -> "LoggingConfig":
        # Sem LOG_ATIVO explícito, logs ficam ativos apenas em modo DEBUG
        enabled = settings.LOG_ATIVO if settings.LOG_ATIVO is not None else settings.DEBUG
        return cls(enabled=enabled, level=settings.LOG_LEVEL.upper())

    @property
    def effective_level(self) -> int:
        if not self.enabled:
            return logging.WARNING
        level = logging.getLevelName(self.level)
        return level if isinstance(level, int) else logging.INFO


def setup_logging(config: LoggingConfig) -> None:
    """Configuração inicial (handler e formato). Chamada uma vez no import de app.main."""
    logging.basicConfig(
        level=config.effective_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    apply_logging_config(config)


def apply_logging_config(config: LoggingConfig) -> None:
    logging.getLogger().setLevel(config.effective_level)


def sync_with_settings(
    config: LoggingConfig,
    site_settings: Optional[Mapping[str, Any]],
) -> LoggingConfig:
    """Retorna nova config com ``log_ativo`` do banco (se booleano) e a aplica."""
    log_ativo = (site_settings or {}).get("log_ativo")
    if not isinstance(log_ativo, bool):
        return config

    new_config = replace(config, enabled=log_ativo)
    if new_config != config:
        # Loga antes de aplicar para que a mudança apareça mesmo ao desligar
        logger.warning("Logs %s via settings", "ativados" if log_ativo else "desativados")
    apply_logging_config(new_config)
    return new_config
