from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # ── App ──
    APP_NAME: str = "FAFIH Admin — Ouvidoria API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # ── Database ──
    POSTGRES_USER: str = "app_user"
    POSTGRES_PASSWORD: str = "app_secret"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "fafih_admin"

    @property
    def DATABASE_URL(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # ── Sessão (JWT em cookie) ──
    JWT_SECRET_KEY: str = "CHANGE-ME-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    AUTH_COOKIE_NAME: str = "ui-admin-token"

    # ── E-mail transacional (Resend) ──
    RESEND_API_KEY: Optional[str] = None
    RESEND_FROM_EMAIL: str = "ouvidoria@fafih.edu.br"
    RESEND_API_URL: str = "https://api.resend.com/emails"
    EMAIL_TIMEOUT_SECONDS: float = 10.0

    # ── Ouvidoria ──
    OUVIDORIA_TIMEZONE: str = "America/Sao_Paulo"

    # ── Logging ──
    LOG_ATIVO: Optional[bool] = None
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
