# helpdesk/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./helpdesk.db")
    APP_NAME: str = "Help Desk API"
    APP_DESC: str = "Customers file tickets, agents resolve them, admins run the company"
    APP_VERSION: str = "1.0.0"

    # Auth
    SECRET_KEY: str = "change-me"  # override in .env
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12

    # CORS origins, comma separated
    CORS_ORIGINS: str | None = None

    LOG_LEVEL: str = "INFO"

    # Email notifications (Resend)
    RESEND_API_KEY: str | None = None
    RESEND_API_URL: str = "https://api.resend.com/emails"
    NOTIFY_FROM: str = "Support System <onboarding@resend.dev>"
    NOTIFY_TIMEOUT: float = 10.0

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
