"""Bot configuration from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    TELEGRAM_BOT_TOKEN: str = ""
    API_BASE_URL: str = "http://api:8000"
    REGISTRATION_PATH: str = "/api/vendor-onboarding/"
    REGISTRATION_API_TOKEN: str = ""
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    REDIS_URL: str = "redis://redis:6379/0"
    FORM_TTL_SECONDS: int = 30 * 24 * 3600  # saved progress expires after 30 days
    SESSION_IDLE_SECONDS: int = 2 * 3600  # in-memory session (passwords, documents) dropped when idle
    MAX_SESSIONS: int = 1000
    SUPPORT_URL: str = "https://t.me/VendorSupport"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "allow"


settings = Settings()
