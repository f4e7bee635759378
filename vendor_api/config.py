import os
from functools import lru_cache

from pydantic import BaseModel


class Settings(BaseModel):
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./vendor_onboarding.db",
    )
    upload_dir: str = os.getenv("UPLOAD_DIR", "./uploads")
    max_document_bytes: int = int(os.getenv("MAX_DOCUMENT_BYTES", str(10 * 1024 * 1024)))
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    debug: bool = os.getenv("DEBUG", "0").lower() in ("1", "true", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.split(":")[0].lower().startswith("sqlite")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
