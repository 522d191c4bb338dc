"""
Application configuration helpers.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration loaded from environment variables."""

    database_url: str = Field("postgresql://localhost/court_facilities", alias="DATABASE_URL")
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(10, alias="DB_POOL_MAX_SIZE")
    upload_dir: Path = Field(Path("data/uploads"), alias="UPLOAD_DIR")
    max_upload_mb: int = Field(10, alias="MAX_UPLOAD_MB")
    ocr_enabled: bool = Field(True, alias="OCR_ENABLED")
    ocr_tesseract_cmd: str | None = Field(None, alias="TESSERACT_CMD")
    import_demo_fallback: bool = Field(False, alias="IMPORT_DEMO_FALLBACK")
    default_term_location: str = Field(
        "100 CENTRE STREET & 111 CENTRE STREET", alias="DEFAULT_TERM_LOCATION"
    )
    phone_exchange_prefix: str = Field("646-386-", alias="PHONE_EXCHANGE_PREFIX")
    fetch_timeout_seconds: float = Field(30.0, alias="FETCH_TIMEOUT_SECONDS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
