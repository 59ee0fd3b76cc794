from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging settings
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "WARNING"
    log_format: str = "%(levelname)s: %(message)s"

    # Report settings
    report_decimal_places: int = Field(default=4, ge=0)

    # Input limits, matching 16-bit client ids and 32-bit transaction ids
    max_client_id: int = Field(default=65535, ge=0)
    max_transaction_id: int = Field(default=4294967295, ge=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
