"""
Application configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_file_encoding = "utf-8"
    )
    
    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./ledger.db", alias="DATABASE_URL")
    
    # Oracle set bootstrap: authorized before any other operation runs
    initial_oracle: str = Field(default="oracle-admin", alias="INITIAL_ORACLE")
    
    # Settlement service (unset: payouts are recorded on the ledger only)
    payment_service_url: Optional[str] = Field(default=None, alias="PAYMENT_SERVICE_URL")
    payment_timeout: float = Field(default=5.0, alias="PAYMENT_TIMEOUT")
    
    # Application
    app_name: str = Field(default="Carbon Credit Ledger", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    port: int = Field(default=8000, alias="PORT")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
