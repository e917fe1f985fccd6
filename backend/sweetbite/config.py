"""Application configuration management using Pydantic Settings."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the directory where settings.py is located
BASE_DIR = Path(__file__).resolve().parent

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "SweetBite Store"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    # Remote catalog (PostgREST / Supabase compatible)
    catalog_url: str = Field(default="http://localhost:54321", description="Catalog base URL")
    catalog_api_key: str = Field(default="", description="Catalog API key")
    catalog_table: str = "products"
    catalog_timeout: float = 10.0  # seconds

    # Store
    max_orders: int = Field(default=20, ge=1, description="Order history retention cap")
    rollback_partial_checkout: bool = Field(
        default=True,
        description="Restore stock already decremented when a checkout batch partially fails",
    )

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("catalog_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the catalog base URL."""
        return v.rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
