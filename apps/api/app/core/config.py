"""Application configuration for the property search service."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FIXTURE_PATH = Path(__file__).resolve().parent.parent / "data" / "properties.json"


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    fixture_path: Path = Field(default=DEFAULT_FIXTURE_PATH)
    image_base_url: str = Field(default="/")

    database_url: str = Field(default="sqlite:///./favorites.db")
    favorites_storage_key: str = Field(default="propertyFavorites")

    price_slider_min: int = Field(default=100_000)
    price_slider_max: int = Field(default=1_000_000)

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str) and not value.strip().startswith("["):
            parts = [item.strip() for item in value.split(",") if item.strip()]
            return parts
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


settings = get_settings()
