"""Configuration of the annotation service using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``ANNOTATE_*`` environment variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="ANNOTATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    host: str = Field(default="0.0.0.0", description="Server host address")
    port: int = Field(default=5000, description="Server port")

    jwt_secret: str = Field(
        default="annotate-canvas-secret-change-in-prod",
        description="HMAC secret used to sign session tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_expire_hours: int = Field(default=72, gt=0, description="Token lifetime")

    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")
    debug: bool = Field(default=False, description="Enable debug logging")


@lru_cache
def get_settings() -> Settings:
    return Settings()
