"""Application configuration with environment variable validation."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # NHTSA
    nhtsa_base_url: str = Field(
        default="https://vpic.nhtsa.dot.gov/api",
        validation_alias="NHTSA_BASE_URL",
    )
    nhtsa_timeout: float = Field(default=15.0, validation_alias="NHTSA_TIMEOUT")

    # Amazon affiliate program
    associate_tag: str = Field(
        default="dreamcar-20", validation_alias="AFFILIATE_ASSOCIATE_TAG"
    )
    affiliate_base_url: str = Field(
        default="https://www.amazon.com",
        validation_alias="AFFILIATE_BASE_URL",
    )
    image_host: str = Field(
        default="https://images-na.ssl-images-amazon.com",
        validation_alias="AFFILIATE_IMAGE_HOST",
    )
    image_size: str = Field(default="_SX300_", validation_alias="AFFILIATE_IMAGE_SIZE")

    # Local counter store
    counters_path: str = Field(
        default=str(_PROJECT_ROOT / "data" / "affiliate_performance.json"),
        validation_alias="COUNTERS_PATH",
    )

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # CORS
    allowed_origins: list[str] = Field(
        default=["*"],
        validation_alias="ALLOWED_ORIGINS",
    )

    # Rate limiting (outbound NHTSA lookups)
    decode_rate_limit: str = Field(
        default="30/minute", validation_alias="DECODE_RATE_LIMIT"
    )

    @property
    def cors_origins(self) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or return list."""
        if isinstance(self.allowed_origins, str):
            return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return self.allowed_origins


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def validate_settings() -> None:
    """Validate that the settings needed to build links and decode VINs are usable."""
    settings = get_settings()
    errors = []

    if not settings.associate_tag:
        errors.append("AFFILIATE_ASSOCIATE_TAG is required")
    if not settings.nhtsa_base_url:
        errors.append("NHTSA_BASE_URL is required")
    if settings.nhtsa_timeout <= 0:
        errors.append("NHTSA_TIMEOUT must be positive")

    if errors:
        raise ValueError(f"Configuration errors: {'; '.join(errors)}")
