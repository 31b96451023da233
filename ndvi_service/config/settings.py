from typing import Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    # API Configuration
    app_name: str = Field(default="NDVI Point Service")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Google Earth Engine Configuration
    # Service account key file path, read at the first handshake attempt
    gee_service_account_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "GOOGLE_APPLICATION_CREDENTIALS", "GEE_SERVICE_ACCOUNT_KEY"
        ),
    )
    gee_project_id: str = Field(default="")
    gee_tile_host: str = Field(default="earthengine.googleapis.com")
    gee_max_concurrent: int = Field(default=15)

    # Logging
    log_level: str = Field(default="INFO")


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
