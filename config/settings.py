"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Storage endpoints are optional at load time; operations that need a
missing endpoint fail with ConfigurationError when called.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # AZURE BLOB STORAGE
    # ===================
    azure_blob_public_url: Optional[str] = Field(
        None,
        description="Container URL for public manuals (instructionmanuals)"
    )
    azure_blob_public_sas: Optional[str] = Field(
        None,
        description="SAS token for the public container, including leading '?'"
    )
    azure_blob_restricted_url: Optional[str] = Field(
        None,
        description="Container URL for restricted manuals (servicemanuals)"
    )
    azure_blob_restricted_sas: Optional[str] = Field(
        None,
        description="SAS token for the restricted container, including leading '?'"
    )

    # ===================
    # AZURE TABLE STORAGE
    # ===================
    azure_table_url: Optional[str] = Field(
        None,
        description="Table endpoint URL for the manual catalog"
    )
    azure_table_sas: Optional[str] = Field(
        None,
        description="SAS token for the table, including leading '?'"
    )
    storage_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Transport timeout for storage requests"
    )

    # ===================
    # API SECURITY
    # ===================
    api_key: Optional[str] = Field(
        None,
        description="API key required on write endpoints (X-API-Key header)"
    )

    # ===================
    # CATALOG SETTINGS
    # ===================
    catalog_cache_ttl_seconds: int = Field(
        default=300,
        ge=0,
        le=3600,
        description="Freshness window for the cached catalog listing"
    )
    documents_page_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Default page size for the document listing"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API from a browser"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def table_configured(self) -> bool:
        """Check if the catalog table endpoint is configured."""
        return bool(self.azure_table_url and self.azure_table_sas)

    def blob_configured(self, public: bool) -> bool:
        """Check if the container for the given visibility is configured."""
        if public:
            return bool(self.azure_blob_public_url and self.azure_blob_public_sas)
        return bool(self.azure_blob_restricted_url and self.azure_blob_restricted_sas)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
