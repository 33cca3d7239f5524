"""
Application Configuration

Uses pydantic-settings for environment variable loading with validation.
All configuration for the generation core is centralized here.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    Environment variables can be set directly or via .env file.
    The secret key is used to encrypt stored provider credentials.
    """

    model_config = SettingsConfigDict(
        env_prefix="CODEFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Runtime environment"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level used by configure_logging()"
    )

    # ==========================================================================
    # Security / Credential Storage
    # ==========================================================================
    secret_key: str = Field(
        description="Secret key used to derive the credential encryption key (CODEFORGE_SECRET_KEY required)",
        min_length=32
    )

    fernet_salt: str = Field(
        default="codeforge_credentials_v1",
        description="Salt for Fernet key derivation (override for different encryption keys)"
    )

    credential_store_path: Path = Field(
        default=Path.home() / ".codeforge" / "credentials.json",
        description="Location of the encrypted credential file"
    )

    # ==========================================================================
    # Generation Defaults
    # ==========================================================================
    default_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature when the request does not override it"
    )

    default_max_tokens: int = Field(
        default=2000,
        ge=1,
        description="Maximum output tokens when the request does not override it"
    )

    request_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="HTTP timeout applied to provider calls"
    )

    simulated_stage_delay_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Delay between events of the simulated streaming fallback"
    )

    # ==========================================================================
    # Provider Endpoints
    # ==========================================================================
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI API base URL"
    )

    anthropic_base_url: str = Field(
        default="https://api.anthropic.com",
        description="Anthropic API base URL"
    )

    anthropic_version: str = Field(
        default="2023-06-01",
        description="Value of the anthropic-version header"
    )

    google_base_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        description="Google Generative Language API base URL"
    )

    groq_base_url: str = Field(
        default="https://api.groq.com",
        description="Groq API base URL"
    )

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @computed_field
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @computed_field
    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
