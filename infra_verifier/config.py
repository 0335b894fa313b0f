"""Configuration management for the claim infrastructure verifier.

This module handles loading and validating configuration from environment
variables with sensible defaults for the dev environment.
"""

from typing import Optional
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Verifier settings loaded from environment variables.

    All settings have defaults matching the dev environment layout.
    In CI, these should be set via environment variables or a .env file.
    """

    # Terraform Configuration
    terraform_dir: str = Field(
        default="infra/env/dev",
        description="Directory holding the Terraform root module under test",
        validation_alias=AliasChoices("TERRAFORM_DIR", "TF_DIR")
    )
    terraform_binary: str = Field(
        default="terraform",
        description="Terraform executable name or path",
        validation_alias=AliasChoices("TERRAFORM_BINARY", "TF_BINARY")
    )
    terraform_timeout: int = Field(
        default=1800,
        description="Timeout in seconds for a single Terraform command",
        validation_alias="TERRAFORM_TIMEOUT",
        gt=0
    )
    no_color: bool = Field(
        default=True,
        description="Pass -no-color to Terraform commands",
        validation_alias="TERRAFORM_NO_COLOR"
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region the environment is deployed to",
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION")
    )

    # Expectations Configuration
    expectations_path: Optional[str] = Field(
        default=None,
        description="Path to an expectations JSON file (built-in dev defaults if unset)",
        validation_alias="EXPECTATIONS_PATH"
    )

    # Runtime Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="LOG_LEVEL"
    )
    live_tests_enabled: bool = Field(
        default=False,
        description="Allow the live suites to provision real infrastructure",
        validation_alias="INFRA_LIVE_TESTS"
    )

    model_config = SettingsConfigDict(
        env_prefix="",  # No prefix for environment variables
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """
    Get verifier settings.

    Loads settings from environment variables and .env file.

    Returns:
        Settings instance with all configuration values
    """
    return Settings()


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def settings() -> Settings:
    """
    Get the global settings instance.

    Creates the settings instance on first call and caches it.

    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
