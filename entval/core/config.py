"""Configuration management for the entity validator.

This module handles environment-based configuration using Pydantic Settings.
Every setting can be overridden with an ``ENTVAL_`` prefixed environment
variable (e.g. ``ENTVAL_LOG_LEVEL=DEBUG``).
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ValidatorSettings(BaseSettings):
    """Validator configuration."""

    model_config = SettingsConfigDict(env_prefix="ENTVAL_", case_sensitive=False)

    # Environment
    environment: Literal["development", "testing", "production"] = Field(
        default="development", description="Application environment"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON formatted logs")

    # Schema defaults
    explicit_only: bool = Field(
        default=True,
        description="Reject undeclared properties when a schema file does not say",
    )
    schema_dir: str = Field(
        default="schemas",
        description="Directory containing entity schema YAML files",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


# Global configuration instance
settings = ValidatorSettings()
