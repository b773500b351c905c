"""
Configuration module using Pydantic Settings.
Handles environment variables and analytics defaults.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # App settings
    app_name: str = Field(default="family-finance-analytics", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="production", description="Environment name")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log renderer: json or console")

    # Analysis windows
    pattern_months: int = Field(default=3, ge=1, le=24, description="Months analysed for spending patterns and insights")
    recommendation_months: int = Field(default=6, ge=1, le=24, description="Months analysed for budget recommendations")
    smart_budget_months: int = Field(default=12, ge=2, le=36, description="Monthly series length for smart budget suggestions")
    forecast_months: int = Field(default=3, ge=1, le=24, description="Months analysed for the next-month forecast")
    forecast_split_months: Optional[int] = Field(
        default=None,
        ge=1,
        description="Months in each recent/older forecast segment (default: half the window)"
    )

    # Liability simulation
    default_extra_payment: float = Field(default=0.0, ge=0, description="Default extra monthly payment for scenarios")
    extra_payment_ladder: str = Field(
        default="100000,250000,500000,1000000,2000000",
        description="Extra monthly amounts compared in early-payment analysis (comma-separated)"
    )

    def get_extra_payment_ladder(self) -> List[float]:
        """Get the extra-payment ladder as a list of amounts."""
        if not self.extra_payment_ladder:
            return []
        return [float(amount.strip()) for amount in self.extra_payment_ladder.split(",") if amount.strip()]

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log renderer."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Invalid log format. Must be one of: {valid_formats}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment."""
        valid_envs = ["development", "testing", "staging", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Invalid environment. Must be one of: {valid_envs}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance. Useful for dependency injection."""
    return settings
