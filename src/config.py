from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime options, read from PAYMENTS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Output settings
    sorted_output: bool = True

    # Logging settings
    verbose: bool = False
    log_level: str = "WARNING"

    # Replay settings
    shards: int = Field(default=1, ge=1)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.verbose else self.log_level


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
