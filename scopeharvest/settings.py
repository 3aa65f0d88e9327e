"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment configuration; command line flags take precedence."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    hackerone_username: str | None = Field(
        default=None, validation_alias="HACKERONE_USERNAME"
    )
    hackerone_api_key: str | None = Field(
        default=None, validation_alias="HACKERONE_API_KEY"
    )
    output_path: str = Field(
        default="programs.txt", validation_alias="SCOPEHARVEST_OUTPUT"
    )
    timeout_seconds: float = Field(
        default=30.0, gt=0.0, validation_alias="SCOPEHARVEST_TIMEOUT"
    )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
