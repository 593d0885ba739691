"""Uploader config from environment."""

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from uploader.errors import ConfigError


class Settings(BaseSettings):
    """Settings loaded from UPLOADER_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="UPLOADER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    TOKEN: str
    ACCOUNT_ID: str
    # Deployment label added to log lines and the tracing resource
    ENV: str | None = None
    # OTLP/HTTP collector; spans are not exported when unset
    OTEL_EXPORTER_OTLP_ENDPOINT: str | None = None


def get_settings(env_file: str | None = ".env") -> Settings:
    """Load settings from the environment (and env_file, if present). Raises ConfigError."""
    try:
        return Settings(_env_file=env_file)
    except ValidationError as e:
        fields = [f"UPLOADER_{err['loc'][0]}" for err in e.errors() if err["loc"]]
        raise ConfigError(f"Invalid uploader configuration: {', '.join(fields)}") from e
