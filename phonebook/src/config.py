"""Configuration management for the phonebook client.

Uses Pydantic Settings for environment-based configuration.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NOTIFICATION_MIN_SECONDS = 3.5
NOTIFICATION_MAX_SECONDS = 4.5


class Config(BaseSettings):
    """Phonebook client configuration."""

    base_url: str = Field(default="http://localhost:3003", description="Bloglist service root URL")
    persons_path: str = Field(default="/api/persons", description="Path of the persons resource")
    request_timeout: float = Field(default=10.0, description="HTTP timeout (seconds)", gt=0)
    notification_seconds: float = Field(
        default=4.0,
        description="How long a notification banner stays visible (seconds)",
        ge=NOTIFICATION_MIN_SECONDS,
        le=NOTIFICATION_MAX_SECONDS
    )
    log_level: str = Field(default="WARNING", description="Log level")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="PHONEBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Global config instance
_config_instance: Config | None = None


def get_config() -> Config:
    """Get or create configuration instance.

    Returns:
        Config instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance
