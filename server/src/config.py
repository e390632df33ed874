"""
Settings for the bloglist service.

Every field can be set through a ``BLOGLIST_``-prefixed environment
variable (``BLOGLIST_MONGODB_URL``, ``BLOGLIST_JWT_SECRET_KEY``, ...) or a
``.env`` file in the working directory. Tests build ``Settings`` directly
and pass it to ``create_app``.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = ("development", "test", "staging", "production")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "text")
JWT_ALGORITHMS = ("HS256", "HS384", "HS512")


def _one_of(name: str, value: str, allowed) -> str:
    if value not in allowed:
        raise ValueError(f"{name} must be one of {list(allowed)}, got: {value}")
    return value


class Settings(BaseSettings):
    """Bloglist service settings."""

    # =========================================================================
    # Service
    # =========================================================================

    app_name: str = Field(default="Bloglist API", description="Service name used in logs and /health")
    app_version: str = Field(default="0.1.0")
    api_prefix: str = Field(default="/api", description="Prefix of every resource route")
    debug: bool = Field(default=False, description="Uvicorn reload and FastAPI debug pages; ignored in production")
    environment: str = Field(
        default="production",
        description="development|test|staging|production; 'test' mounts /api/testing/reset"
    )
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3003, gt=0, lt=65536)

    # =========================================================================
    # MongoDB
    # =========================================================================

    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_database: str = Field(default="bloglist")
    mongodb_server_selection_timeout_ms: int = Field(
        default=5000,
        description="Milliseconds the driver waits for a reachable server",
        gt=0
    )

    # =========================================================================
    # Tokens and accounts
    # =========================================================================

    jwt_secret_key: str = Field(
        default="change-this-secret-key-in-production",
        description="HMAC secret that signs and verifies bearer tokens",
        min_length=16
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_access_token_expire_minutes: int = Field(default=60, gt=0, le=1440)

    password_bcrypt_rounds: int = Field(default=12, ge=4, le=14)
    password_min_length: int = Field(default=3, ge=1, le=128)
    username_min_length: int = Field(default=3, ge=1, le=50)

    # =========================================================================
    # CORS
    # =========================================================================

    cors_enabled: bool = Field(default=True)
    cors_origins: List[str] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    cors_allow_headers: List[str] = Field(default=["*"])

    # =========================================================================
    # Observability
    # =========================================================================

    metrics_enabled: bool = Field(default=True)
    metrics_endpoint: str = Field(default="/metrics")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json", description="json for deployments, text for a terminal")

    @field_validator("environment", "log_format")
    @classmethod
    def lower_choice(cls, v: str, info) -> str:
        allowed = ENVIRONMENTS if info.field_name == "environment" else LOG_FORMATS
        return _one_of(info.field_name, v.lower(), allowed)

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return _one_of("log_level", v.upper(), LOG_LEVELS)

    @field_validator("jwt_algorithm")
    @classmethod
    def hmac_algorithm(cls, v: str) -> str:
        return _one_of("jwt_algorithm", v, JWT_ALGORITHMS)

    @field_validator("cors_origins")
    @classmethod
    def default_origins(cls, v: List[str]) -> List[str]:
        """An empty origin list means any origin."""
        return v or ["*"]

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    model_config = SettingsConfigDict(
        env_prefix="BLOGLIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Settings read once from the environment and shared by the process.

    Example:
        >>> get_settings().mongodb_database
        'bloglist'
    """
    return Settings()


def clear_settings_cache():
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
