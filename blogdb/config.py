"""Configuration management for BlogDB.

This module provides centralized configuration using Pydantic Settings,
read from environment variables and an optional ``.env`` file.

Environment Profiles:
    - DEVELOPMENT: Verbose logging, human-readable output
    - PRODUCTION: INFO logging, JSON output
    - TESTING: Minimal logging, no file output, in-memory store
    - STAGING: Production-like output with INFO logging

Example:
    >>> from blogdb.config import settings, Environment
    >>> print(settings.store_backend)
    memory
    >>> if settings.is_production:
    ...     print("Running in production mode")
"""

from datetime import timedelta
from enum import StrEnum
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blogdb.utils import redact_token

DEFAULT_SESSION_SECRET = "blogdb-development-session-secret"


class Environment(StrEnum):
    """Runtime environment with specific behavior profiles.

    Attributes:
        DEVELOPMENT: Verbose logging, human-readable output
        PRODUCTION: Conservative settings, structured logs
        TESTING: In-memory store, minimal logging, fast execution
        STAGING: Pre-production validation environment
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"
    STAGING = "staging"


class StoreBackend(StrEnum):
    """Backing implementation for the entity store."""

    MEMORY = "memory"
    SQL = "sql"


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Attributes:
        environment: Runtime environment profile
        store_backend: Entity store implementation (memory or sql)
        database_url: SQLAlchemy URL used by the sql backend
        database_echo: Echo SQL statements (debugging only)
        seed_fixtures: Load fixture users/posts/comments/likes/follows at startup
        session_secret: Signing key for session tokens
        session_ttl_hours: Lifetime of an issued session token
        session_algorithm: JWT signing algorithm
        min_password_length: Minimum password length accepted at registration
        data_dir: Base directory for log files
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment Configuration
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development, production, testing, staging)",
    )

    # Store Configuration
    store_backend: StoreBackend = Field(
        default=StoreBackend.MEMORY,
        description="Entity store backend (memory or sql)",
    )
    database_url: str = Field(
        "sqlite://",
        description="SQLAlchemy URL for the sql backend (in-process SQLite by default)",
    )
    database_echo: bool = Field(
        False,
        description="Echo SQL statements emitted by the sql backend",
    )
    seed_fixtures: bool = Field(
        True,
        description="Seed fixture data when the platform is initialized",
    )

    # Session Configuration
    session_secret: str = Field(
        DEFAULT_SESSION_SECRET,
        description="Secret used to sign session tokens",
    )
    session_ttl_hours: int = Field(
        24,
        ge=1,
        le=720,
        description="Session token lifetime in hours",
    )
    session_algorithm: str = Field(
        "HS256",
        description="JWT algorithm used to sign session tokens",
    )
    min_password_length: int = Field(
        6,
        ge=1,
        le=128,
        description="Minimum password length accepted at registration",
    )

    # Data Directory Configuration
    data_dir: Path = Field(
        Path("./data"),
        description="Base directory for log files",
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_to_file: bool = Field(
        default=False,
        description="Enable file logging in addition to console",
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (recommended for production)",
    )

    @field_validator("data_dir", mode="before")
    @classmethod
    def expand_data_dir(cls, v: str | Path) -> Path:
        """Expand and resolve data directory path."""
        return Path(v).expanduser().resolve()

    @field_validator("session_secret")
    @classmethod
    def validate_session_secret(cls, v: str) -> str:
        """Validate session secret length."""
        if not v or len(v) < 32:
            raise ValueError("Session secret must be at least 32 characters")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level names to upper case."""
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def apply_environment_profile(self) -> "Settings":
        """Apply environment-specific defaults.

        Profiles:
            - PRODUCTION: INFO logging (unless stricter), JSON logs
            - DEVELOPMENT: DEBUG logging, human-readable logs
            - TESTING: In-memory sqlite, ERROR logging, no file logging
            - STAGING: INFO logging, JSON logs

        Returns:
            Modified settings instance with environment-specific adjustments
        """
        if self.environment == Environment.PRODUCTION:
            if self.log_level == "DEBUG":
                self.log_level = "INFO"
            self.log_json = True

        elif self.environment == Environment.DEVELOPMENT:
            self.log_level = "DEBUG"
            self.log_json = False

        elif self.environment == Environment.TESTING:
            self.database_url = "sqlite://"
            self.log_level = "ERROR"
            self.log_to_file = False
            self.log_json = False

        elif self.environment == Environment.STAGING:
            self.log_level = "INFO"
            self.log_json = True

        return self

    @property
    def session_ttl(self) -> timedelta:
        """Get session lifetime as timedelta."""
        return timedelta(hours=self.session_ttl_hours)

    @property
    def log_file(self) -> Path | None:
        """Get log file path, or None when file logging is disabled."""
        if not self.log_to_file:
            return None
        return self.data_dir / "blogdb.log"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING

    @property
    def is_staging(self) -> bool:
        """Check if running in staging environment."""
        return self.environment == Environment.STAGING

    @property
    def uses_default_secret(self) -> bool:
        """Check if the built-in development session secret is in use."""
        return self.session_secret == DEFAULT_SESSION_SECRET

    def redact_secret(self) -> str:
        """Redact the session secret for display."""
        return redact_token(self.session_secret)


def get_settings() -> Settings:
    """Get a settings instance read from the environment.

    Returns:
        Configured Settings instance
    """
    return Settings()


# Global settings instance
settings = get_settings()
