"""Settings for the TechCareer service tier.

Every setting can be supplied as a ``TECHCAREER_``-prefixed environment
variable (``TECHCAREER_STORE_SQLITE_PATH``, ``TECHCAREER_LOG_LEVEL``, ...)
or in a ``.env`` file. Values are validated by pydantic when loaded.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Store location and logging options.

    Environment variables are matched case-insensitively; a ``.env`` file in
    the working directory is read when present.
    """

    model_config = SettingsConfigDict(
        env_prefix="TECHCAREER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Store
    store_sqlite_path: str = Field(
        default="./data/techcareer.db",
        description="SQLite database file; parent directories are created",
    )
    store_pool_size: int = Field(
        default=5,
        description="Idle SQLite connections kept open for reuse",
    )

    # Logging
    log_level: LogLevel = Field(default="INFO", description="Root log level")
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Line format for log records written to stdout",
    )

    debug: bool = Field(
        default=False,
        description="Force DEBUG logging regardless of log_level",
    )

    @field_validator("store_pool_size")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        """Ensure pool size is positive."""
        if v <= 0:
            raise ValueError("store_pool_size must be positive")
        return v

    @field_validator("store_sqlite_path")
    @classmethod
    def validate_sqlite_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("store_sqlite_path must not be empty")
        return v

    @property
    def effective_log_level(self) -> LogLevel:
        return "DEBUG" if self.debug else self.log_level


def load_settings(env_file: str | None = None) -> Settings:
    """Build Settings from the environment.

    Args:
        env_file: Read this file instead of ``./.env``.

    Raises:
        ValidationError: If a value fails validation.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
