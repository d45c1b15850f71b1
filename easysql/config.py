"""Centralized settings loaded from environment variables.

Other modules should import ``get_settings()`` rather than reading the
environment directly.  Every variable carries the ``EASYSQL_`` prefix::

    EASYSQL_DATABASE_URL=sqlite:///app.db
    EASYSQL_DIALECT=sqlite
    EASYSQL_LOG_SQL=true
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from easysql.errors import ConfigurationError

#: Bind-parameter placeholder styles understood by the dialects.
ParamStyle = Literal["named", "pyformat", "at"]


class Settings(BaseSettings):
    """Package-wide configuration backed by environment variables.

    Field names are lowercased versions of the env-var names without the
    prefix; ``pydantic-settings`` maps them case-insensitively.
    """

    model_config = SettingsConfigDict(
        env_prefix="EASYSQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = None
    """``sqlite:///path`` for the stdlib executor, or any SQLAlchemy URL."""

    dialect: str = "sqlite"
    """Dialect target used to render placeholders and pattern concatenation."""

    paramstyle: ParamStyle | None = None
    """Overrides the dialect's default placeholder style."""

    log_sql: bool = False
    """Log every rendered statement at DEBUG level."""

    def require_database_url(self) -> str:
        """Return ``database_url`` or fail if it is not configured.

        Raises:
            ConfigurationError: If ``EASYSQL_DATABASE_URL`` is unset or blank.
        """
        if not self.database_url or not self.database_url.strip():
            raise ConfigurationError(
                "EASYSQL_DATABASE_URL is not set; a connection string is required "
                "to execute statements.",
                setting="database_url",
            )
        return self.database_url


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return Settings()
