from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_FILE = "config.properties"


class Settings(BaseSettings):
    """Connection settings read from a `key=value` file (and the environment).

    Keys that are absent load as None. No defaults are substituted for the
    connection keys; the connection provider reports what is missing.
    """

    model_config = SettingsConfigDict(
        env_file=DEFAULT_CONFIG_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "prontuario"
    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )

    db_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DB_SCHEMA", "DB_NAME", "db_name"),
        description="Database (schema) name, created on first connection if missing.",
    )
    db_user: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DB_USER", "db_user"),
        description="Database user.",
    )
    db_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DB_PASSWORD", "db_password"),
        description="Database password.",
    )
    db_address: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DB_ADDRESS", "DB_HOST", "db_address"),
        description="Database server host name or IP address.",
    )
    db_port: int | None = Field(
        default=None,
        validation_alias=AliasChoices("DB_PORT", "db_port"),
        description="Database server port.",
    )

    # Takes precedence over the DB_* keys (e.g. sqlite:///prontuario.sqlite3 for local runs).
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
        description="Full SQLAlchemy URL overriding the MySQL URL built from DB_* keys.",
    )

    @property
    def is_development(self) -> bool:
        return str(self.app_env).strip().lower() == "development"

    def missing_connection_keys(self) -> list[str]:
        """Return the config keys still needed to build the MySQL URL."""
        if self.database_url:
            return []
        required = {
            "DB_SCHEMA": self.db_name,
            "DB_USER": self.db_user,
            "DB_ADDRESS": self.db_address,
            "DB_PORT": self.db_port,
        }
        return [key for key, value in required.items() if value in (None, "")]


def load_settings(path: str | Path | None = DEFAULT_CONFIG_FILE) -> Settings:
    """Build the settings object once at startup; callers pass it on explicitly."""
    return Settings(_env_file=path)
