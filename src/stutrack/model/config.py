"""Manage configuration settings for the Student Interactions Tracker."""

import argparse
import dataclasses
import enum
import os
import pathlib
import tomllib
from collections.abc import Mapping
from typing import Optional

from sqlalchemy import engine


DB_FILE_NAME = "stutrack.db"
CONFIG_FILE_NAME = "stutrack.toml"
DEFAULT_MYSQL_PORT = 3306

# Environment variable name for each MySQL setting.
ENV_VARS = {
    "mysql_host": "MYSQL_HOST",
    "mysql_port": "MYSQL_PORT",
    "mysql_user": "MYSQL_USER",
    "mysql_password": "MYSQL_PASSWORD",
    "mysql_database": "MYSQL_DATABASE",
}
REQUIRED_SETTINGS = ["mysql_host", "mysql_user", "mysql_password", "mysql_database"]


class ConfigError(Exception):
    """Errors when setting or accessing settings."""

    class ErrorType(enum.Enum):
        NOT_A_FILE = 1
        MISSING_VALUE = 2
        INVALID_VALUE = 3

    error_type: ErrorType

    def __init__(self, message: str, error_type: ErrorType) -> None:
        """Set error type."""
        super().__init__(message)
        self.error_type = error_type


@dataclasses.dataclass
class Settings:
    """Configuration data for the stutrack application.

    MySQL connection values normally come from the MYSQL_* environment
    variables. Setting db_path switches the application to a local Sqlite
    file, which is handy for trying the application out and for tests.
    """

    db_path: Optional[pathlib.Path] = None
    config_path: Optional[pathlib.Path] = None
    mysql_host: Optional[str] = None
    mysql_port: int = DEFAULT_MYSQL_PORT
    mysql_user: Optional[str] = None
    mysql_password: Optional[str] = None
    mysql_database: Optional[str] = None
    recent_limit: int = 20

    @property
    def uses_sqlite(self) -> bool:
        """True if a local Sqlite file was selected instead of MySQL."""
        return self.db_path is not None

    @property
    def missing_values(self) -> list[str]:
        """Environment variable names of required MySQL settings that are unset."""
        return [
            ENV_VARS[name] for name in REQUIRED_SETTINGS if not getattr(self, name)
        ]

    def update_from_args(self, args: argparse.Namespace) -> None:
        """Read settings from the config file, environment, and command line."""
        self.config_path = self._get_full_path(
            getattr(args, "config_path", None), CONFIG_FILE_NAME
        )
        if self.config_path is not None:
            self._read_config_file()
        self.update_from_env(os.environ)
        db_path = getattr(args, "db_path", None)
        if db_path is not None:
            self.db_path = self._convert_path_to_absolute(db_path)

    def update_from_env(self, environ: Mapping[str, str]) -> None:
        """Read MYSQL_* environment variables. Blank variables are ignored."""
        for setting_name, var_name in ENV_VARS.items():
            value = environ.get(var_name, "").strip()
            if not value:
                continue
            if setting_name == "mysql_port":
                self.mysql_port = self._parse_port(value)
            else:
                setattr(self, setting_name, value)

    def database_url(self) -> engine.URL:
        """SQLAlchemy URL for the MySQL database.

        Raises:
            ConfigError if any required value is missing.
        """
        if self.missing_values:
            raise ConfigError(
                "Missing required configuration: " + ", ".join(self.missing_values),
                ConfigError.ErrorType.MISSING_VALUE,
            )
        return engine.URL.create(
            "mysql+pymysql",
            username=self.mysql_user,
            password=self.mysql_password,
            host=self.mysql_host,
            port=self.mysql_port,
            database=self.mysql_database,
            query={"charset": "utf8mb4"},
        )

    def describe(self) -> dict[str, str]:
        """Settings for display, with the password masked."""
        return {
            "Host": self.mysql_host or "(not set)",
            "Port": (
                f"{self.mysql_port} (default)"
                if self.mysql_port == DEFAULT_MYSQL_PORT
                else str(self.mysql_port)
            ),
            "User": self.mysql_user or "(not set)",
            "Password": "***set***" if self.mysql_password else "(empty)",
            "Database": self.mysql_database or "(not set)",
        }

    @staticmethod
    def _parse_port(value: str | int) -> int:
        """Convert a port number to an integer."""
        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"MYSQL_PORT must be an integer, got {value!r}",
                ConfigError.ErrorType.INVALID_VALUE,
            ) from None

    @staticmethod
    def _convert_path_to_absolute(path: pathlib.Path | str) -> pathlib.Path:
        """Convert relative paths to absolute paths."""
        if isinstance(path, str):
            path = pathlib.Path(path)
        return path if path.is_absolute() else pathlib.Path.cwd() / path

    @staticmethod
    def _get_full_path(
        path: Optional[pathlib.Path], default_file_name: str
    ) -> Optional[pathlib.Path]:
        """Convert path arg to full filesystem path.

        If path is None, looks for file in current working directory. Otherwise
        converts relative paths to absolute paths. Returns None if no file is
        found at the default location. Raises ConfigError if an explicit path
        does not point to an existing file.
        """
        if path is None:
            full_path = pathlib.Path.cwd() / default_file_name
            return full_path if full_path.is_file() else None
        full_path = Settings._convert_path_to_absolute(path)
        if not full_path.is_file():
            raise ConfigError(
                f"Configuration file {full_path} does not exist.",
                ConfigError.ErrorType.NOT_A_FILE,
            )
        return full_path

    def _read_config_file(self) -> None:
        """Read TOML configuration file."""
        if self.config_path is None:
            return
        app_settings = dataclasses.asdict(self)
        with open(self.config_path, "rb") as toml_file:
            file_settings = tomllib.load(toml_file)
        for setting_name, value in file_settings.items():
            if setting_name not in app_settings:
                continue
            if isinstance(value, str) and value.lower() in ["", "none", "null"]:
                value = None
            if setting_name == "db_path" and value is not None:
                self.db_path = self._convert_path_to_absolute(value)
            elif setting_name == "mysql_port" and value is not None:
                self.mysql_port = self._parse_port(value)
            elif setting_name != "config_path":
                setattr(self, setting_name, value)


# Store settings in a module-level variable, which will be available from any
# other module that imports stutrack.model.config.
settings = Settings()
