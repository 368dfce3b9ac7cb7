"""
QuizFlow settings.

Settings come from one YAML file, found in this order:

1. the file named by ``QUIZFLOW_CONFIG_PATH``
2. ``./config.yaml``
3. the ``config.yaml`` shipped inside this package

Any value can then be overridden from the environment as
``QUIZFLOW_<SECTION>__<KEY>``, e.g. ``QUIZFLOW_DRAFTS__TYPE=sql``.

This module must not use the project logger: logging is configured from
these settings, so it only talks to the plain ``logging`` module.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

_log = logging.getLogger(__name__)

CONFIG_PATH_ENV = "QUIZFLOW_CONFIG_PATH"
PACKAGED_CONFIG = Path(__file__).with_name("config.yaml")
DEFAULT_DRAFT_KEY = "quiz-builder-draft"


class FileDraftSettings(BaseModel):
    base_dir: str = Field(default=".quizflow/drafts",
                          description="Directory holding one JSON file per draft key")


class SQLDraftSettings(BaseModel):
    connection_string: str = Field(default="sqlite:///quizflow.db",
                                   description="SQLAlchemy database URL")


class DraftSettings(BaseModel):
    """Where the builder draft lives."""
    type: Literal["file", "sql"] = "file"
    key: str = Field(default=DEFAULT_DRAFT_KEY, min_length=1)
    file: FileDraftSettings = Field(default_factory=FileDraftSettings)
    sql: SQLDraftSettings = Field(default_factory=SQLDraftSettings)


class ExportSettings(BaseModel):
    output_dir: str = "."
    indent: int = Field(default=2, ge=0, le=8)


class LoggingSettings(BaseModel):
    """A ``logging.config.dictConfig`` dictionary; unknown keys pass through."""
    model_config = ConfigDict(extra="allow")

    version: int = 1
    disable_existing_loggers: bool = False
    formatters: dict[str, Any] = Field(default_factory=dict)
    handlers: dict[str, Any] = Field(default_factory=dict)
    root: dict[str, Any] = Field(default_factory=dict)
    loggers: dict[str, Any] = Field(default_factory=dict)


class AppSettings(BaseSettings):
    """Validated QuizFlow settings."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZFLOW_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    drafts: DraftSettings = Field(default_factory=DraftSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs, so the environment has to outrank them
        return env_settings, init_settings

    @classmethod
    def from_yaml(cls, config_path: str | None = None) -> AppSettings:
        """
        Build settings from a YAML file.

        Args:
            config_path: File to read; searched for when omitted

        Raises:
            FileNotFoundError: No config file exists
            ValueError: The file is not valid YAML, is not a mapping, or
                holds invalid values
        """
        path = config_path or find_config_file()
        data = read_config_file(path)
        try:
            settings = cls(**data)
        except ValidationError as e:
            _log.error(f"Invalid settings in {path}: {e}")
            raise ValueError(f"Configuration validation failed for {path}:\n{e}") from e
        _log.info(f"Loaded configuration from {path}")
        return settings


def config_search_paths() -> list[str]:
    """Candidate config files, most specific first; unset entries are skipped."""
    candidates = [os.getenv(CONFIG_PATH_ENV, ""), "config.yaml", str(PACKAGED_CONFIG)]
    return [path for path in candidates if path]


def find_config_file() -> str:
    for path in config_search_paths():
        if os.path.isfile(path):
            return path
    searched = ", ".join(config_search_paths())
    raise FileNotFoundError(
        f"No configuration file found (searched: {searched}). "
        f"Set {CONFIG_PATH_ENV} or add ./config.yaml.")


def read_config_file(path: str) -> dict[str, Any]:
    """Parse a YAML config file; an empty file means all defaults."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {path}") from None
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")
    return data


class ConfigManager:
    """Process-wide access point to the loaded settings."""

    _instance: ConfigManager | None = None

    def __init__(self):
        self._settings: AppSettings | None = None
        self._config_path: str | None = None

    @classmethod
    def get_instance(cls) -> ConfigManager:
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Forget the loaded settings (for testing)."""
        cls._instance = None

    def load(self, config_path: str | None = None) -> dict[str, Any]:
        """
        Load settings, once unless an explicit path is given.

        Returns:
            dict: The settings as plain data
        """
        if self._settings is None or config_path is not None:
            self._settings = AppSettings.from_yaml(config_path)
            self._config_path = config_path
        return self._settings.model_dump()

    @property
    def settings(self) -> AppSettings:
        if self._settings is None:
            self.load()
        return self._settings

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``drafts.file.base_dir``."""
        node: Any = self.get_config()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_config(self) -> dict[str, Any]:
        return self.settings.model_dump()

    def get_config_path(self) -> str | None:
        return self._config_path

    @property
    def draft_store_type(self) -> str:
        return self.settings.drafts.type

    @property
    def draft_key(self) -> str:
        return self.settings.drafts.key

    @property
    def draft_file_base_dir(self) -> str:
        return self.settings.drafts.file.base_dir

    @property
    def draft_sql_connection_string(self) -> str:
        return self.settings.drafts.sql.connection_string

    @property
    def export_output_dir(self) -> str:
        return self.settings.export.output_dir

    @property
    def export_indent(self) -> int:
        return self.settings.export.indent

    @property
    def logging_config(self) -> dict[str, Any]:
        return self.settings.logging.model_dump()


def get_config_manager() -> ConfigManager:
    return ConfigManager.get_instance()


__all__ = [
    'AppSettings',
    'ConfigManager',
    'DEFAULT_DRAFT_KEY',
    'DraftSettings',
    'ExportSettings',
    'FileDraftSettings',
    'LoggingSettings',
    'SQLDraftSettings',
    'find_config_file',
    'get_config_manager',
]
