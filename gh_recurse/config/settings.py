from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from ..core.constants import (
    API_BASE,
    CLONE_HOST,
    CONFIG_FILE_NAME,
    DEFAULT_CONCURRENCY,
    DEFAULT_DEST,
    DEFAULT_SSH_KEY,
    ENV_PREFIX,
    SSH_USER,
    TOKEN_ENV,
)
from ..core.types import LogLevel

logger = logging.getLogger(__name__)

# Load .env once, early
load_dotenv()


class Settings(BaseSettings):
    """Application config: CLI overrides, then env / .env, then the YAML config file."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_file=None, extra="ignore", yaml_file=None)

    github_oauth_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices(TOKEN_ENV, "GITHUB_TOKEN", "github_oauth_token"),
    )
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    dest: str = DEFAULT_DEST
    ssh_key_path: str = DEFAULT_SSH_KEY
    ssh_user: str = SSH_USER
    clone_host: str = CLONE_HOST
    api_base: str = API_BASE
    insecure: bool = False
    log_level: LogLevel = LogLevel.INFO

    @field_validator("dest")
    @classmethod
    def _expand_home(cls, value: str) -> str:
        return os.path.expanduser(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def default_config_file() -> Path:
    return Path.home() / CONFIG_FILE_NAME


def resolve_config_file(config_file: str | Path | None = None) -> Path | None:
    """Explicit file if given, else ~/.gh-recurse.yaml when it exists."""
    if config_file:
        return Path(config_file).expanduser()
    path = default_config_file()
    return path if path.is_file() else None


def get_settings(config_file: str | Path | None = None, **overrides: Any) -> Settings:
    path = resolve_config_file(config_file)

    class _FileSettings(Settings):
        model_config = SettingsConfigDict(yaml_file=path)

    if path is not None:
        logger.info("Using config file: %s", path)
    # None means "flag not given"; let env and file values through
    return _FileSettings(**{k: v for k, v in overrides.items() if v is not None})
