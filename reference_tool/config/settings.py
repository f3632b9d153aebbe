# reference_tool/config/settings.py

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple, Type

import tomli_w
from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from reference_tool.errors import ConfigError
from reference_tool.output.writer import OutputFormat


logger = logging.getLogger(__name__)

APP_NAME = "reference_tool"
CONFIG_FILE_ENV = "REFTOOL_CONFIG_FILE"


def config_file_path() -> Path:
    """
    Location of the TOML config file.

    REFTOOL_CONFIG_FILE wins; otherwise the per-user config directory,
    e.g. ~/.config/reference_tool/config.toml on Linux.
    """
    override = os.getenv(CONFIG_FILE_ENV)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME)) / "config.toml"


class ApiSettings(BaseModel):
    """Settings for talking to the INSPIRE-HEP REST API."""

    base_url: str = Field(
        default="https://inspirehep.net/api",
        description="Base URL of the INSPIRE-HEP API.",
    )
    timeout_seconds: float = Field(
        default=30,
        gt=0,
        description="Per-request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries for 429/5xx responses and connection errors.",
    )
    request_delay_ms: int = Field(
        default=100,
        ge=0,
        description="Minimum delay between two consecutive requests.",
    )


class UiSettings(BaseModel):
    """Terminal presentation knobs for the CLI."""

    show_progress: bool = Field(
        default=True,
        description="Show a spinner while a network is being built.",
    )
    use_colors: bool = Field(
        default=True,
        description="Use colored console output.",
    )
    spinner: str = Field(
        default="dots",
        description="Name of the rich spinner used for progress.",
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        extra="ignore",
        env_nested_delimiter="__",
        env_prefix="REFTOOL_",
    )

    # ------------------------------------------------------------------
    # Output defaults
    # ------------------------------------------------------------------
    default_format: OutputFormat = Field(
        default=OutputFormat.JSON,
        description="Output format used when --format is not given.",
    )

    default_output_dir: Optional[Path] = Field(
        default=None,
        description="Directory for output files when --output is not given.",
    )

    default_categories: Optional[List[str]] = Field(
        default=None,
        description="Category filter applied when --categories is not given.",
    )

    # ------------------------------------------------------------------
    # Behaviour
    # ------------------------------------------------------------------
    verbose: bool = Field(
        default=False,
        description="Enable debug logging by default.",
    )

    default_network_depth: int = Field(
        default=1,
        ge=0,
        description="Citation network depth used when --depth is not given.",
    )

    api: ApiSettings = Field(default_factory=ApiSettings)
    ui: UiSettings = Field(default_factory=UiSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Environment overrides the config file, explicit kwargs override both.
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=config_file_path()),
        )

    # ------------------------------------------------------------------
    # Effective values: CLI argument first, config second
    # ------------------------------------------------------------------
    def effective_format(self, cli_format: Optional[OutputFormat]) -> OutputFormat:
        return cli_format if cli_format is not None else self.default_format

    def effective_output_dir(self, cli_output: Optional[Path]) -> Optional[Path]:
        return cli_output if cli_output is not None else self.default_output_dir

    def effective_categories(self, cli_categories: Optional[str]) -> Optional[List[str]]:
        """
        Parse a comma-separated CLI value, or fall back to the configured list.
        """
        if cli_categories is not None:
            return [c.strip() for c in cli_categories.split(",") if c.strip()]
        return self.default_categories

    def effective_verbose(self, cli_verbose: bool) -> bool:
        return cli_verbose or self.verbose

    def effective_depth(self, cli_depth: Optional[int]) -> int:
        return cli_depth if cli_depth is not None else self.default_network_depth


def default_settings() -> Settings:
    """Built-in defaults, ignoring the environment and any config file."""
    return Settings.model_construct()


def render_settings(settings: Settings) -> str:
    """TOML text for a Settings instance (unset optional values are omitted)."""
    data = settings.model_dump(mode="json", exclude_none=True)
    return tomli_w.dumps(data)


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Write `settings` to `path` (default: config_file_path()) and return it."""
    path = Path(path) if path is not None else config_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings(settings), encoding="utf-8")
    return path


def load_settings(create_if_missing: bool = True) -> Settings:
    """
    Build Settings from the environment and the TOML config file.

    When the file does not exist yet and `create_if_missing` is set, the
    defaults are written out so users have something to edit.
    """
    path = config_file_path()
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc
    except ValueError as exc:
        # tomllib.TOMLDecodeError is a ValueError subclass
        raise ConfigError(f"Could not parse configuration file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read configuration file {path}: {exc}") from exc

    if create_if_missing and not path.exists():
        try:
            save_settings(default_settings(), path)
        except OSError as exc:
            logger.warning("Could not write default configuration to %s: %s", path, exc)
        else:
            logger.info("Default configuration written to %s", path)

    return settings
