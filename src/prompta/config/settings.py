"""
Configuration settings for Prompta.

This module provides configuration management using Pydantic settings
with support for environment variables and hierarchical settings files.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.errors import ConfigurationError

APP_NAME = "prompta"


def default_config_dir() -> Path:
    """Per-user configuration directory, honoring ``XDG_CONFIG_HOME``."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home) / APP_NAME
    return Path.home() / ".config" / APP_NAME


class PromptaSettings(BaseSettings):
    """
    Main configuration settings for Prompta.

    Settings are loaded from multiple sources in order of preference:
    1. Environment variables (prefixed with PROMPTA_)
    2. Project and user settings files
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMPTA_",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage Configuration
    config_dir: Path = Field(
        default_factory=default_config_dir,
        description="Directory holding the prompt library"
    )

    store_name: str = Field(
        default="prompts",
        description="File name (without extension) of the prompt library"
    )

    # Editor Configuration
    editor: Optional[str] = Field(
        default=None,
        description="Editor command, overrides VISUAL and EDITOR"
    )

    # Logging Configuration
    log_level: str = Field(
        default="WARNING",
        description="Logging level"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    @field_validator("config_dir")
    @classmethod
    def expand_config_dir(cls, v: Path) -> Path:
        """Expand ``~`` in the configuration directory."""
        return v.expanduser()

    @field_validator("store_name")
    @classmethod
    def validate_store_name(cls, v: str) -> str:
        """Validate the store file name."""
        v = v.strip()
        if not v or v in {".", ".."} or "/" in v or "\\" in v:
            raise ValueError(f"Invalid store name '{v}'. Use a plain file name.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Valid levels: {', '.join(sorted(valid_levels))}")
        return v_upper

    @property
    def store_path(self) -> Path:
        """Path to the prompt library file."""
        return self.config_dir / f"{self.store_name}.json"

    @property
    def effective_log_level(self) -> int:
        """Numeric logging level, DEBUG when debug mode is on."""
        if self.debug:
            return logging.DEBUG
        return getattr(logging, self.log_level)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to a JSON-friendly dictionary."""
        data = self.model_dump()
        data["config_dir"] = str(self.config_dir)
        return data


def load_settings(
    working_directory: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> PromptaSettings:
    """Load effective settings from .env, settings files and the environment.

    Args:
        working_directory: Directory used to discover project settings
        overrides: Values taking precedence over every other source

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If the merged settings are invalid
    """
    from .env_loader import EnvFileLoader
    from .hierarchical import HierarchicalConfigLoader

    EnvFileLoader(working_directory).load_env_file()

    loader = HierarchicalConfigLoader(working_directory)
    merged = loader.load_all_settings()
    if overrides:
        merged.update(overrides)

    try:
        return PromptaSettings(**merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}", original_error=e) from e
