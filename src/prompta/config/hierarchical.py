"""
Layered settings sources for Prompta.

Each scope contributes a flat dictionary of setting values; later scopes win.
The merged dictionary is validated by ``PromptaSettings``.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import commentjson

from .settings import default_config_dir

logger = logging.getLogger(__name__)

PROJECT_DIR_NAME = ".prompta"
SETTINGS_FILE_NAME = "settings.json"

DEFAULTS: Dict[str, Any] = {
    "store_name": "prompts",
    "editor": None,
    "log_level": "WARNING",
    "debug": False,
}

_REFERENCE = re.compile(r"\$(?:(\w+)|\{([^}]+)\})")


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


# (variable, setting key, converter)
ENVIRONMENT_KEYS: Tuple[Tuple[str, str, Optional[Callable[[str], Any]]], ...] = (
    ("PROMPTA_CONFIG_DIR", "config_dir", None),
    ("PROMPTA_STORE_NAME", "store_name", None),
    ("PROMPTA_EDITOR", "editor", None),
    ("PROMPTA_LOG_LEVEL", "log_level", None),
    ("PROMPTA_DEBUG", "debug", _as_bool),
)


class SettingScope(Enum):
    """Where a group of settings came from, lowest precedence first."""
    DEFAULT = "default"
    USER = "user"
    PROJECT = "project"
    ENVIRONMENT = "environment"


@dataclass
class SettingsFile:
    """Settings contributed by one scope."""
    path: Path
    settings: Dict[str, Any]
    scope: SettingScope
    exists: bool = True
    errors: List[str] = field(default_factory=list)


def expand_references(value: Any) -> Any:
    """Replace ``$NAME`` and ``${NAME}`` with environment values.

    Unknown variables are left as written.
    """
    if isinstance(value, dict):
        return {key: expand_references(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_references(item) for item in value]
    if not isinstance(value, str):
        return value

    def substitute(match: "re.Match[str]") -> str:
        name = match.group(1) or match.group(2)
        if name in os.environ:
            return os.environ[name]
        logger.warning(f"Environment variable not found: {name}")
        return match.group(0)

    return _REFERENCE.sub(substitute, value)


def find_project_dir(start: Path) -> Optional[Path]:
    """Nearest ``.prompta`` directory at or above ``start``.

    The search does not continue past a directory containing ``.git``.
    """
    for directory in (start, *start.parents):
        candidate = directory / PROJECT_DIR_NAME
        if candidate.is_dir():
            return candidate
        if (directory / ".git").exists():
            return None
    return None


class HierarchicalConfigLoader:
    """
    Collects settings from every scope and merges them.

    Precedence, lowest to highest:
    1. Built-in defaults
    2. User settings (``$XDG_CONFIG_HOME/prompta/settings.json``)
    3. Project settings (``.prompta/settings.json``)
    4. ``PROMPTA_*`` environment variables
    """

    def __init__(self, working_directory: Optional[Path] = None):
        self.working_directory = Path(working_directory or Path.cwd()).resolve()
        self._sources: Dict[SettingScope, SettingsFile] = {}

    def load_all_settings(self) -> Dict[str, Any]:
        """Read every scope and return the merged settings."""
        self._sources = {
            SettingScope.DEFAULT: SettingsFile(
                path=Path("(default)"), settings=dict(DEFAULTS), scope=SettingScope.DEFAULT
            ),
            SettingScope.USER: self._read_file(
                default_config_dir() / SETTINGS_FILE_NAME, SettingScope.USER
            ),
            SettingScope.PROJECT: self._project_source(),
            SettingScope.ENVIRONMENT: self._environment_source(),
        }

        merged: Dict[str, Any] = {}
        for scope in SettingScope:
            merged.update(self._sources[scope].settings)
        return merged

    def get_settings_file(self, scope: SettingScope) -> Optional[SettingsFile]:
        return self._sources.get(scope)

    def get_errors(self) -> List[str]:
        """Problems found while reading settings files, in precedence order."""
        return [
            error
            for scope in SettingScope
            if scope in self._sources
            for error in self._sources[scope].errors
        ]

    def _project_source(self) -> SettingsFile:
        project_dir = find_project_dir(self.working_directory)
        if project_dir is None:
            return SettingsFile(
                path=self.working_directory / PROJECT_DIR_NAME / SETTINGS_FILE_NAME,
                settings={},
                scope=SettingScope.PROJECT,
                exists=False,
            )
        return self._read_file(project_dir / SETTINGS_FILE_NAME, SettingScope.PROJECT)

    def _environment_source(self) -> SettingsFile:
        values: Dict[str, Any] = {}
        for variable, key, convert in ENVIRONMENT_KEYS:
            raw = os.environ.get(variable)
            if raw is not None:
                values[key] = convert(raw) if convert else raw

        return SettingsFile(
            path=Path("(environment)"),
            settings=values,
            scope=SettingScope.ENVIRONMENT,
            exists=bool(values),
        )

    def _read_file(self, path: Path, scope: SettingScope) -> SettingsFile:
        source = SettingsFile(path=path, settings={}, scope=scope, exists=path.is_file())
        if not source.exists:
            logger.debug(f"No {scope.value} settings at {path}")
            return source

        try:
            text = path.read_text(encoding="utf-8")
            data = commentjson.loads(text) if text.strip() else {}
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
        except Exception as e:
            message = f"Error loading {path}: {e}"
            logger.warning(message)
            source.errors.append(message)
            return source

        source.settings = expand_references(data)
        logger.debug(f"Loaded {scope.value} settings from {path}")
        return source
