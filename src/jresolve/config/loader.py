"""
Settings loading.

Layers, later wins: built-in defaults, the YAML settings file, explicit
overrides (usually CLI flags).
"""

import copy
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from jresolve.exceptions import ConfigurationError

CONFIG_ENV_VAR = "JRESOLVE_CONFIG"
DEFAULT_CONFIG_NAME = "jresolve.yaml"

DEFAULTS: dict[str, Any] = {
    "resolver": {
        "unique_match": True,
        "external": True,
        "max_substitutions": 1000,
    },
    "shell": {
        "executable": None,
    },
    "logging": {
        "level": "WARNING",
        "file": None,
        "console_type": "rich",
    },
    "output": {
        "indent": 2,
    },
}


class Settings:
    """jresolve settings container with dict-like access."""

    def __init__(self, data: dict[str, Any]):
        self.data = data

    @property
    def unique_match(self) -> bool:
        return bool(self.get("resolver.unique_match", True))

    @property
    def external(self) -> bool:
        return bool(self.get("resolver.external", True))

    @property
    def max_substitutions(self) -> int:
        return self.get("resolver.max_substitutions", 1000)

    @property
    def shell_executable(self) -> str | None:
        return self.get("shell.executable")

    @property
    def indent(self) -> int | None:
        return self.get("output.indent", 2)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting using dot notation."""
        value: Any = self.data
        for k in key.split("."):
            if not isinstance(value, dict):
                return default
            value = value.get(k)
            if value is None:
                return default
        return value

    def __getitem__(self, key: str) -> Any:
        """Dict-like access: settings['resolver'] or settings['resolver.unique_match']."""
        if key in self:
            return self.get(key)
        raise KeyError(f"Setting '{key}' not found")

    def __contains__(self, key: str) -> bool:
        value: Any = self.data
        for k in key.split("."):
            if not isinstance(value, dict) or k not in value:
                return False
            value = value[k]
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def validate(self) -> None:
        """Validate setting types."""
        errors = []

        for section in DEFAULTS:
            value = self.data.get(section)
            if value is not None and not isinstance(value, dict):
                errors.append(f"Setting '{section}' must be a mapping, got {type(value).__name__}")
        if errors:
            raise ConfigurationError("\n".join(errors))

        for key in ("resolver.unique_match", "resolver.external"):
            if not isinstance(self.get(key), bool):
                errors.append(f"Setting '{key}' must be true or false, got {self.get(key)!r}")

        limit = self.get("resolver.max_substitutions")
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
            errors.append(f"Setting 'resolver.max_substitutions' must be a positive integer, got {limit!r}")

        executable = self.shell_executable
        if executable is not None and not isinstance(executable, str):
            errors.append(f"Setting 'shell.executable' must be a string, got {executable!r}")

        indent = self.get("output.indent")
        if indent is not None and (isinstance(indent, bool) or not isinstance(indent, int) or indent < 0):
            errors.append(f"Setting 'output.indent' must be a non-negative integer, got {indent!r}")

        console_type = self.get("logging.console_type", "rich")
        if console_type not in ("rich", "plain"):
            errors.append(f"Setting 'logging.console_type' must be 'rich' or 'plain', got {console_type!r}")

        if errors:
            raise ConfigurationError("\n".join(errors))


def _find_config_file(config_path: Path | None) -> Path | None:
    if config_path is not None:
        return Path(config_path)
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    candidate = Path.cwd() / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(
            f"Settings file not found: {path}\n"
            f"  Suggestion: Check the --config path or the {CONFIG_ENV_VAR} variable",
            details={"path": str(path)},
        )
    if not path.is_file():
        raise ConfigurationError(f"Settings path is not a file: {path}", details={"path": str(path)})

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        if hasattr(e, "problem_mark"):
            mark = e.problem_mark
            raise ConfigurationError(
                f"Error parsing {path.name} at line {mark.line + 1}, column {mark.column + 1}:\n"
                f"  {e}\n"
                f"  Suggestion: Check YAML syntax, ensure proper indentation and quotes",
                details={"path": str(path)},
            ) from e
        raise ConfigurationError(f"Error parsing {path.name}: {e}", details={"path": str(path)}) from e
    except PermissionError as e:
        raise ConfigurationError(f"Permission denied reading settings: {path}", details={"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must contain a mapping, got {type(data).__name__}")
    return data


def load_settings(config_path: Path | None = None, overrides: dict[str, Any] | None = None) -> Settings:
    """
    Load jresolve settings.

    Args:
        config_path: Explicit settings file (default: $JRESOLVE_CONFIG, then
            ./jresolve.yaml if present)
        overrides: Nested mapping applied last, e.g. {"resolver": {"external": False}}

    Returns:
        Validated Settings instance
    """
    data = copy.deepcopy(DEFAULTS)

    path = _find_config_file(config_path)
    if path is not None:
        _merge_dict(data, _read_yaml(path))

    if overrides:
        _merge_dict(data, overrides)

    settings = Settings(data)
    settings.validate()
    return settings


def _merge_dict(base: dict, override: dict):
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
