"""JSON config loading and per-module config records.

The config file is a JSON object: top-level prompt options plus one object per
module name. Missing files mean "all defaults"; malformed values fall back to
the documented defaults with a warning. Format strings are validated once at
startup through ``validate_config``.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import ClassVar, TypeVar

from platformdirs import user_config_dir

from .errors import ConfigError, TemplateSyntaxError
from .template import parse_template
from .versions import DEFAULT_VERSION_FORMAT

logger = logging.getLogger(__name__)

APP_NAME = "promptline"
CONFIG_FILENAME = "config.json"
CONFIG_ENV = "PROMPTLINE_CONFIG"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_MODULES = ("nodejs", "angular")
DEFAULT_MODULE_TIMEOUT_MS = 500
DEFAULT_COMMAND_TIMEOUT_MS = 500

C = TypeVar("C", bound="ModuleConfig")


def config_path(explicit: Path | None = None) -> Path:
    """Return the config path: explicit argument, then ``$PROMPTLINE_CONFIG``, then default."""
    if explicit is not None:
        return explicit
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    The default location is optional: a missing, unreadable or malformed file
    yields an empty dict. A path given explicitly must be usable and raises
    ``ConfigError`` otherwise.
    """
    target = config_path(path)
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        if path is not None:
            raise ConfigError(f"config file not found: {target}") from exc
        return {}
    except (OSError, ValueError) as exc:
        if path is not None:
            raise ConfigError(f"cannot read config {target}: {exc}") from exc
        logger.warning("ignoring unreadable config %s: %s", target, exc)
        return {}
    if not isinstance(data, dict):
        if path is not None:
            raise ConfigError(f"config {target} must contain a JSON object")
        logger.warning("ignoring config %s: top level is not an object", target)
        return {}
    return data


def _coerce(owner: str, key: str, default: object, value: object) -> object:
    """Return ``value`` when it has the shape of ``default``, else ``default``."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
    elif isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
    elif isinstance(default, str):
        if isinstance(value, str):
            return value
    elif isinstance(default, tuple):
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return tuple(value)
    logger.warning("config `%s.%s`: unexpected value %r, using default", owner, key, value)
    return default


@dataclass(frozen=True)
class ModuleConfig:
    """Fields shared by every module."""

    format: str = "[$symbol]($style)"
    symbol: str = ""
    style: str = "bold"
    disabled: bool = False

    META_VARIABLES: ClassVar[tuple[str, ...]] = ("symbol",)
    TEMPLATE_FIELDS: ClassVar[tuple[str, ...]] = ("format",)

    @classmethod
    def from_mapping(cls: type[C], name: str, data: object) -> C:
        """Build a config from a JSON object, keeping defaults for bad values."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            logger.warning("config `%s` must be an object, using defaults", name)
            return cls()
        defaults = cls()
        known = {item.name for item in fields(cls)}
        values: dict[str, object] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("config `%s`: unknown key `%s`", name, key)
                continue
            values[key] = _coerce(name, key, getattr(defaults, key), value)
        return cls(**values)

    def templates(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in self.TEMPLATE_FIELDS}


@dataclass(frozen=True)
class AngularConfig(ModuleConfig):
    format: str = "via [$symbol($version )]($style)"
    version_format: str = DEFAULT_VERSION_FORMAT
    symbol: str = "\U000f06bf "
    style: str = "bold green"
    not_capable_style: str = "bold red"
    detect_package_json: tuple[str, ...] = ("package.json",)
    detect_angular_json: tuple[str, ...] = ("angular.json",)

    TEMPLATE_FIELDS: ClassVar[tuple[str, ...]] = ("format", "version_format")


@dataclass(frozen=True)
class NodejsConfig(ModuleConfig):
    format: str = "via [$symbol($version )]($style)"
    version_format: str = DEFAULT_VERSION_FORMAT
    symbol: str = "\ue718 "
    style: str = "bold green"
    detect_extensions: tuple[str, ...] = ("js", "mjs", "cjs", "ts", "mts", "cts")
    detect_files: tuple[str, ...] = ("package.json", ".node-version", ".nvmrc")
    detect_folders: tuple[str, ...] = ("node_modules",)
    exclude_folders: tuple[str, ...] = ("esy.lock",)

    TEMPLATE_FIELDS: ClassVar[tuple[str, ...]] = ("format", "version_format")


MODULE_CONFIGS: dict[str, type[ModuleConfig]] = {
    "angular": AngularConfig,
    "nodejs": NodejsConfig,
}


@dataclass(frozen=True)
class PromptConfig:
    """Top-level prompt options plus raw per-module objects."""

    modules: tuple[str, ...] = DEFAULT_MODULES
    module_timeout_ms: int = DEFAULT_MODULE_TIMEOUT_MS
    command_timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS
    add_newline: bool = False
    module_data: Mapping[str, object] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> PromptConfig:
        defaults = cls()
        values: dict[str, object] = {}
        module_data: dict[str, object] = {}
        for key, value in data.items():
            if key in MODULE_CONFIGS:
                module_data[key] = value
            elif key in {"modules", "module_timeout_ms", "command_timeout_ms", "add_newline"}:
                values[key] = _coerce("prompt", key, getattr(defaults, key), value)
            else:
                logger.warning("config: unknown key `%s`", key)
        return cls(module_data=module_data, **values)

    def module_config(self, name: str) -> ModuleConfig:
        """Return the typed config record for module ``name``."""
        config_cls = MODULE_CONFIGS.get(name)
        if config_cls is None:
            raise KeyError(name)
        return config_cls.from_mapping(name, self.module_data.get(name))


def load_prompt_config(path: Path | None = None) -> PromptConfig:
    return PromptConfig.from_mapping(load_config(path))


def validate_config(config: PromptConfig, names: Iterable[str] | None = None) -> None:
    """Parse the templates of ``names`` (default: the configured modules) once.

    Raises ``ConfigError`` naming the module and field for unknown modules and
    for format strings with syntax errors.
    """
    for name in config.modules if names is None else names:
        if name not in MODULE_CONFIGS:
            raise ConfigError(f"unknown module `{name}`")
        module_config = config.module_config(name)
        for field_name, source in module_config.templates().items():
            try:
                parse_template(source, module_config.META_VARIABLES)
            except TemplateSyntaxError as exc:
                raise ConfigError(f"module `{name}` field `{field_name}`: {exc}") from exc


__all__ = [
    "APP_NAME",
    "CONFIG_ENV",
    "DEFAULT_CONFIG_PATH",
    "MODULE_CONFIGS",
    "ModuleConfig",
    "AngularConfig",
    "NodejsConfig",
    "PromptConfig",
    "config_path",
    "load_config",
    "load_prompt_config",
    "validate_config",
]
