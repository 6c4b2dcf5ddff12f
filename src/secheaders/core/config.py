# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Type-safe configuration with YAML/TOML files, env vars, and dataclass binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from secheaders.kernel.exceptions import InvalidConfigurationException

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__secheaders_config_prefix__"

ENV_PREFIX = "SECHEADERS_"

_MAX_PLACEHOLDER_DEPTH = 10


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Works with both dataclasses and Pydantic BaseModel subclasses.

    Usage:
        @config_properties(prefix="secheaders.cache")
        @dataclass
        class CacheProperties:
            provider: str = "auto"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (SECHEADERS_GROUP_KEY format)
    2. Configuration dict / YAML / TOML file values
    3. Packaged defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """List of config file paths that were loaded, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load configuration from a YAML or TOML file.

        Merge order (later wins):
        1. Packaged defaults (secheaders-defaults.yaml)
        2. The file at *path*, if it exists
        3. Profile overlays next to it: ``<stem>-<profile><suffix>``
        """
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_defaults()
            sources.append("secheaders-defaults.yaml (defaults)")

        if path.exists():
            data = cls._deep_merge(data, cls._load_config_data(path))
            sources.append(str(path))

            for profile in active_profiles or []:
                profile_path = path.parent / f"{path.stem}-{profile}{path.suffix}"
                if profile_path.exists():
                    data = cls._deep_merge(data, cls._load_config_data(profile_path))
                    sources.append(f"{profile_path} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        """Load config data from a YAML or TOML file."""
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    data = tomllib.load(f) or {}
            else:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise InvalidConfigurationException(
                f"Cannot parse settings file '{path}': {exc}",
                code="CONFIG_PARSE",
                context={"path": str(path)},
            ) from exc

        if not isinstance(data, dict):
            raise InvalidConfigurationException(
                f"Settings file '{path}' must contain a mapping at the top level",
                code="CONFIG_SHAPE",
                context={"path": str(path)},
            )
        return data

    @staticmethod
    def _load_defaults() -> dict[str, Any]:
        """Load the packaged defaults from secheaders.resources."""
        defaults_file = importlib.resources.files("secheaders.resources").joinpath("secheaders-defaults.yaml")
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values may hold ``${ENV_VAR}``, ``${secheaders.other.key}`` or
        ``${name:fallback}`` placeholders, resolved on read.
        """
        env_val = os.environ.get(self.env_key(key))
        if env_val is not None:
            return env_val

        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    @staticmethod
    def env_key(key: str) -> str:
        """Return the environment variable that overrides *key*.

        ``secheaders.csp.enabled`` -> ``SECHEADERS_CSP_ENABLED``
        """
        base = key.removeprefix("secheaders.")
        return ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
        return current

    def _resolve_placeholders(self, value: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Circular placeholder reference in '{value}'")

        def _replace(match: re.Match[str]) -> str:
            ref, sep, fallback = match.group(1).partition(":")
            resolved = os.environ.get(ref)
            if resolved is None:
                found = self._lookup(ref)
                resolved = None if found is None else str(found)
            if resolved is None:
                if not sep:
                    raise ValueError(f"Cannot resolve placeholder '${{{ref}}}': not in environment or config")
                return fallback
            if "${" in resolved:
                return self._resolve_placeholders(resolved, depth + 1)
            return resolved

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix as a dict."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Build *config_cls* from the section under its ``@config_properties`` prefix."""
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")
        section = self.get_section(prefix)

        if issubclass(config_cls, BaseModel):
            try:
                return config_cls.model_validate(section)
            except ValidationError as exc:
                raise ValueError(f"Invalid '{prefix}' settings for {config_cls.__name__}:\n{exc}") from exc

        hints = get_type_hints(config_cls)
        kwargs = {
            field.name: _coerce_field(section[field.name], hints.get(field.name))
            for field in dataclasses.fields(config_cls)  # type: ignore[arg-type]
            if field.name in section
        }
        return config_cls(**kwargs)


def _coerce_field(value: Any, expected: Any) -> Any:
    """Convert env-style strings for ``bool``/``int``/``float`` dataclass fields."""
    if not isinstance(value, str):
        return value
    if expected is bool:
        return value.strip().lower() in ("true", "1", "yes", "on")
    if expected in (int, float):
        return expected(value)
    return value
