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
"""Built-in SettingsStore implementations."""

from __future__ import annotations

import copy
from typing import Any

from secheaders.core.config import Config

SETTINGS_PREFIX = "secheaders"


class InMemorySettingsStore:
    """Nested ``{group: {key: value}}`` dict store.

    Suitable for tests and for applications that keep settings in their
    own database and push them in on save.
    """

    def __init__(self, data: dict[str, dict[str, Any]] | None = None) -> None:
        self._data: dict[str, dict[str, Any]] = copy.deepcopy(data) if data else {}

    def get(self, group: str, key: str, default: Any = None) -> Any:
        section = self._data.get(group)
        if not isinstance(section, dict):
            return default
        value = section.get(key)
        return default if value is None else value

    def put(self, group: str, key: str, value: Any) -> None:
        self._data.setdefault(group, {})[key] = value

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(self._data)


class ConfigSettingsStore:
    """Reads settings from a :class:`Config` under ``secheaders.<group>.<key>``.

    Environment variables override file values (``SECHEADERS_CSP_ENABLED``).
    Writes are kept in an in-process overlay that wins over the config;
    persisting them is the caller's job.
    """

    def __init__(self, config: Config) -> None:
        self._config = config
        self._overlay = InMemorySettingsStore()

    @property
    def config(self) -> Config:
        return self._config

    def get(self, group: str, key: str, default: Any = None) -> Any:
        value = self._overlay.get(group, key)
        if value is not None:
            return value
        return self._config.get(f"{SETTINGS_PREFIX}.{group}.{key}", default)

    def put(self, group: str, key: str, value: Any) -> None:
        self._overlay.put(group, key, value)

    def overrides(self) -> dict[str, dict[str, Any]]:
        """Values written through :meth:`put` since construction."""
        return self._overlay.to_dict()
