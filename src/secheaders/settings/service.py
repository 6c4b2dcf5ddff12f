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
"""SettingsService: writes policy settings and invalidates the headers they affect."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from secheaders.settings.ports import SettingsStore
from secheaders.web.builder import HeaderBuilder

logger = structlog.get_logger("secheaders.settings")


class SettingsService:
    """The save path for policy settings.

    Every write goes through :meth:`save`, which clears the cached headers
    that read from the saved group so the next response recompiles them.
    """

    def __init__(self, store: SettingsStore, builder: HeaderBuilder) -> None:
        self._store = store
        self._builder = builder

    async def save(self, group: str, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self._store.put(group, key, value)
        await self._builder.invalidate_group(group)
        logger.info("settings_saved", group=group, keys=sorted(values))

    async def disable_csp(self) -> None:
        """Turn off Content-Security-Policy, e.g. after a policy locked admins out."""
        await self.save("csp", {"enabled": False})

    async def disable_hsts(self) -> None:
        """Turn off Strict-Transport-Security."""
        await self.save("hsts", {"enabled": False})
