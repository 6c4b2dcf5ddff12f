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
"""Shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from secheaders.cache.adapters.memory import InMemoryCache
from secheaders.cache.header_cache import HeaderCache
from secheaders.settings.store import InMemorySettingsStore
from secheaders.web.builder import HeaderBuilder


class FakeRedis:
    """Minimal in-memory stub matching the redis.asyncio.Redis interface."""

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}
        self.closed = False

    async def get(self, key: str) -> bytes | None:
        return self._store.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._store[key] = value

    async def delete(self, *keys: str) -> int:
        count = 0
        for k in keys:
            if k in self._store:
                del self._store[k]
                count += 1
        return count

    async def exists(self, *keys: str) -> int:
        return sum(1 for k in keys if k in self._store)

    async def scan_iter(self, match: str = "*"):
        prefix = match.rstrip("*")
        for key in list(self._store):
            if key.startswith(prefix):
                yield key

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def settings_factory():
    def _make(**groups: dict[str, Any]) -> InMemorySettingsStore:
        return InMemorySettingsStore(groups)

    return _make


@pytest.fixture
def builder_factory():
    def _make(settings: InMemorySettingsStore) -> HeaderBuilder:
        return HeaderBuilder(settings, HeaderCache(InMemoryCache()))

    return _make
