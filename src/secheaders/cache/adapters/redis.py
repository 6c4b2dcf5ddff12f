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
"""Redis-backed cache adapter for sharing compiled headers across processes."""

from __future__ import annotations

import json
from typing import Any, cast

import structlog

logger = structlog.get_logger("secheaders.cache.redis")


class RedisCacheAdapter:
    """Cache adapter that delegates to a ``redis.asyncio.Redis``-like client.

    Values are JSON-serialized. Keys are namespaced with *key_prefix* so that
    :meth:`clear` only removes this library's entries instead of flushing
    the whole database.
    """

    def __init__(self, client: Any, key_prefix: str = "secheaders:") -> None:
        self._client = client
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Any | None:
        raw = await self._client.get(self._key(key))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (ValueError, TypeError):
            logger.warning("cache_deserialize_failed", key=key)
            return None

    async def put(self, key: str, value: Any) -> None:
        await self._client.set(self._key(key), json.dumps(value).encode())

    async def evict(self, key: str) -> bool:
        count = await self._client.delete(self._key(key))
        return cast(bool, count > 0)

    async def exists(self, key: str) -> bool:
        count = await self._client.exists(self._key(key))
        return cast(bool, count > 0)

    async def clear(self) -> None:
        """Delete every key under this adapter's prefix."""
        keys = [key async for key in self._client.scan_iter(match=f"{self._prefix}*")]
        if keys:
            await self._client.delete(*keys)

    async def stop(self) -> None:
        """Close the underlying Redis connection."""
        await self._client.aclose()
