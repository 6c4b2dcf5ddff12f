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
"""Memoizes compiled headers until their settings change."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from secheaders.cache.ports.outbound import CacheAdapter
from secheaders.headers.value import HeaderValue

logger = structlog.get_logger("secheaders.cache")

ABSENT = False
"""Stored for "no header configured" so that the result is cached too."""


class HeaderCache:
    """Compute-once, reuse-until-invalidated store for compiled headers.

    Backend failures never fail a request: a failing read falls back to
    computing the header directly, a failing write or eviction is logged.
    Concurrent first requests for a key may each compute it.
    """

    def __init__(self, backend: CacheAdapter) -> None:
        self._backend = backend

    @property
    def backend(self) -> CacheAdapter:
        return self._backend

    async def get_or_compute(
        self,
        key: str,
        compute: Callable[[], HeaderValue | None],
    ) -> HeaderValue | None:
        try:
            cached = await self._backend.get(key)
        except Exception:
            logger.warning("header_cache_read_failed", key=key, exc_info=True)
            return compute()

        if cached is not None:
            decoded, ok = _decode(cached)
            if ok:
                return decoded
            logger.warning("header_cache_entry_invalid", key=key)

        header = compute()
        try:
            await self._backend.put(key, _encode(header))
        except Exception:
            logger.warning("header_cache_write_failed", key=key, exc_info=True)
        else:
            logger.debug("header_cached", key=key, present=header is not None)
        return header

    async def invalidate(self, *keys: str) -> None:
        for key in keys:
            try:
                await self._backend.evict(key)
            except Exception:
                logger.warning("header_cache_evict_failed", key=key, exc_info=True)
        if keys:
            logger.info("header_cache_invalidated", keys=list(keys))

    async def invalidate_all(self) -> None:
        try:
            await self._backend.clear()
        except Exception:
            logger.warning("header_cache_clear_failed", exc_info=True)
        else:
            logger.info("header_cache_cleared")


def _encode(header: HeaderValue | None) -> Any:
    return ABSENT if header is None else header.to_dict()


def _decode(cached: Any) -> tuple[HeaderValue | None, bool]:
    if cached is ABSENT:
        return None, True
    if isinstance(cached, HeaderValue):
        return cached, True
    if isinstance(cached, dict):
        try:
            return HeaderValue.from_dict(cached), True
        except (KeyError, ValueError):
            return None, False
    return None, False
