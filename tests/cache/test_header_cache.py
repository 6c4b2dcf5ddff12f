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
"""Tests for HeaderCache memoization, invalidation and backend failover."""

from __future__ import annotations

import pytest

from secheaders.cache.adapters.memory import InMemoryCache
from secheaders.cache.adapters.redis import RedisCacheAdapter
from secheaders.cache.header_cache import HeaderCache
from secheaders.headers.value import HeaderValue


class Counter:
    def __init__(self, result: HeaderValue | None) -> None:
        self.result = result
        self.calls = 0

    def __call__(self) -> HeaderValue | None:
        self.calls += 1
        return self.result


class FailingCache:
    async def get(self, key: str):
        raise ConnectionError("Redis down")

    async def put(self, key: str, value) -> None:
        raise ConnectionError("Redis down")

    async def evict(self, key: str) -> bool:
        raise ConnectionError("Redis down")

    async def exists(self, key: str) -> bool:
        raise ConnectionError("Redis down")

    async def clear(self) -> None:
        raise ConnectionError("Redis down")


class TestHeaderCache:
    @pytest.mark.asyncio
    async def test_computes_once(self):
        cache = HeaderCache(InMemoryCache())
        compute = Counter(HeaderValue("X-Frame-Options", "DENY"))

        first = await cache.get_or_compute("frame_options", compute)
        second = await cache.get_or_compute("frame_options", compute)

        assert first == second == HeaderValue("X-Frame-Options", "DENY")
        assert compute.calls == 1

    @pytest.mark.asyncio
    async def test_absent_result_is_cached(self):
        cache = HeaderCache(InMemoryCache())
        compute = Counter(None)

        assert await cache.get_or_compute("hsts", compute) is None
        assert await cache.get_or_compute("hsts", compute) is None
        assert compute.calls == 1

    @pytest.mark.asyncio
    async def test_stale_until_invalidated(self):
        cache = HeaderCache(InMemoryCache())
        compute = Counter(HeaderValue("Referrer-Policy", "no-referrer"))
        await cache.get_or_compute("ref_policy", compute)

        compute.result = HeaderValue("Referrer-Policy", "same-origin")
        assert (await cache.get_or_compute("ref_policy", compute)).value == "no-referrer"

        await cache.invalidate("ref_policy")
        assert (await cache.get_or_compute("ref_policy", compute)).value == "same-origin"
        assert compute.calls == 2

    @pytest.mark.asyncio
    async def test_invalidate_all(self):
        cache = HeaderCache(InMemoryCache())
        a = Counter(None)
        b = Counter(None)
        await cache.get_or_compute("a", a)
        await cache.get_or_compute("b", b)

        await cache.invalidate_all()
        await cache.get_or_compute("a", a)
        await cache.get_or_compute("b", b)

        assert a.calls == 2
        assert b.calls == 2

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        cache = HeaderCache(InMemoryCache())
        await cache.get_or_compute("a", Counter(HeaderValue("A", "1")))
        header = await cache.get_or_compute("b", Counter(HeaderValue("B", "2")))
        assert header == HeaderValue("B", "2")

    @pytest.mark.asyncio
    async def test_read_failure_computes_directly(self):
        cache = HeaderCache(FailingCache())
        compute = Counter(HeaderValue("X-Content-Type-Options", "nosniff"))

        assert await cache.get_or_compute("content_type", compute) == compute.result
        assert await cache.get_or_compute("content_type", compute) == compute.result
        assert compute.calls == 2

    @pytest.mark.asyncio
    async def test_write_failure_still_returns_header(self):
        class ReadOnlyMiss(FailingCache):
            async def get(self, key: str):
                return None

        cache = HeaderCache(ReadOnlyMiss())
        compute = Counter(HeaderValue("X-XSS-Protection", "0"))
        assert await cache.get_or_compute("xss", compute) == compute.result

    @pytest.mark.asyncio
    async def test_invalidation_failures_are_swallowed(self):
        cache = HeaderCache(FailingCache())
        await cache.invalidate("csp", "hsts")
        await cache.invalidate_all()

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_recomputed(self):
        backend = InMemoryCache()
        await backend.put("csp", {"unexpected": "shape"})
        cache = HeaderCache(backend)
        compute = Counter(HeaderValue("Content-Security-Policy", "default-src 'self';"))

        assert await cache.get_or_compute("csp", compute) == compute.result
        assert compute.calls == 1
        assert await backend.get("csp") == compute.result.to_dict()

    @pytest.mark.asyncio
    async def test_shared_redis_backend(self, fake_redis):
        writer = HeaderCache(RedisCacheAdapter(fake_redis))
        reader = HeaderCache(RedisCacheAdapter(fake_redis))
        await writer.get_or_compute("csp", Counter(HeaderValue("Content-Security-Policy", "default-src 'self';")))
        await writer.get_or_compute("hsts", Counter(None))

        csp = Counter(None)
        hsts = Counter(HeaderValue("Strict-Transport-Security", "max-age=1"))
        assert await reader.get_or_compute("csp", csp) == HeaderValue("Content-Security-Policy", "default-src 'self';")
        assert await reader.get_or_compute("hsts", hsts) is None
        assert csp.calls == 0
        assert hsts.calls == 0
