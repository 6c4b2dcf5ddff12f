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
"""Tests for component wiring."""

from __future__ import annotations

import pytest
from starlette.applications import Starlette
from starlette.testclient import TestClient

from secheaders import SecurityHeaders, create_security_headers
from secheaders.cache.adapters.memory import InMemoryCache
from secheaders.cache.adapters.redis import RedisCacheAdapter
from secheaders.config.properties.cache import CacheProperties
from secheaders.core.config import Config
from secheaders.factory import create_cache_backend, detect_cache_provider, is_available
from secheaders.kernel.exceptions import CacheException


def _config(**cache) -> Config:
    return Config({"secheaders": {"cache": cache}})


class TestCacheBackendSelection:
    def test_is_available(self):
        assert is_available("json") is True
        assert is_available("definitely_not_a_module_xyz") is False

    def test_auto_without_url_is_memory(self):
        assert detect_cache_provider(CacheProperties()) == "memory"
        assert isinstance(create_cache_backend(_config(provider="auto")), InMemoryCache)

    def test_explicit_memory(self):
        assert isinstance(create_cache_backend(_config(provider="memory", redis={"url": "redis://x"})), InMemoryCache)

    def test_redis_without_url_raises(self):
        with pytest.raises(CacheException) as exc_info:
            create_cache_backend(_config(provider="redis"))
        assert exc_info.value.code == "CACHE_REDIS_URL"

    def test_redis_url_builds_adapter(self):
        pytest.importorskip("redis.asyncio")
        config = _config(provider="redis", redis={"url": "redis://localhost:6379/0"}, key_prefix="app:")
        backend = create_cache_backend(config)
        assert isinstance(backend, RedisCacheAdapter)


class TestCreateSecurityHeaders:
    @pytest.mark.asyncio
    async def test_components_share_settings(self):
        config = Config({"secheaders": {"misc": {"referrer_policy": "same-origin"}}})
        sh = create_security_headers(config, backend=InMemoryCache())

        assert isinstance(sh, SecurityHeaders)
        assert sh.builder.settings is sh.settings
        headers: dict[str, str] = {}
        assert await sh.builder.add_referrer_policy(headers)
        assert headers == {"Referrer-Policy": "same-origin"}

        await sh.service.save("misc", {"referrer_policy": "no-referrer"})
        await sh.builder.add_referrer_policy(headers)
        assert headers == {"Referrer-Policy": "no-referrer"}
        assert sh.settings.overrides() == {"misc": {"referrer_policy": "no-referrer"}}

    def test_install_adds_middleware(self):
        config = Config({"secheaders": {"misc": {"frame_options": "DENY"}}})
        app = Starlette()
        create_security_headers(config, backend=InMemoryCache()).install(app)

        resp = TestClient(app).get("/")

        assert resp.status_code == 404
        assert resp.headers["X-Frame-Options"] == "DENY"


class TestBackendLifecycle:
    @pytest.mark.asyncio
    async def test_aclose_stops_redis_backend(self, fake_redis):
        sh = create_security_headers(Config(), backend=RedisCacheAdapter(fake_redis))
        await sh.aclose()
        assert fake_redis.closed

    @pytest.mark.asyncio
    async def test_aclose_with_memory_backend_is_noop(self):
        sh = create_security_headers(Config(), backend=InMemoryCache())
        await sh.aclose()

    def test_app_shutdown_closes_backend(self, fake_redis):
        config = Config({"secheaders": {"misc": {"frame_options": "DENY"}}})
        app = Starlette()
        create_security_headers(config, backend=RedisCacheAdapter(fake_redis)).install(app)

        with TestClient(app) as client:
            assert client.get("/").headers["X-Frame-Options"] == "DENY"
            assert not fake_redis.closed

        assert fake_redis.closed
