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
"""Wires a settings store, cache backend and header builder from a Config."""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from typing import Any

import structlog

from secheaders.cache.adapters.memory import InMemoryCache
from secheaders.cache.adapters.redis import RedisCacheAdapter
from secheaders.cache.header_cache import HeaderCache
from secheaders.cache.ports.outbound import CacheAdapter
from secheaders.config.properties.cache import CacheProperties
from secheaders.core.config import Config
from secheaders.kernel.exceptions import CacheException
from secheaders.settings.service import SettingsService
from secheaders.settings.store import ConfigSettingsStore
from secheaders.web.adapters.starlette.security_headers import SecurityHeadersMiddleware
from secheaders.web.builder import HeaderBuilder

logger = structlog.get_logger("secheaders.factory")


def is_available(module_name: str) -> bool:
    """Check if a Python package is importable."""
    try:
        importlib.import_module(module_name)
        return True
    except ImportError:
        return False


def detect_cache_provider(props: CacheProperties) -> str:
    """``redis`` when the client is installed and a URL is configured, else ``memory``."""
    if props.redis.url and is_available("redis.asyncio"):
        return "redis"
    return "memory"


def create_cache_backend(config: Config) -> CacheAdapter:
    props = config.bind(CacheProperties)
    provider = detect_cache_provider(props) if props.provider == "auto" else props.provider

    if provider == "redis":
        if not props.redis.url:
            raise CacheException(
                "secheaders.cache.redis.url is required for the redis cache provider",
                code="CACHE_REDIS_URL",
            )
        if not is_available("redis.asyncio"):
            raise CacheException(
                "The redis cache provider needs the 'redis' package (pip install secheaders[redis])",
                code="CACHE_REDIS_MISSING",
            )
        redis_asyncio = importlib.import_module("redis.asyncio")
        client = redis_asyncio.from_url(props.redis.url)
        logger.info("cache_backend_selected", provider="redis")
        return RedisCacheAdapter(client, key_prefix=props.key_prefix)

    logger.info("cache_backend_selected", provider="memory")
    return InMemoryCache()


@dataclass
class SecurityHeaders:
    """The assembled components for one application."""

    config: Config
    settings: ConfigSettingsStore
    builder: HeaderBuilder
    service: SettingsService

    def install(self, app: Any) -> None:
        """Add :class:`SecurityHeadersMiddleware` to a Starlette (or FastAPI) app.

        The cache backend is closed when the app shuts down.
        """
        app.add_middleware(SecurityHeadersMiddleware, builder=self.builder, on_shutdown=self.aclose)

    async def aclose(self) -> None:
        """Release the cache backend's connections, if it holds any."""
        stop = getattr(self.builder.cache.backend, "stop", None)
        if stop is not None:
            await stop()
            logger.info("cache_backend_closed")


def create_security_headers(config: Config, backend: CacheAdapter | None = None) -> SecurityHeaders:
    """Build the settings store, header cache, builder and settings service.

    *backend* overrides the cache backend chosen from ``secheaders.cache``.
    """
    settings = ConfigSettingsStore(config)
    cache = HeaderCache(backend if backend is not None else create_cache_backend(config))
    builder = HeaderBuilder(settings, cache)
    return SecurityHeaders(
        config=config,
        settings=settings,
        builder=builder,
        service=SettingsService(settings, builder),
    )
