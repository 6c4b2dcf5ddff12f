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
"""HeaderBuilder: attaches cached, compiled security headers to responses."""

from __future__ import annotations

from collections.abc import MutableMapping

import structlog

from secheaders.cache.header_cache import HeaderCache
from secheaders.headers.compilers import (
    Compiler,
    compile_content_security_policy,
    compile_content_type_options,
    compile_feature_policy,
    compile_frame_options,
    compile_permissions_policy,
    compile_referrer_policy,
    compile_report_to,
    compile_strict_transport_security,
    compile_xss_protection,
)
from secheaders.headers.value import HeaderValue
from secheaders.settings.ports import SettingsStore

logger = structlog.get_logger("secheaders.web")

CACHE_KEY_CONTENT_SECURITY_POLICY = "csp"
CACHE_KEY_STRICT_TRANSPORT_SECURITY = "hsts"
CACHE_KEY_PERMISSIONS_POLICY = "permissions_policy"
CACHE_KEY_FEATURE_POLICY = "feature_policy"
CACHE_KEY_REFERRER_POLICY = "ref_policy"
CACHE_KEY_FRAME_OPTIONS = "frame_options"
CACHE_KEY_CONTENT_TYPE_OPTIONS = "content_type"
CACHE_KEY_XSS_PROTECTION = "xss"
CACHE_KEY_REPORT_TO = "report_to"

HEADER_FAMILIES: tuple[tuple[str, Compiler], ...] = (
    (CACHE_KEY_CONTENT_SECURITY_POLICY, compile_content_security_policy),
    (CACHE_KEY_STRICT_TRANSPORT_SECURITY, compile_strict_transport_security),
    (CACHE_KEY_PERMISSIONS_POLICY, compile_permissions_policy),
    (CACHE_KEY_FEATURE_POLICY, compile_feature_policy),
    (CACHE_KEY_REFERRER_POLICY, compile_referrer_policy),
    (CACHE_KEY_FRAME_OPTIONS, compile_frame_options),
    (CACHE_KEY_CONTENT_TYPE_OPTIONS, compile_content_type_options),
    (CACHE_KEY_XSS_PROTECTION, compile_xss_protection),
    (CACHE_KEY_REPORT_TO, compile_report_to),
)
"""``(cache key, compiler)`` pairs in the order headers are attached."""

GROUP_CACHE_KEYS: dict[str, tuple[str, ...]] = {
    "csp": (CACHE_KEY_CONTENT_SECURITY_POLICY, CACHE_KEY_REPORT_TO),
    "hsts": (CACHE_KEY_STRICT_TRANSPORT_SECURITY,),
    "permissions_policy": (CACHE_KEY_PERMISSIONS_POLICY, CACHE_KEY_FEATURE_POLICY),
    "misc": (
        CACHE_KEY_CONTENT_SECURITY_POLICY,
        CACHE_KEY_FEATURE_POLICY,
        CACHE_KEY_REFERRER_POLICY,
        CACHE_KEY_FRAME_OPTIONS,
        CACHE_KEY_CONTENT_TYPE_OPTIONS,
        CACHE_KEY_XSS_PROTECTION,
        CACHE_KEY_REPORT_TO,
    ),
    "reporting": (CACHE_KEY_CONTENT_SECURITY_POLICY, CACHE_KEY_REPORT_TO),
}
"""Cache keys whose compiled value reads from each settings group."""


class HeaderBuilder:
    """Compiles each header family through the cache and sets it on a response.

    *headers* arguments are any mutable header mapping, such as a Starlette
    ``Response.headers`` or ``MutableHeaders(scope=message)``.
    """

    def __init__(self, settings: SettingsStore, cache: HeaderCache) -> None:
        self._settings = settings
        self._cache = cache
        self._compilers: dict[str, Compiler] = dict(HEADER_FAMILIES)

    @property
    def settings(self) -> SettingsStore:
        return self._settings

    @property
    def cache(self) -> HeaderCache:
        return self._cache

    async def header(self, cache_key: str) -> HeaderValue | None:
        """The compiled header for *cache_key*, computed on first use."""
        compiler = self._compilers[cache_key]
        return await self._cache.get_or_compute(cache_key, lambda: compiler(self._settings))

    async def _add(
        self,
        headers: MutableMapping[str, str],
        cache_key: str,
        nonce: str | None = None,
    ) -> bool:
        header = await self.header(cache_key)
        if header is None:
            return False
        headers[header.name] = header.render(nonce)
        return True

    async def add_content_security_policy(self, headers: MutableMapping[str, str], nonce: str) -> bool:
        """Attach the CSP header, filling the nonce placeholder with *nonce*."""
        return await self._add(headers, CACHE_KEY_CONTENT_SECURITY_POLICY, nonce)

    async def add_strict_transport_security(self, headers: MutableMapping[str, str]) -> bool:
        return await self._add(headers, CACHE_KEY_STRICT_TRANSPORT_SECURITY)

    async def add_permissions_policy(self, headers: MutableMapping[str, str]) -> bool:
        return await self._add(headers, CACHE_KEY_PERMISSIONS_POLICY)

    async def add_feature_policy(self, headers: MutableMapping[str, str]) -> bool:
        return await self._add(headers, CACHE_KEY_FEATURE_POLICY)

    async def add_referrer_policy(self, headers: MutableMapping[str, str]) -> bool:
        return await self._add(headers, CACHE_KEY_REFERRER_POLICY)

    async def add_frame_options(self, headers: MutableMapping[str, str]) -> bool:
        return await self._add(headers, CACHE_KEY_FRAME_OPTIONS)

    async def add_content_type_options(self, headers: MutableMapping[str, str]) -> bool:
        return await self._add(headers, CACHE_KEY_CONTENT_TYPE_OPTIONS)

    async def add_xss_protection(self, headers: MutableMapping[str, str]) -> bool:
        return await self._add(headers, CACHE_KEY_XSS_PROTECTION)

    async def add_report_to(self, headers: MutableMapping[str, str]) -> bool:
        return await self._add(headers, CACHE_KEY_REPORT_TO)

    async def apply(self, headers: MutableMapping[str, str], nonce: str) -> list[str]:
        """Attach every configured header. Returns the names that were set."""
        attached: list[str] = []
        for cache_key, _ in HEADER_FAMILIES:
            header = await self.header(cache_key)
            if header is not None:
                headers[header.name] = header.render(nonce)
                attached.append(header.name)
        return attached

    async def invalidate_group(self, group: str) -> None:
        """Drop the cached headers that depend on settings *group*."""
        keys = GROUP_CACHE_KEYS.get(group)
        if keys is None:
            logger.warning("unknown_settings_group", group=group)
            return
        await self._cache.invalidate(*keys)

    async def invalidate_all(self) -> None:
        await self._cache.invalidate(*self._compilers)
