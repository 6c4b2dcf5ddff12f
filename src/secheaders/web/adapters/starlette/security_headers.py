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
"""Security headers middleware for Starlette: pure ASGI."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Receive, Scope, Send

from secheaders.web.builder import HeaderBuilder
from secheaders.web.nonce import NONCE_STATE_KEY, generate_nonce

_SHUTDOWN_DONE = ("lifespan.shutdown.complete", "lifespan.shutdown.failed")


class SecurityHeadersMiddleware:
    """Assigns a CSP nonce to every HTTP request and attaches the compiled headers to its response.

    Uses raw ASGI protocol instead of ``BaseHTTPMiddleware`` so streaming
    responses are not buffered. *on_shutdown* is awaited when the server
    shuts the application down, before the lifespan completes.
    """

    def __init__(
        self,
        app: ASGIApp,
        builder: HeaderBuilder,
        on_shutdown: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.app = app
        self._builder = builder
        self._on_shutdown = on_shutdown

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan" and self._on_shutdown is not None:
            await self.app(scope, receive, self._lifespan_send(send))
            return
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        nonce = generate_nonce()
        scope.setdefault("state", {})[NONCE_STATE_KEY] = nonce

        async def send_with_headers(message: Any) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                await self._builder.apply(headers, nonce)
            await send(message)

        await self.app(scope, receive, send_with_headers)

    def _lifespan_send(self, send: Send) -> Send:
        on_shutdown = self._on_shutdown

        async def send_after_shutdown(message: Any) -> None:
            if message["type"] not in _SHUTDOWN_DONE or on_shutdown is None:
                await send(message)
                return
            try:
                await on_shutdown()
            finally:
                await send(message)

        return send_after_shutdown
