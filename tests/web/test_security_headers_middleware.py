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
"""Tests for SecurityHeadersMiddleware and request nonces."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from secheaders.cache.adapters.memory import InMemoryCache
from secheaders.cache.header_cache import HeaderCache
from secheaders.settings.store import InMemorySettingsStore
from secheaders.web.adapters.starlette.security_headers import SecurityHeadersMiddleware
from secheaders.web.builder import HeaderBuilder
from secheaders.web.nonce import generate_nonce, get_request_nonce


async def _nonce(request: Request) -> JSONResponse:
    return JSONResponse({"nonce": get_request_nonce(request)})


def _make_client(settings: dict) -> TestClient:
    builder = HeaderBuilder(InMemorySettingsStore(settings), HeaderCache(InMemoryCache()))
    app = Starlette(
        routes=[Route("/nonce", _nonce)],
        middleware=[Middleware(SecurityHeadersMiddleware, builder=builder)],
    )
    return TestClient(app)


class TestSecurityHeadersMiddleware:
    def test_csp_nonce_matches_request_state(self) -> None:
        client = _make_client({"csp": {"enabled": True, "script_src": {"nonce_source": True}}})
        resp = client.get("/nonce")

        nonce = resp.json()["nonce"]
        assert nonce
        assert resp.headers["Content-Security-Policy"] == f"script-src 'nonce-{nonce}';"

    def test_each_request_gets_a_fresh_nonce(self) -> None:
        client = _make_client({"csp": {"enabled": True, "script_src": {"nonce_source": True}}})
        first = client.get("/nonce").json()["nonce"]
        second = client.get("/nonce").json()["nonce"]
        assert first != second

    def test_static_headers_applied(self) -> None:
        client = _make_client(
            {
                "hsts": {"enabled": True, "max_age": 31536000, "subdomains": True, "preload": True},
                "misc": {"frame_options": "SAMEORIGIN", "content_type_options": True},
            }
        )
        resp = client.get("/nonce")

        assert resp.status_code == 200
        assert resp.headers["Strict-Transport-Security"] == "max-age=31536000; includeSubDomains; preload"
        assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"

    def test_disabled_headers_absent(self) -> None:
        client = _make_client({})
        resp = client.get("/nonce")

        assert resp.status_code == 200
        assert "Content-Security-Policy" not in resp.headers
        assert "Strict-Transport-Security" not in resp.headers
        assert "Permissions-Policy" not in resp.headers

    def test_report_only_header_name(self) -> None:
        client = _make_client({"csp": {"enabled": True, "report_only": True, "default_src": {"self": True}}})
        resp = client.get("/nonce")

        assert resp.headers["Content-Security-Policy-Report-Only"] == "default-src 'self';"
        assert "Content-Security-Policy" not in resp.headers


class TestNonce:
    def test_generate_nonce_is_random_and_urlsafe(self) -> None:
        nonces = {generate_nonce() for _ in range(20)}
        assert len(nonces) == 20
        for nonce in nonces:
            assert len(nonce) >= 16
            assert all(c.isalnum() or c in "-_" for c in nonce)
