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
"""Per-request CSP nonces.

The middleware generates one nonce per request and stores it in the ASGI
scope state, where handlers and templates read it back to mark their inline
``<script nonce="...">`` tags.
"""

from __future__ import annotations

import secrets
from typing import Any

NONCE_STATE_KEY = "csp_nonce"
"""Attribute name on ``request.state`` (and key in ``scope["state"]``)."""


def generate_nonce() -> str:
    """Generate a cryptographically-secure nonce.

    Returns:
        A URL-safe base64-encoded random string (22 characters).
    """
    return secrets.token_urlsafe(16)


def get_request_nonce(request: Any) -> str | None:
    """Return the nonce the middleware assigned to *request*, if any."""
    return getattr(request.state, NONCE_STATE_KEY, None)
