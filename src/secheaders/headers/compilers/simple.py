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
"""Compilers for the single-setting headers."""

from __future__ import annotations

import json

from secheaders.headers.compilers.base import total_compiler
from secheaders.headers.compilers.reporting import (
    CSP_REPORT_TO_GROUP,
    REPORT_TO_MAX_AGE,
    csp_report_url,
    report_action,
)
from secheaders.headers.value import HeaderValue
from secheaders.settings.coerce import as_bool, as_int, as_str
from secheaders.settings.ports import SettingsStore

XSS_PROTECTION_VALUES = {
    "disable": "0",
    "enable": "1",
    "block": "1; mode=block",
}


@total_compiler
def compile_strict_transport_security(settings: SettingsStore) -> HeaderValue | None:
    if not as_bool(settings.get("hsts", "enabled")):
        return None

    max_age = as_int(settings.get("hsts", "max_age"))
    if max_age is None or max_age < 0:
        return None

    value = f"max-age={max_age}"
    if as_bool(settings.get("hsts", "subdomains")):
        value += "; includeSubDomains"
    if as_bool(settings.get("hsts", "preload")):
        value += "; preload"
    return HeaderValue("Strict-Transport-Security", value)


@total_compiler
def compile_referrer_policy(settings: SettingsStore) -> HeaderValue | None:
    value = as_str(settings.get("misc", "referrer_policy"))
    return HeaderValue("Referrer-Policy", value) if value else None


@total_compiler
def compile_frame_options(settings: SettingsStore) -> HeaderValue | None:
    value = as_str(settings.get("misc", "frame_options"))
    return HeaderValue("X-Frame-Options", value) if value else None


@total_compiler
def compile_content_type_options(settings: SettingsStore) -> HeaderValue | None:
    if as_bool(settings.get("misc", "content_type_options", False)):
        return HeaderValue("X-Content-Type-Options", "nosniff")
    return None


@total_compiler
def compile_xss_protection(settings: SettingsStore) -> HeaderValue | None:
    """``disable``/``enable``/``block`` map to ``0``/``1``/``1; mode=block``; anything else omits the header."""
    value = XSS_PROTECTION_VALUES.get(as_str(settings.get("misc", "xss_protection")))
    return HeaderValue("X-XSS-Protection", value) if value else None


@total_compiler
def compile_report_to(settings: SettingsStore) -> HeaderValue | None:
    """Declare the ``csp-endpoint`` reporting group used by the CSP ``report-to`` directive."""
    if not as_bool(settings.get("misc", "report_to")):
        return None

    body = {
        "group": CSP_REPORT_TO_GROUP,
        "max_age": REPORT_TO_MAX_AGE,
        "endpoints": [{"url": csp_report_url(settings, report_action(settings))}],
    }
    return HeaderValue("Report-To", json.dumps(body, separators=(",", ":")))
