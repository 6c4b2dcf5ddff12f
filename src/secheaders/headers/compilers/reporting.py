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
"""CSP violation report endpoint URLs."""

from __future__ import annotations

from secheaders.settings.coerce import as_bool, as_str
from secheaders.settings.ports import SettingsStore

ACTION_ENFORCE = "enforce"
ACTION_REPORT_ONLY = "report_only"

DEFAULT_CSP_ENDPOINT = "/_/reports/csp-endpoint/{action}"

CSP_REPORT_TO_GROUP = "csp-endpoint"
REPORT_TO_MAX_AGE = 2592000


def report_action(settings: SettingsStore) -> str:
    """``report_only`` when CSP runs in report-only mode, else ``enforce``."""
    return ACTION_REPORT_ONLY if as_bool(settings.get("csp", "report_only")) else ACTION_ENFORCE


def csp_report_url(settings: SettingsStore, action: str) -> str:
    """Absolute (or root-relative, without a base URL) endpoint for *action*."""
    template = as_str(settings.get("reporting", "csp_endpoint")) or DEFAULT_CSP_ENDPOINT
    base_url = as_str(settings.get("reporting", "base_url")).rstrip("/")
    path = template.replace("{action}", action)
    if "://" in path:
        return path
    if not path.startswith("/"):
        path = "/" + path
    return f"{base_url}{path}"
