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
"""Content-Security-Policy compiler.

Each source-based directive is configured as a mapping of source keyword to
checkbox state, plus two special entries::

    script_src:
      self: true
      strict_dynamic: true
      nonce_source: true            # -> 'nonce-%s', filled in per response
      _user_sources:                # free-text sources, emitted unquoted
        - value: https://cdn.example.com
        - value: sha256-abc=

which compiles to ``script-src 'self' 'strict-dynamic' 'nonce-%s' https://cdn.example.com sha256-abc=;``.

The header is a nonce template: configured text is passed through
:func:`~secheaders.headers.value.escape_template`, so only the nonce source
becomes a nonce slot.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from secheaders.catalog import NONCE_SOURCE_KEY, SOURCE_BASED_DIRECTIVES, USER_SOURCES_KEY
from secheaders.headers.compilers.base import total_compiler
from secheaders.headers.compilers.reporting import CSP_REPORT_TO_GROUP, csp_report_url, report_action
from secheaders.headers.value import NONCE_PLACEHOLDER, HeaderValue, escape_template
from secheaders.settings.coerce import as_bool, as_list, as_mapping
from secheaders.settings.ports import SettingsStore

CSP_HEADER = "Content-Security-Policy"
CSP_REPORT_ONLY_HEADER = "Content-Security-Policy-Report-Only"

NONCE_SOURCE = f"'nonce-{NONCE_PLACEHOLDER}'"


def directive_sources(source_data: Mapping[str, Any]) -> list[str]:
    """Render one directive's configured sources, in configuration order."""
    sources: list[str] = []
    for source, data in source_data.items():
        if source == USER_SOURCES_KEY:
            for entry in as_list(data):
                value = _user_source_value(entry)
                if value:
                    sources.append(escape_template(value))
            continue

        if source == NONCE_SOURCE_KEY:
            if as_bool(data):
                sources.append(NONCE_SOURCE)
            continue

        if as_bool(data):
            sources.append(escape_template("'{}'".format(source.replace("_", "-"))))
    return sources


def _user_source_value(entry: Any) -> str:
    if isinstance(entry, Mapping):
        entry = entry.get("value")
    return entry.strip() if isinstance(entry, str) else ""


def _typed_values(entries: list[Any]) -> list[str]:
    """Plugin types are ``{value: ...}`` entries; bare strings are accepted too."""
    return [value for value in (_user_source_value(entry) for entry in entries) if value]


def build_directives(settings: SettingsStore) -> list[str]:
    """Every CSP directive the settings produce, in wire order."""
    directives: list[str] = []

    for descriptor in SOURCE_BASED_DIRECTIVES:
        source_data = as_mapping(settings.get("csp", descriptor.setting_key))
        if not source_data:
            continue
        sources = directive_sources(source_data)
        if sources:
            directives.append(f"{descriptor.name} {' '.join(sources)};")

    plugin_types = _typed_values(as_list(settings.get("csp", "plugin_types", [])))
    if plugin_types:
        directives.append(escape_template(f"plugin-types {' '.join(plugin_types)};"))

    sandbox = [token for token in as_list(settings.get("csp", "sandbox", [])) if isinstance(token, str) and token]
    if sandbox:
        directives.append(escape_template(f"sandbox {' '.join(sandbox)};"))

    if as_bool(settings.get("csp", "upgrade_insecure_requests")):
        directives.append("upgrade-insecure-requests;")

    if as_bool(settings.get("csp", "block_all_mixed_content")):
        directives.append("block-all-mixed-content;")

    if as_bool(settings.get("csp", "log_violations")):
        url = csp_report_url(settings, report_action(settings))
        directives.append(escape_template(f"report-uri {url};"))

    if as_bool(settings.get("misc", "report_to")):
        directives.append(f"report-to {CSP_REPORT_TO_GROUP}")

    return directives


@total_compiler
def compile_content_security_policy(settings: SettingsStore) -> HeaderValue | None:
    """Compile ``Content-Security-Policy`` (or its report-only variant)."""
    if not as_bool(settings.get("csp", "enabled")):
        return None

    directives = build_directives(settings)
    if not directives:
        return None

    header = HeaderValue(CSP_HEADER, " ".join(directives), template=True)
    if as_bool(settings.get("csp", "report_only")):
        header = header.with_name(CSP_REPORT_ONLY_HEADER)
    return header
