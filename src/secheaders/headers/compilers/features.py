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
"""Permissions-Policy and Feature-Policy compilers.

Both headers are driven by the same per-feature settings under the
``permissions_policy`` group::

    camera:
      none: false
      all: false
      self: true
      origins:
        - origin: https://meet.example.com

The settings are first reduced to :class:`FeatureDirective` values, then
rendered with one of two :class:`FeatureSyntax` strategies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from secheaders.catalog import FEATURES, feature_setting_key
from secheaders.headers.compilers.base import total_compiler
from secheaders.headers.value import HeaderValue
from secheaders.settings.coerce import as_bool, as_list, as_mapping, as_str
from secheaders.settings.ports import SettingsStore

PERMISSIONS_POLICY_HEADER = "Permissions-Policy"
PERMISSIONS_POLICY_REPORT_ONLY_HEADER = "Permissions-Policy-Report-Only"
FEATURE_POLICY_HEADER = "Feature-Policy"
FEATURE_POLICY_REPORT_ONLY_HEADER = "Feature-Policy-Report-Only"


@dataclass(frozen=True)
class FeatureDirective:
    feature: str
    tokens: tuple[str, ...]


@dataclass(frozen=True)
class FeatureSyntax:
    """How one header family spells allow-list tokens and joins directives."""

    none_token: str | None
    self_token: str
    origin_format: str
    directive_format: str
    separator: str

    def render(self, directive: FeatureDirective) -> str:
        return self.directive_format.format(feature=directive.feature, tokens=" ".join(directive.tokens))


PERMISSIONS_POLICY_SYNTAX = FeatureSyntax(
    none_token=None,
    self_token="self",
    origin_format='"{}"',
    directive_format="{feature}=({tokens})",
    separator=", ",
)

FEATURE_POLICY_SYNTAX = FeatureSyntax(
    none_token="'none'",
    self_token="'self'",
    origin_format="{}",
    directive_format="{feature} {tokens}",
    separator="; ",
)


def _origins(value: Mapping[str, Any]) -> list[str]:
    origins: list[str] = []
    for entry in as_list(value.get("origins")):
        if isinstance(entry, Mapping):
            entry = entry.get("origin")
        origin = as_str(entry).strip()
        if origin:
            origins.append(origin)
    return origins


def feature_directives(settings: SettingsStore, syntax: FeatureSyntax) -> list[FeatureDirective]:
    """Reduce per-feature settings to directives, in catalog order.

    A feature is skipped when it has no settings, or when neither ``none``,
    ``self`` nor any origin is set. ``none`` wins over ``all``, and ``all``
    wins over ``self`` and origins.
    """
    directives: list[FeatureDirective] = []
    for feature in FEATURES:
        value = as_mapping(settings.get("permissions_policy", feature_setting_key(feature)))
        if not value:
            continue

        origins = _origins(value)
        if not as_bool(value.get("none")) and not as_bool(value.get("self")) and not origins:
            continue

        tokens: list[str] = []
        if as_bool(value.get("none")):
            if syntax.none_token:
                tokens.append(syntax.none_token)
        elif as_bool(value.get("all")):
            tokens.append("*")
        else:
            if as_bool(value.get("self")):
                tokens.append(syntax.self_token)
            tokens.extend(syntax.origin_format.format(origin) for origin in origins)

        directives.append(FeatureDirective(feature, tuple(tokens)))
    return directives


@total_compiler
def compile_permissions_policy(settings: SettingsStore) -> HeaderValue | None:
    """Compile ``Permissions-Policy`` (or its report-only variant).

    The free-text ``custom`` setting is appended as one more entry when it is
    non-empty after trimming.
    """
    if not as_bool(settings.get("permissions_policy", "enabled")):
        return None

    syntax = PERMISSIONS_POLICY_SYNTAX
    policy = [syntax.render(directive) for directive in feature_directives(settings, syntax)]

    custom = as_str(settings.get("permissions_policy", "custom")).strip()
    if custom:
        policy.append(custom)

    if not policy:
        return None

    header = HeaderValue(PERMISSIONS_POLICY_HEADER, syntax.separator.join(policy))
    if as_bool(settings.get("permissions_policy", "report_only")):
        header = header.with_name(PERMISSIONS_POLICY_REPORT_ONLY_HEADER)
    return header


@total_compiler
def compile_feature_policy(settings: SettingsStore) -> HeaderValue | None:
    """Compile the legacy ``Feature-Policy`` (or its report-only variant)."""
    if not as_bool(settings.get("misc", "feature_policy")):
        return None

    syntax = FEATURE_POLICY_SYNTAX
    policy = [syntax.render(directive) for directive in feature_directives(settings, syntax)]
    if not policy:
        return None

    header = HeaderValue(FEATURE_POLICY_HEADER, syntax.separator.join(policy))
    if as_bool(settings.get("misc", "feature_policy_report_only")):
        header = header.with_name(FEATURE_POLICY_REPORT_ONLY_HEADER)
    return header
