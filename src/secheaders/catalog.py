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
"""Static catalogs of CSP directives, policy-controlled features and sandbox tokens.

These are read-only descriptors. Compilers iterate them in declaration
order, so the order here is the order directives appear on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class DirectiveKind(StrEnum):
    DOCUMENT = "document"
    FETCH = "fetch"
    NAVIGATION = "navigation"


@dataclass(frozen=True)
class DirectiveDescriptor:
    """A source-based CSP directive."""

    name: str
    kind: DirectiveKind

    @property
    def setting_key(self) -> str:
        """Settings key for this directive (``script-src`` -> ``script_src``)."""
        return self.name.replace("-", "_")


# ---------------------------------------------------------------------------
# Content-Security-Policy
# ---------------------------------------------------------------------------
BASE_URI = DirectiveDescriptor("base-uri", DirectiveKind.DOCUMENT)

FETCH_DIRECTIVES: tuple[DirectiveDescriptor, ...] = tuple(
    DirectiveDescriptor(name, DirectiveKind.FETCH)
    for name in (
        "default-src",
        "child-src",
        "connect-src",
        "font-src",
        "frame-src",
        "img-src",
        "manifest-src",
        "media-src",
        "object-src",
        "prefetch-src",
        "script-src",
        "script-src-elem",
        "script-src-attr",
        "style-src",
        "style-src-elem",
        "style-src-attr",
        "worker-src",
    )
)

NAVIGATION_DIRECTIVES: tuple[DirectiveDescriptor, ...] = tuple(
    DirectiveDescriptor(name, DirectiveKind.NAVIGATION)
    for name in (
        "form-action",
        "frame-ancestors",
        "navigate-to",
    )
)

SOURCE_BASED_DIRECTIVES: tuple[DirectiveDescriptor, ...] = (
    BASE_URI,
    *FETCH_DIRECTIVES,
    *NAVIGATION_DIRECTIVES,
)
"""``base-uri``, then fetch directives, then navigation directives."""

SOURCE_KEYWORDS: tuple[str, ...] = (
    "none",
    "self",
    "strict_dynamic",
    "report_sample",
    "unsafe_inline",
    "unsafe_eval",
    "unsafe_hashes",
    "unsafe_allow_redirects",
    "wasm_unsafe_eval",
)
"""Checkbox-style source keywords offered for every source-based directive."""

NONCE_SOURCE_KEY = "nonce_source"
USER_SOURCES_KEY = "_user_sources"

SANDBOX_TOKENS: tuple[str, ...] = (
    "allow-downloads",
    "allow-forms",
    "allow-modals",
    "allow-orientation-lock",
    "allow-pointer-lock",
    "allow-popups",
    "allow-popups-to-escape-sandbox",
    "allow-presentation",
    "allow-same-origin",
    "allow-scripts",
    "allow-storage-access-by-user-activation",
    "allow-top-navigation",
    "allow-top-navigation-by-user-activation",
)

# ---------------------------------------------------------------------------
# Permissions-Policy / Feature-Policy
# ---------------------------------------------------------------------------
FEATURES: tuple[str, ...] = (
    "accelerometer",
    "ambient-light-sensor",
    "autoplay",
    "battery",
    "camera",
    "display-capture",
    "document-domain",
    "encrypted-media",
    "execution-while-not-rendered",
    "execution-while-out-of-viewport",
    "fullscreen",
    "geolocation",
    "gyroscope",
    "interest-cohort",
    "magnetometer",
    "microphone",
    "midi",
    "navigation-override",
    "payment",
    "picture-in-picture",
    "publickey-credentials-get",
    "screen-wake-lock",
    "sync-xhr",
    "usb",
    "web-share",
    "xr-spatial-tracking",
)


def feature_setting_key(feature: str) -> str:
    """Settings key for a feature (``ambient-light-sensor`` -> ``ambient_light_sensor``)."""
    return feature.replace("-", "_")
