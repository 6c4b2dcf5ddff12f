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
"""HeaderValue: a compiled header name plus value template."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any

NONCE_PLACEHOLDER = "%s"
"""Token substituted with the per-response nonce when the header is attached."""

_TEMPLATE_TOKEN_RE = re.compile(r"%([%s])")


def escape_template(text: str) -> str:
    """Escape configured text for a template, so a literal ``%s`` in it is never a nonce slot."""
    return text.replace("%", "%%")


@dataclass(frozen=True)
class HeaderValue:
    """An immutable ``(name, value)`` pair produced by a compiler.

    A ``template`` value (only the CSP) marks nonce slots with
    :data:`NONCE_PLACEHOLDER` and spells every literal ``%`` as ``%%``
    (see :func:`escape_template`). Any other value is final as compiled.
    """

    name: str
    value: str
    template: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("HeaderValue name must not be empty")

    @property
    def has_placeholder(self) -> bool:
        if not self.template:
            return False
        return any(match.group(1) == "s" for match in _TEMPLATE_TOKEN_RE.finditer(self.value))

    def with_name(self, name: str) -> HeaderValue:
        """Return a copy under another name (e.g. the ``-Report-Only`` variant)."""
        return dataclasses.replace(self, name=name)

    def render(self, nonce: str | None = None) -> str:
        """Return the wire value, substituting *nonce* into each nonce slot.

        Without a nonce the slots are left as ``%s``.
        """
        if not self.template:
            return self.value
        slot = NONCE_PLACEHOLDER if nonce is None else nonce
        return _TEMPLATE_TOKEN_RE.sub(lambda m: "%" if m.group(1) == "%" else slot, self.value)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value, "template": self.template}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HeaderValue:
        return cls(name=str(data["name"]), value=str(data["value"]), template=bool(data.get("template", False)))
