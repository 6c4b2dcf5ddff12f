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
"""Shared plumbing for header compilers."""

from __future__ import annotations

import functools
from collections.abc import Callable

import structlog

from secheaders.headers.value import HeaderValue
from secheaders.settings.ports import SettingsStore

logger = structlog.get_logger("secheaders.compiler")

Compiler = Callable[[SettingsStore], HeaderValue | None]
"""Maps settings to a header, or ``None`` when the header should be omitted."""


def total_compiler(func: Compiler) -> Compiler:
    """Make a compiler total: malformed settings omit the header instead of raising."""

    @functools.wraps(func)
    def wrapper(settings: SettingsStore) -> HeaderValue | None:
        try:
            return func(settings)
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            logger.warning("header_compile_failed", compiler=func.__name__, error=str(exc))
            return None

    return wrapper
