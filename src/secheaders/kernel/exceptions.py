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
"""Exception hierarchy for secheaders.

Header compilation itself never raises: malformed settings degrade to an
omitted header. These exceptions cover the surrounding plumbing (loading
settings files, talking to cache backends) where a caller can act on the error.
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class SecHeadersException(Exception):
    """Base exception for all secheaders errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(SecHeadersException):
    """Settings could not be loaded or written."""


class InvalidConfigurationException(ConfigurationException):
    """A settings file exists but its contents are unusable."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(SecHeadersException):
    """Infrastructure failures: cache backends, network."""


class CacheException(InfrastructureException):
    """The header cache backend could not be reached or configured."""
