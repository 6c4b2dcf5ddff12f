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
"""Header cache backend configuration properties."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from secheaders.core.config import config_properties


class RedisSettings(BaseModel):
    url: str | None = None


@config_properties(prefix="secheaders.cache")
class CacheProperties(BaseModel):
    """Configuration for the header cache (secheaders.cache.*)."""

    provider: Literal["auto", "memory", "redis"] = "auto"
    key_prefix: str = Field(default="secheaders:", min_length=1)
    redis: RedisSettings = Field(default_factory=RedisSettings)
