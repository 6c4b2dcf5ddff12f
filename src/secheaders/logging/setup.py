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
"""structlog setup driven by ``secheaders.logging`` settings."""

from __future__ import annotations

import logging
import sys

import structlog

from secheaders.config.properties.logging import LoggingProperties
from secheaders.core.config import Config


def configure_logging(config: Config) -> LoggingProperties:
    """Configure structlog and stdlib logging from *config*.

    ``secheaders.logging.level.root`` sets the root level; any other key
    under ``level`` sets the level of that named logger, e.g.
    ``secheaders.cache: DEBUG``. ``format`` is ``console`` or ``json``.
    """
    props = config.bind(LoggingProperties)
    levels = {str(k): str(v).upper() for k, v in (props.level or {}).items()}
    root_level = levels.pop("root", "INFO")

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if props.format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=_level(root_level),
        force=True,
    )
    for name, level in levels.items():
        logging.getLogger(name).setLevel(_level(level))

    return props


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO
