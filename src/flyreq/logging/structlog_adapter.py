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
"""LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from flyreq.core.config import Config


class StructlogAdapter:
    """Logging adapter backed by structlog over stdlib logging.

    Settings:
        flyreq.logging.level: a level name for the root logger, or a mapping
            with ``root`` plus per-logger levels (``flyreq.client: DEBUG``).
        flyreq.logging.format: ``console`` (default) or ``json``.
        flyreq.logging.stream: ``stderr`` (default) or ``stdout``. Stderr
            keeps log lines apart from response bodies the CLI prints.
    """

    def __init__(self) -> None:
        self._root_level = "INFO"
        self._logger_levels: dict[str, str] = {}
        self._format = "console"
        self._stream = "stderr"

    def configure(self, config: Config) -> None:
        """Read ``flyreq.logging`` and (re)configure structlog and stdlib logging."""
        level = config.get("flyreq.logging.level", "INFO")
        if isinstance(level, dict):
            levels = {name: str(value).upper() for name, value in level.items()}
            self._root_level = levels.pop("root", "INFO")
            self._logger_levels = levels
        else:
            self._root_level = str(level).upper()
            self._logger_levels = {}
        self._format = str(config.get("flyreq.logging.format", "console")).lower()
        self._stream = str(config.get("flyreq.logging.stream", "stderr")).lower()

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.UnicodeDecoder(),
                self._renderer(),
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout if self._stream == "stdout" else sys.stderr,
            level=_level(self._root_level),
            force=True,
        )
        for name, value in self._logger_levels.items():
            logging.getLogger(name).setLevel(_level(value))

    def get_logger(self, name: str) -> Any:
        """Return a lazy structlog logger; it binds on first use."""
        return structlog.get_logger(name)

    def _renderer(self) -> structlog.types.Processor:
        if self._format == "json":
            return structlog.processors.JSONRenderer()
        return structlog.dev.ConsoleRenderer(colors=False)


def _level(name: str) -> int:
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO
