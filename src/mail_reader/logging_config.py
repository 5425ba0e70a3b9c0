#
# Copyright 2025 The Apache Software Foundation
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
#

"""Logging configuration for mail-reader.

Imported by the package root so that structlog writes to stderr before any
message is read. Stdout is reserved for message content printed by the CLI.
"""

import logging
import sys

import structlog

from mail_reader.config import settings


def configure_logging(level: str = "WARNING", fmt: str = "console") -> None:
    """
    Configure structlog output.

    Args:
        level: Minimum level name (e.g. "DEBUG", "INFO", "WARNING")
        fmt: "console" for human readable output, "json" for one JSON object per line
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )
    min_level = logging.getLevelName(level.upper())
    if not isinstance(min_level, int):
        min_level = logging.WARNING

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


configure_logging(settings.log_level, settings.log_format)
