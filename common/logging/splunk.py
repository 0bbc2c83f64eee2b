# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""
JSON log format understood by the Splunk log collector.

Every record is rendered as a single JSON line. Log entries passed as
`SplunkExtendedLogEntry` contribute their fields as additional top level keys.
"""

import json
import logging
import datetime
from enum import Enum

from pydantic import BaseModel


def _plain(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class SplunkExtendedLogEntry(BaseModel):
    """Log message carrying additional, machine searchable, fields."""

    message: str

    def extra_fields(self) -> dict[str, object]:
        """All set fields except the message in their plain representation."""
        return {key: _plain(value) for key, value in self if key != "message" and value is not None}

    def __str__(self) -> str:
        extras = " ".join(f"{key}={value}" for key, value in self.extra_fields().items())
        if not extras:
            return self.message
        return f"{self.message} {extras}"


class SplunkFormatter(logging.Formatter):
    def __init__(self, defaults: dict[str, str] | None = None) -> None:
        super().__init__(defaults=defaults)
        self._defaults = defaults or {}

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        # Expected format: 2024-02-07T14:38:19.565+01:00
        return datetime.datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="milliseconds")

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "@timestamp": self.formatTime(record),
            "level": record.levelname,
            "app": getattr(record, "app_name", None) or self._defaults.get("app_name"),
            "hash": getattr(record, "correlation_id", None) or self._defaults.get("correlation_id"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if isinstance(record.msg, SplunkExtendedLogEntry):
            data.update(record.msg.extra_fields())
        if record.exc_info:
            data["stack_trace"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)
