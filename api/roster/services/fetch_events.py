"""Structured event log handed to the fetch pipeline.

The pipeline never calls ``logging`` directly. It emits events here; each event
is kept in ``events`` and forwarded to a stdlib logger as ``event key=value``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

PARTIAL_DATA = "partial_data"


@dataclass(frozen=True)
class FetchEvent:
    level: int
    event: str
    fields: dict[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        parts = [self.event]
        parts.extend(f"{key}={value}" for key, value in self.fields.items())
        return " ".join(parts)


class FetchEventLog:
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("roster.fetch")
        self.events: list[FetchEvent] = []

    def emit(self, level: int, event: str, **fields: Any) -> FetchEvent:
        record = FetchEvent(level=level, event=event, fields=fields)
        self.events.append(record)
        self._logger.log(level, "%s", record.render())
        return record

    def debug(self, event: str, **fields: Any) -> FetchEvent:
        return self.emit(logging.DEBUG, event, **fields)

    def info(self, event: str, **fields: Any) -> FetchEvent:
        return self.emit(logging.INFO, event, **fields)

    def warning(self, event: str, **fields: Any) -> FetchEvent:
        return self.emit(logging.WARNING, event, **fields)

    def error(self, event: str, **fields: Any) -> FetchEvent:
        return self.emit(logging.ERROR, event, **fields)

    def named(self, event: str) -> list[FetchEvent]:
        return [e for e in self.events if e.event == event]
