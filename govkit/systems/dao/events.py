"""
govkit -- Event Sinks

Fire-and-forget notifications on state transitions. Events are not part of
the correctness contract: a sink that raises is logged and ignored, and the
operation that triggered it still succeeds.

Event names emitted by DAOCore:
  dao_created, resource_registered, resource_removed,
  proposal_created, vote_cast, proposal_passed, proposal_executed
"""

from __future__ import annotations

import abc
from typing import Any

import structlog

from govkit.primitives.common import GovkitBaseModel

logger = structlog.get_logger()


class Event(GovkitBaseModel):
    name: str
    data: dict[str, Any]


class EventSink(abc.ABC):
    @abc.abstractmethod
    def emit(self, name: str, **fields: Any) -> None: ...


class LogEventSink(EventSink):
    """Writes every event to the structured log."""

    def __init__(self) -> None:
        self._logger = logger.bind(system="dao.events")

    def emit(self, name: str, **fields: Any) -> None:
        self._logger.info(name, **fields)


class RecordingEventSink(EventSink):
    """Keeps every event in memory, oldest first."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def emit(self, name: str, **fields: Any) -> None:
        self.events.append(Event(name=name, data=fields))

    def names(self) -> list[str]:
        return [e.name for e in self.events]

    def clear(self) -> None:
        self.events.clear()


def safe_emit(sink: EventSink | None, name: str, **fields: Any) -> None:
    if sink is None:
        return
    try:
        sink.emit(name, **fields)
    except Exception as exc:
        logger.warning("event_emit_failed", event_name=name, error=str(exc))
