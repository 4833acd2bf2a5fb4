"""Data models for audit logging."""

import json
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

__all__ = ["LOG_LEVELS", "EventType", "LogEvent"]

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARN", "ERROR")


class EventType(StrEnum):
    """Event names written by the engine."""

    RUN_STARTED = "run_started"
    RUN_FINISHED = "run_finished"
    STAGE_STARTED = "stage_started"
    STAGE_FINISHED = "stage_finished"
    OVERSIZED_BLOCK = "oversized_block"
    DUPLICATE_GROUP_FOUND = "duplicate_group_found"
    GROUP_RESOLUTION_FAILED = "group_resolution_failed"
    ARTIFACT_WRITTEN = "artifact_written"
    ERROR = "error"


@dataclass(frozen=True)
class LogEvent:
    """One line of the JSONL audit trail.

    Attributes
    ----------
    ts : str
        UTC timestamp, ISO8601 with microseconds and ``Z`` suffix.
    run_id : str
        Run identifier shared by every event of a run.
    level : str
        One of :data:`LOG_LEVELS`.
    event : str
        Event name, usually an :class:`EventType` value.
    data : dict[str, Any]
        Event payload.
    stage : str | None
        Stage that emitted the event.
    rid : str | None
        Record position for record-level events.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any] = field(default_factory=dict)
    stage: str | None = None
    rid: str | None = None

    def to_json(self) -> str:
        """Serialize as one compact JSON line, without trailing newline."""
        return json.dumps(asdict(self), ensure_ascii=False, separators=(",", ":"))
