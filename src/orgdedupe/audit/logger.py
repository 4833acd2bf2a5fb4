"""Structured audit logger for JSONL event logging.

Every engine stage accepts an optional ``AuditLogger``; passing ``None``
disables auditing without changing results. The logger owns the timing of
runs and stages, so callers only mark where a stage starts and finishes.
"""

import time
import traceback
from pathlib import Path
from typing import Any

from orgdedupe.audit.helpers import get_package_version
from orgdedupe.audit.models import LOG_LEVELS, EventType, LogEvent
from orgdedupe.utils import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file (appended to, never truncated).
    current_stage : str | None
        Stage attached to events that do not name one.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        self.run_id = run_id
        self.log_path = log_path
        self.current_stage: str | None = None
        self._run_start: float | None = None
        self._stage_starts: dict[str, float] = {}

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set current stage context."""
        self.current_stage = stage

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        rid: str | None = None,
    ) -> None:
        """Write one structured event.

        Parameters
        ----------
        event_type : str
            Event name, e.g. ``"duplicate_group_found"``.
        data : dict[str, Any] | None, optional
            JSON-serializable payload.
        level : str, optional
            One of ``DEBUG``, ``INFO``, ``WARN``, ``ERROR``.
        stage : str | None, optional
            Stage name, defaults to :attr:`current_stage`.
        rid : str | None, optional
            Record position or identifier for record-level events.

        Raises
        ------
        ValueError
            If *level* is not a known log level.
        """
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level!r}")

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data or {},
            stage=stage if stage is not None else self.current_stage,
            rid=rid,
        )
        self._file.write(log_event.to_json() + "\n")
        self._file.flush()

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def run_started(self, command: list[str], parameters: dict[str, Any]) -> None:
        """Log run_started and start the run clock.

        Parameters
        ----------
        command : list[str]
            Command-line arguments or operation name.
        parameters : dict[str, Any]
            Effective configuration (``DedupeConfig.to_dict()``).
        """
        self._run_start = time.perf_counter()
        self.event(
            EventType.RUN_STARTED,
            data={
                "command": command,
                "parameters": parameters,
                "version": get_package_version(),
            },
        )

    def run_finished(self, status: str, records_processed: int | None = None) -> None:
        """Log run_finished with the time elapsed since :meth:`run_started`.

        Parameters
        ----------
        status : str
            ``"success"`` or ``"failed"``.
        records_processed : int | None, optional
            Records received by the run.
        """
        data: dict[str, Any] = {"status": status}
        if self._run_start is not None:
            data["duration_seconds"] = time.perf_counter() - self._run_start
            self._run_start = None
        if records_processed is not None:
            data["records_processed"] = records_processed
        self.event(EventType.RUN_FINISHED, data=data, stage=None)

    def stage_started(self, stage: str, expected_records: int | None = None) -> None:
        """Log stage_started, make *stage* current and start its clock."""
        self._stage_starts[stage] = time.perf_counter()
        self.set_stage(stage)

        data: dict[str, Any] = {}
        if expected_records is not None:
            data["expected_records"] = expected_records
        self.event(EventType.STAGE_STARTED, data=data, stage=stage)

    def stage_finished(self, stage: str, counters: dict[str, int] | None = None) -> None:
        """Log stage_finished with duration and counters.

        Raises
        ------
        ValueError
            If *stage* was never started.
        """
        start = self._stage_starts.pop(stage, None)
        if start is None:
            raise ValueError(f"Stage not started: {stage}")

        data: dict[str, Any] = {"duration_seconds": time.perf_counter() - start}
        if counters:
            data["counters"] = counters
        self.event(EventType.STAGE_FINISHED, data=data, stage=stage)

    # ------------------------------------------------------------------
    # Domain events
    # ------------------------------------------------------------------

    def duplicate_group_found(
        self,
        group_id: int,
        indices: list[int],
        criteria: list[str],
        stage: str | None = None,
    ) -> None:
        """Log one duplicate group.

        Parameters
        ----------
        group_id : int
            1-based group identifier.
        indices : list[int]
            Positions of the group members, anchor first.
        criteria : list[str]
            Criterion that attached each non-anchor member.
        stage : str | None, optional
            Stage identifier.
        """
        self.event(
            EventType.DUPLICATE_GROUP_FOUND,
            data={
                "group_id": group_id,
                "size": len(indices),
                "indices": indices,
                "criteria": criteria,
            },
            stage=stage,
        )

    def group_resolution_failed(
        self,
        group_id: int,
        strategy: str,
        error: Exception,
        stage: str | None = None,
    ) -> None:
        """Log a group whose strategy raised and was degraded to review."""
        self.event(
            EventType.GROUP_RESOLUTION_FAILED,
            data={
                "group_id": group_id,
                "strategy": strategy,
                "exception_class": type(error).__name__,
                "message": str(error),
            },
            level="ERROR",
            stage=stage,
        )

    def artifact_written(
        self,
        path: str,
        sha256: str,
        stage: str | None = None,
        bytes_written: int | None = None,
        record_count: int | None = None,
    ) -> None:
        """Log an output file with its hash, size and row count."""
        data: dict[str, Any] = {"path": path, "sha256": sha256}
        if bytes_written is not None:
            data["bytes"] = bytes_written
        if record_count is not None:
            data["record_count"] = record_count
        self.event(EventType.ARTIFACT_WRITTEN, data=data, stage=stage)

    def record_error(
        self,
        error: Exception,
        stage: str | None = None,
        rid: str | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Log an exception as an ``error`` event.

        Parameters
        ----------
        error : Exception
            Exception that stopped the run.
        stage : str | None, optional
            Stage where it happened.
        rid : str | None, optional
            Record position if the error is record-specific.
        include_traceback : bool, optional
            Attach the formatted traceback, by default False.
        """
        data: dict[str, Any] = {
            "exception_class": type(error).__name__,
            "message": str(error),
        }
        if include_traceback:
            data["traceback"] = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        self.event(EventType.ERROR, data=data, level="ERROR", stage=stage, rid=rid)
