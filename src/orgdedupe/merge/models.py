"""Data models for merge resolution."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from orgdedupe.models import Record

Origin = tuple[str, int]


class ActionKind(StrEnum):
    """What a merge action did to the collection.

    Attributes
    ----------
    MARK : str
        Record flagged for review, nothing removed.
    REMOVE : str
        Record dropped in favour of another.
    MERGE : str
        Records combined into one.
    """

    MARK = "mark"
    REMOVE = "remove"
    MERGE = "merge"


class ActionReason(StrEnum):
    """Why a merge action was taken."""

    DUPLICATE_REVIEW = "duplicate_review"
    OLDER_DUPLICATE = "older_duplicate"
    NEWER_DUPLICATE = "newer_duplicate"
    DUPLICATE_MERGE = "duplicate_merge"
    KEPT_SECONDARY = "kept_secondary"
    MERGE_FAILED = "merge_failed"


@dataclass(frozen=True)
class MergeAction:
    """Audit entry for one resolution step.

    Attributes
    ----------
    group_id : int
        Group the action belongs to.
    kind : ActionKind
        Mark, remove or merge.
    reason : str
        Reason code (see :class:`ActionReason`).
    affected_indices : tuple[int, ...]
        Input positions of the records the action applies to.
    record : Record
        Snapshot of the resulting or kept record.
    base_index : int | None
        Position of the kept or base record; ``None`` for ``mark``.
    origins : tuple[Origin, ...]
        ``(source, original_index)`` of each affected record, aligned with
        *affected_indices*. Positions change between runs; origins do not.
    """

    group_id: int
    kind: ActionKind
    reason: str
    affected_indices: tuple[int, ...]
    record: Record
    base_index: int | None = None
    origins: tuple[Origin, ...] = ()

    @property
    def details(self) -> str:
        """Human-readable description of the action."""
        positions = ", ".join(str(i) for i in self.affected_indices)
        if self.kind is ActionKind.MARK:
            return f"Group {self.group_id}: record {positions} flagged for review ({self.reason})"
        if self.kind is ActionKind.REMOVE:
            return (
                f"Group {self.group_id}: record {positions} removed, "
                f"kept record {self.base_index} ({self.reason})"
            )
        return (
            f"Group {self.group_id}: records {positions} merged into "
            f"record {self.base_index} ({self.reason})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "group_id": self.group_id,
            "kind": self.kind.value,
            "reason": self.reason,
            "affected_indices": list(self.affected_indices),
            "base_index": self.base_index,
            "origins": [
                {"source": source, "original_index": index} for source, index in self.origins
            ],
            "details": self.details,
            "record": self.record.to_dict(include_review=True),
        }


def record_origins(records: Iterable[Record]) -> tuple[Origin, ...]:
    """Return ``(source, original_index)`` for each record, in order."""
    return tuple((record.source, record.original_index) for record in records)
