"""Record data model for orgdedupe.

This module defines the single record schema shared by every stage of the
engine. Records are immutable; flagging and merging build new instances.
"""

from dataclasses import dataclass, replace
from typing import Any

from orgdedupe.normalize.text import clean

# Data fields in export order
RECORD_FIELDS: tuple[str, ...] = (
    "representative",
    "center",
    "email",
    "department",
    "locality",
    "province",
    "region",
    "commitments",
    "additional",
    "date",
)

REVIEW_FIELDS: tuple[str, ...] = (
    "duplicate_flag",
    "duplicate_count",
    "completeness_score",
    "review_note",
)

_STRING_FIELDS: frozenset[str] = frozenset(RECORD_FIELDS) | {
    "source",
    "duplicate_flag",
    "review_note",
}


@dataclass(frozen=True)
class Record:
    """One organization/contact entry.

    Attributes
    ----------
    representative : str
        Person who registered the entry.
    center : str
        Center / organization name.
    email : str
        Contact email.
    department : str
        Department or sub-unit.
    locality : str
        Town or city.
    province : str
        Province.
    region : str
        Region (autonomous community).
    commitments : str
        Comma-separated commitment tokens.
    additional : str
        Free-text notes.
    date : str
        Submission date as found in the source sheet.
    source : str
        Tag of the collection the record came from.
    original_index : int
        Position in the source collection (-1 if unassigned).
    duplicate_flag : str
        Review flag (``DUPLICATE_GROUP_<n>``), empty unless flagged.
    duplicate_count : int
        Size of the group the record was flagged in.
    completeness_score : int
        Completeness score at flagging time.
    review_note : str
        Failure note attached when a group could not be resolved.

    Notes
    -----
    Empty string means absent. ``None`` and non-string values passed to the
    constructor are coerced to ``""``.
    """

    representative: str = ""
    center: str = ""
    email: str = ""
    department: str = ""
    locality: str = ""
    province: str = ""
    region: str = ""
    commitments: str = ""
    additional: str = ""
    date: str = ""
    source: str = ""
    original_index: int = -1
    duplicate_flag: str = ""
    duplicate_count: int = 0
    completeness_score: int = 0
    review_note: str = ""

    def __post_init__(self) -> None:
        """Coerce absent or non-string text fields to empty strings."""
        for name in _STRING_FIELDS:
            if not isinstance(getattr(self, name), str):
                object.__setattr__(self, name, "")

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        source: str | None = None,
        original_index: int | None = None,
    ) -> "Record":
        """Build a record from a loosely typed mapping.

        Unknown keys are ignored and every data field is passed through
        :func:`clean`.

        Parameters
        ----------
        data : dict[str, Any]
            Row mapping (e.g. a CSV row).
        source : str | None, optional
            Source tag, overrides ``data["source"]``.
        original_index : int | None, optional
            Position in the source, overrides ``data["original_index"]``.

        Returns
        -------
        Record
            New record.
        """
        values: dict[str, Any] = {name: clean(data.get(name)) for name in RECORD_FIELDS}
        values["source"] = source if source is not None else clean(data.get("source"))

        index = original_index if original_index is not None else data.get("original_index")
        try:
            values["original_index"] = int(index) if index not in (None, "") else -1
        except (TypeError, ValueError):
            values["original_index"] = -1

        return cls(**values)

    def to_dict(self, *, include_review: bool = False) -> dict[str, Any]:
        """Convert to dictionary.

        Parameters
        ----------
        include_review : bool, optional
            Include review annotations, by default False.

        Returns
        -------
        dict[str, Any]
            Data fields, source and original index.
        """
        data: dict[str, Any] = {name: getattr(self, name) for name in RECORD_FIELDS}
        data["source"] = self.source
        data["original_index"] = self.original_index
        if include_review:
            for name in REVIEW_FIELDS:
                data[name] = getattr(self, name)
        return data

    def replace(self, **changes: Any) -> "Record":
        """Return a copy with *changes* applied."""
        return replace(self, **changes)

    def get(self, name: str) -> str:
        """Return a data field value by name."""
        if name not in RECORD_FIELDS:
            raise KeyError(name)
        value: str = getattr(self, name)
        return value

    def is_populated(self, name: str) -> bool:
        """Check whether a data field is non-blank."""
        return bool(self.get(name).strip())

    def non_empty_fields(self) -> int:
        """Count populated data fields."""
        return sum(1 for name in RECORD_FIELDS if self.is_populated(name))

    @property
    def is_flagged(self) -> bool:
        """Whether the record carries a review flag."""
        return bool(self.duplicate_flag)

