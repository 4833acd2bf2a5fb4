"""Field-level merge rules for duplicate records."""

from collections.abc import Iterable, Sequence

from orgdedupe.models import RECORD_FIELDS, Record

COMMITMENT_SEPARATOR = ","
COMMITMENT_JOINER = ", "
NOTES_JOINER = " | "

# Fields combined across records instead of filled
COMBINED_FIELDS: frozenset[str] = frozenset({"commitments", "additional"})


def union_commitments(values: Iterable[str]) -> str:
    """Union comma-separated commitment tokens, first occurrence order.

    Examples
    --------
        >>> union_commitments(["A, B", "B,C", ""])
        'A, B, C'
    """
    seen: dict[str, None] = {}
    for value in values:
        for token in value.split(COMMITMENT_SEPARATOR):
            token = token.strip()
            if token:
                seen.setdefault(token, None)
    return COMMITMENT_JOINER.join(seen)


def combine_notes(values: Iterable[str]) -> str:
    """Join distinct non-blank notes with ``" | "``."""
    notes: list[str] = []
    for value in values:
        note = value.strip()
        if note and note not in notes:
            notes.append(note)
    return NOTES_JOINER.join(notes)


def merge_records(records: Sequence[Record]) -> Record:
    """Merge ranked records into the first one.

    The first record is the base. Each blank base field is filled from the
    first later record that has it. ``commitments`` tokens are unioned and
    ``additional`` notes are concatenated. A populated value is never
    replaced by a blank one.

    Parameters
    ----------
    records : Sequence[Record]
        Records in rank order, base first.

    Returns
    -------
    Record
        Merged record; source, index and review fields come from the base.

    Raises
    ------
    ValueError
        If *records* is empty.
    """
    if not records:
        raise ValueError("Cannot merge an empty record list")

    base = records[0]
    values = {name: base.get(name) for name in RECORD_FIELDS if name not in COMBINED_FIELDS}

    for other in records[1:]:
        for name, value in values.items():
            if not value.strip() and other.is_populated(name):
                values[name] = other.get(name)

    values["commitments"] = union_commitments(r.commitments for r in records)
    values["additional"] = combine_notes(r.additional for r in records)
    return base.replace(**values)
