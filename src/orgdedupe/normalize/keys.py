"""Composite comparison keys built from several record fields."""

from typing import TYPE_CHECKING

from orgdedupe.normalize.text import LOCATION_SEPARATOR

if TYPE_CHECKING:
    from orgdedupe.models import Record

LOCATION_FIELDS: tuple[str, ...] = ("locality", "province", "region")


def location_key(record: "Record") -> str:
    """Join the populated location fields into one lowercased key.

    Parameters
    ----------
    record : Record
        Record to key.

    Returns
    -------
    str
        ``"locality | province | region"`` restricted to non-blank parts,
        or ``""`` when no location field is populated.

    Notes
    -----
    Two records without any location share the key ``""``. Callers must not
    read that as agreement: the scorer returns 1.0 for two empty strings.
    """
    parts = [getattr(record, name) or "" for name in LOCATION_FIELDS]
    return LOCATION_SEPARATOR.join(p for p in parts if p.strip()).lower()
