"""Completeness scoring and date resolution for ranking group members.

Day/month ambiguity
-------------------
``A/B/YYYY`` and ``A-B-YYYY`` dates are ambiguous. The first number is
read as the month whenever it can be one (``<= 12``); otherwise the pair is
read day-first. ``"01/03/2024"`` is therefore January 3rd while
``"15/01/2024"`` is January 15th. Sources mixing both conventions for dates
where both numbers are ``<= 12`` cannot be disambiguated from the value
alone.

This month-first ordering follows the legacy spreadsheet exporter, which
built dates as ``(year, first - 1, second)``. It is not the day-first
reading usual in Spanish sources: ``"05/03/2024"`` is May 3rd.
"""

import re
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from orgdedupe.models import Record

if TYPE_CHECKING:
    from orgdedupe.clustering import GroupMember

# Weight of each populated field
COMPLETENESS_WEIGHTS: dict[str, int] = {
    "representative": 1,
    "center": 2,
    "email": 3,
    "department": 1,
    "locality": 1,
    "province": 1,
    "region": 1,
    "commitments": 2,
    "additional": 1,
    "date": 1,
}

MAX_COMPLETENESS = sum(COMPLETENESS_WEIGHTS.values())

# Sentinel for absent or unparseable dates, sorts as oldest
EPOCH = datetime(1970, 1, 1)

SLASH_DATE_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
ISO_DATE_RE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")
DASH_DATE_RE = re.compile(r"(\d{1,2})-(\d{1,2})-(\d{4})")


def completeness_score(record: Record) -> int:
    """Weighted count of populated fields.

    Parameters
    ----------
    record : Record
        Record to score.

    Returns
    -------
    int
        Sum of :data:`COMPLETENESS_WEIGHTS` over non-blank fields,
        between 0 and :data:`MAX_COMPLETENESS`.
    """
    return sum(
        weight for name, weight in COMPLETENESS_WEIGHTS.items() if record.is_populated(name)
    )


def _build(year: int, month: int, day: int) -> datetime | None:
    try:
        return datetime(year, month, day)
    except ValueError:
        return None


def _day_month(first: int, second: int, year: int) -> datetime | None:
    """Resolve an ambiguous ``first/second/year`` triple."""
    if first <= 12:
        return _build(year, first, second)
    return _build(year, second, first)


def parse_date(value: Any) -> datetime:
    """Best-effort date parsing.

    Patterns are searched in order: ``A/B/YYYY``, ``YYYY-M-D``,
    ``A-B-YYYY``. The first pattern found decides; if its numbers do not
    form a calendar date the result is :data:`EPOCH`.

    Parameters
    ----------
    value : Any
        Raw date cell.

    Returns
    -------
    datetime
        Parsed naive datetime, :data:`EPOCH` when absent or unparseable.

    Examples
    --------
        >>> parse_date("15/01/2024")
        datetime.datetime(2024, 1, 15, 0, 0)
        >>> parse_date("2024-03-01 10:22")
        datetime.datetime(2024, 3, 1, 0, 0)
        >>> parse_date("yesterday")
        datetime.datetime(1970, 1, 1, 0, 0)
    """
    if value is None:
        return EPOCH
    text = value if isinstance(value, str) else str(value)
    if not text.strip():
        return EPOCH

    match = SLASH_DATE_RE.search(text)
    if match:
        first, second, year = (int(g) for g in match.groups())
        return _day_month(first, second, year) or EPOCH

    match = ISO_DATE_RE.search(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _build(year, month, day) or EPOCH

    match = DASH_DATE_RE.search(text)
    if match:
        first, second, year = (int(g) for g in match.groups())
        return _day_month(first, second, year) or EPOCH

    return EPOCH


def rank_key(member: "GroupMember") -> tuple[int, datetime]:
    """Sort key for the merge base: most complete, then newest."""
    return completeness_score(member.record), parse_date(member.record.date)


def sort_by_completeness(members: Iterable["GroupMember"]) -> list["GroupMember"]:
    """Stable sort by completeness descending, then date descending."""
    return sorted(members, key=rank_key, reverse=True)


def sort_by_date(
    members: Iterable["GroupMember"],
    *,
    newest_first: bool = True,
) -> list["GroupMember"]:
    """Stable sort by parsed date.

    Parameters
    ----------
    members : Iterable[GroupMember]
        Group members.
    newest_first : bool, optional
        Sort direction, by default True.

    Returns
    -------
    list[GroupMember]
        Sorted members; ties keep their scan order.
    """
    return sorted(members, key=lambda m: parse_date(m.record.date), reverse=newest_first)
