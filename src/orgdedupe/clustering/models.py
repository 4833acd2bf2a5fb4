"""Data models for duplicate groups and cross-collection matches."""

from dataclasses import dataclass, field
from typing import Any

from orgdedupe.decision import MatchCriterion, MatchResult
from orgdedupe.models import Record

GROUP_FLAG_PREFIX = "DUPLICATE_GROUP_"


@dataclass(frozen=True)
class GroupMember:
    """One record inside a duplicate group.

    Attributes
    ----------
    index : int
        Position of the record in the input sequence.
    record : Record
        The record itself.
    criterion : MatchCriterion
        Rule that attached the member to the group's anchor; ``NONE`` for
        the anchor.
    """

    index: int
    record: Record
    criterion: MatchCriterion = MatchCriterion.NONE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "criterion": self.criterion.value,
            "record": self.record.to_dict(include_review=True),
        }


@dataclass(frozen=True)
class PairSimilarity:
    """Full similarity breakdown for one pair of group members.

    Attributes
    ----------
    left_index : int
        Input position of the first record.
    right_index : int
        Input position of the second record.
    center : float
        Normalized center-name similarity.
    location : float
        Location-key similarity (0.0 if either key is empty).
    email : float
        Normalized email similarity (0.0 unless both present).
    representative : float
        Representative similarity (0.0 unless both present).
    criterion : MatchCriterion
        Criterion the classifier gives this pair on its own.
    """

    left_index: int
    right_index: int
    center: float
    location: float
    email: float
    representative: float
    criterion: MatchCriterion

    @property
    def is_duplicate(self) -> bool:
        """Whether the pair classifies as duplicate on its own."""
        return self.criterion is not MatchCriterion.NONE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "left_index": self.left_index,
            "right_index": self.right_index,
            "center": self.center,
            "location": self.location,
            "email": self.email,
            "representative": self.representative,
            "criterion": self.criterion.value,
        }


@dataclass(frozen=True)
class DuplicateGroup:
    """A set of records judged to refer to the same entity.

    Attributes
    ----------
    group_id : int
        1-based identifier in discovery order.
    members : tuple[GroupMember, ...]
        Members in scan order; the first is the anchor.
    similarities : tuple[PairSimilarity, ...]
        Breakdown for every member pair, in member order.

    Raises
    ------
    ValueError
        If the group has fewer than two members or repeats an index.
    """

    group_id: int
    members: tuple[GroupMember, ...]
    similarities: tuple[PairSimilarity, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate group invariants."""
        if len(self.members) < 2:
            raise ValueError(f"group {self.group_id} must have at least 2 members")
        indices = self.indices
        if len(set(indices)) != len(indices):
            raise ValueError(f"group {self.group_id} repeats a record index")

    def __len__(self) -> int:
        return len(self.members)

    @property
    def size(self) -> int:
        """Number of members."""
        return len(self.members)

    @property
    def flag(self) -> str:
        """Review flag written into member records."""
        return f"{GROUP_FLAG_PREFIX}{self.group_id}"

    @property
    def anchor(self) -> GroupMember:
        """The member that started the group."""
        return self.members[0]

    @property
    def indices(self) -> tuple[int, ...]:
        """Input positions of all members, anchor first."""
        return tuple(m.index for m in self.members)

    @property
    def records(self) -> tuple[Record, ...]:
        """Member records, anchor first."""
        return tuple(m.record for m in self.members)

    @property
    def criteria(self) -> tuple[MatchCriterion, ...]:
        """Criteria that attached the non-anchor members."""
        return tuple(m.criterion for m in self.members[1:])

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "group_id": self.group_id,
            "flag": self.flag,
            "size": self.size,
            "members": [m.to_dict() for m in self.members],
            "similarities": [s.to_dict() for s in self.similarities],
        }


@dataclass(frozen=True)
class CrossMatch:
    """First match found for a primary record in the secondary collection.

    Attributes
    ----------
    primary_index : int
        Position of the record in the primary collection.
    secondary_index : int
        Position of the matching record in the secondary collection.
    result : MatchResult
        Classifier outcome for the pair.
    """

    primary_index: int
    secondary_index: int
    result: MatchResult

    @property
    def criterion(self) -> MatchCriterion:
        """Criterion that justified the match."""
        return self.result.criterion

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "primary_index": self.primary_index,
            "secondary_index": self.secondary_index,
            **self.result.to_dict(),
        }

