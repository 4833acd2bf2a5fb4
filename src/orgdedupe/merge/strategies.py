"""Resolution strategies for duplicate groups.

Every strategy has the same contract: ``resolve(group)`` returns the
surviving members (possibly rewritten) and the actions taken. Members not
returned are removed from the output collection.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from orgdedupe.clustering import DuplicateGroup, GroupMember
from orgdedupe.errors import ConfigurationError
from orgdedupe.merge.field_merge import merge_records
from orgdedupe.merge.models import ActionKind, ActionReason, MergeAction, record_origins
from orgdedupe.merge.ranking import completeness_score, sort_by_completeness, sort_by_date

Resolution = tuple[list[GroupMember], list[MergeAction]]


@runtime_checkable
class MergeStrategyProtocol(Protocol):
    """Structural protocol every resolution strategy must satisfy.

    Attributes
    ----------
    name : str
        Registry name, also used in summaries and audit events.
    removes_records : bool
        Whether the strategy shrinks the collection.
    """

    name: str
    removes_records: bool

    def resolve(self, group: DuplicateGroup) -> Resolution:
        """Resolve one group into survivors and actions."""
        ...


def flag_members(group: DuplicateGroup, note: str = "") -> list[GroupMember]:
    """Return the group's members annotated with review fields."""
    return [
        GroupMember(
            member.index,
            member.record.replace(
                duplicate_flag=group.flag,
                duplicate_count=group.size,
                completeness_score=completeness_score(member.record),
                review_note=note,
            ),
            member.criterion,
        )
        for member in group.members
    ]


class ReviewStrategy:
    """Keep every record and flag the group for manual review."""

    name: str = "review"
    removes_records: bool = False

    def resolve(self, group: DuplicateGroup) -> Resolution:
        """Flag each member; one ``mark`` action per member."""
        flagged = flag_members(group)
        actions = [
            MergeAction(
                group_id=group.group_id,
                kind=ActionKind.MARK,
                reason=ActionReason.DUPLICATE_REVIEW,
                affected_indices=(member.index,),
                record=member.record,
                origins=record_origins([member.record]),
            )
            for member in flagged
        ]
        return flagged, actions


class _KeepByDateStrategy:
    """Keep the first record of a date ordering and drop the rest."""

    name: str
    removes_records: bool = True
    newest_first: bool
    reason: ActionReason

    def resolve(self, group: DuplicateGroup) -> Resolution:
        """Keep one member; one ``remove`` action per dropped member."""
        ordered = sort_by_date(group.members, newest_first=self.newest_first)
        keep, dropped = ordered[0], ordered[1:]
        actions = [
            MergeAction(
                group_id=group.group_id,
                kind=ActionKind.REMOVE,
                reason=self.reason,
                affected_indices=(member.index,),
                record=keep.record,
                base_index=keep.index,
                origins=record_origins([member.record]),
            )
            for member in dropped
        ]
        return [keep], actions


class RemoveOldestStrategy(_KeepByDateStrategy):
    """Keep the newest record; ties keep scan order."""

    name = "remove_oldest"
    newest_first = True
    reason = ActionReason.OLDER_DUPLICATE


class RemoveNewestStrategy(_KeepByDateStrategy):
    """Keep the oldest record; ties keep scan order."""

    name = "remove_newest"
    newest_first = False
    reason = ActionReason.NEWER_DUPLICATE


class MergeStrategy:
    """Combine the group into its most complete record.

    Members are ranked by completeness, then by date (newest first). The
    top-ranked member is the base; see :func:`merge_records` for the field
    rules.
    """

    name: str = "merge"
    removes_records: bool = True

    def resolve(self, group: DuplicateGroup) -> Resolution:
        """Merge into the base member; one ``merge`` action per group."""
        ranked = sort_by_completeness(group.members)
        base = ranked[0]
        merged = merge_records([member.record for member in ranked])
        survivor = GroupMember(base.index, merged, base.criterion)
        action = MergeAction(
            group_id=group.group_id,
            kind=ActionKind.MERGE,
            reason=ActionReason.DUPLICATE_MERGE,
            affected_indices=tuple(member.index for member in ranked[1:]),
            record=merged,
            base_index=base.index,
            origins=record_origins(member.record for member in ranked[1:]),
        )
        return [survivor], [action]


# name → strategy class
STRATEGY_REGISTRY: dict[str, type] = {
    ReviewStrategy.name: ReviewStrategy,
    RemoveOldestStrategy.name: RemoveOldestStrategy,
    RemoveNewestStrategy.name: RemoveNewestStrategy,
    MergeStrategy.name: MergeStrategy,
}


def create_strategy(name: str) -> MergeStrategyProtocol:
    """Instantiate a strategy by registry name.

    Parameters
    ----------
    name : str
        One of ``review``, ``remove_oldest``, ``remove_newest``, ``merge``.

    Returns
    -------
    MergeStrategyProtocol
        Strategy instance.

    Raises
    ------
    ConfigurationError
        If *name* is not registered.
    """
    cls = STRATEGY_REGISTRY.get(name)
    if cls is None:
        valid = ", ".join(sorted(STRATEGY_REGISTRY))
        raise ConfigurationError(
            f"Unknown strategy: {name!r}. Valid strategies: {valid}", option="strategy"
        )
    return cls()  # type: ignore[no-any-return]
