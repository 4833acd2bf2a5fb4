"""Apply a resolution strategy to every duplicate group."""

from collections.abc import Sequence

from orgdedupe.audit.logger import AuditLogger
from orgdedupe.clustering import DuplicateGroup, GroupMember
from orgdedupe.merge.models import ActionKind, ActionReason, MergeAction, record_origins
from orgdedupe.merge.strategies import MergeStrategyProtocol, Resolution, flag_members
from orgdedupe.models import Record

STAGE_NAME = "resolution"


def resolve_groups(
    records: Sequence[Record],
    groups: Sequence[DuplicateGroup],
    strategy: MergeStrategyProtocol,
    *,
    logger: AuditLogger | None = None,
) -> tuple[list[Record], list[MergeAction]]:
    """Resolve all groups and rebuild the collection.

    Survivors replace their members at their own positions; removed
    members are dropped; ungrouped records pass through unchanged. Output
    keeps input order.

    If the strategy raises on a group, that group is degraded to review
    flags carrying a ``review_note`` and a single ``merge_failed`` action;
    the remaining groups are resolved normally.

    Parameters
    ----------
    records : Sequence[Record]
        Input collection the groups were built from.
    groups : Sequence[DuplicateGroup]
        Disjoint duplicate groups.
    strategy : MergeStrategyProtocol
        Resolution strategy.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    tuple[list[Record], list[MergeAction]]
        Processed records and the action log in group order.
    """
    if logger:
        logger.stage_started(STAGE_NAME, expected_records=len(records))

    replacements: dict[int, Record] = {}
    removed: set[int] = set()
    actions: list[MergeAction] = []
    failed = 0

    for group in groups:
        try:
            survivors, group_actions = _resolve_one(group, strategy)
        except Exception as e:
            failed += 1
            survivors, group_actions = _degrade_to_review(group, strategy.name, e)
            if logger:
                logger.group_resolution_failed(
                    group_id=group.group_id,
                    strategy=strategy.name,
                    error=e,
                    stage=STAGE_NAME,
                )

        kept = {member.index for member in survivors}
        for member in survivors:
            replacements[member.index] = member.record
        removed.update(index for index in group.indices if index not in kept)
        actions.extend(group_actions)

    processed = [
        replacements.get(position, record)
        for position, record in enumerate(records)
        if position not in removed
    ]

    if logger:
        logger.stage_finished(
            stage=STAGE_NAME,
            counters={
                "groups": len(groups),
                "groups_failed": failed,
                "actions": len(actions),
                "records_removed": len(removed),
                "records_out": len(processed),
            },
        )

    return processed, actions


def _resolve_one(group: DuplicateGroup, strategy: MergeStrategyProtocol) -> Resolution:
    """Run the strategy and check its survivors belong to the group."""
    survivors, actions = strategy.resolve(group)
    if not survivors:
        raise ValueError(f"strategy {strategy.name!r} kept no record of group {group.group_id}")
    stray = {member.index for member in survivors} - set(group.indices)
    if stray:
        raise ValueError(
            f"strategy {strategy.name!r} returned records outside group "
            f"{group.group_id}: {sorted(stray)}"
        )
    return survivors, actions


def _degrade_to_review(
    group: DuplicateGroup,
    strategy_name: str,
    error: Exception,
) -> tuple[list[GroupMember], list[MergeAction]]:
    """Flag every member for review after a failed resolution."""
    note = f"{strategy_name} failed: {type(error).__name__}: {error}"
    flagged = flag_members(group, note=note)
    action = MergeAction(
        group_id=group.group_id,
        kind=ActionKind.MARK,
        reason=ActionReason.MERGE_FAILED,
        affected_indices=group.indices,
        record=flagged[0].record,
        origins=record_origins(member.record for member in group.members),
    )
    return flagged, [action]
