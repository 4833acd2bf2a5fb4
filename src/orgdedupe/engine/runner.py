"""Pipeline runners.

``run_pipeline`` deduplicates one collection; ``run_cross_merge`` matches
a primary collection against a secondary one and keeps the secondary
version of every match. Both are pure in-memory batch operations.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from itertools import combinations

from orgdedupe.audit.logger import AuditLogger
from orgdedupe.candidates import blocked_candidates, blocked_cross_candidates, create_blockers
from orgdedupe.clustering import (
    CrossMatch,
    DuplicateGroup,
    GroupMember,
    find_duplicate_groups,
    match_collections,
    score_pair,
)
from orgdedupe.decision import MatchCriterion, Thresholds
from orgdedupe.engine.config import (
    CROSS_STRATEGY,
    CrossMergeResult,
    DedupeConfig,
    DedupeResult,
    DedupeSummary,
)
from orgdedupe.errors import EmptyInputError
from orgdedupe.merge import (
    ActionKind,
    ActionReason,
    MergeAction,
    create_strategy,
    record_origins,
    resolve_groups,
)
from orgdedupe.models import Record
from orgdedupe.normalize import standardize_region

PIPELINE_STAGE = "pipeline"
RESOLUTION_STAGE = "resolution"


def run_pipeline(
    records: Iterable[Record],
    config: DedupeConfig | None = None,
    *,
    logger: AuditLogger | None = None,
    allow_empty: bool = False,
) -> DedupeResult:
    """Deduplicate one collection.

    Parameters
    ----------
    records : Iterable[Record]
        Input records, materialised once; positions index groups and
        actions.
    config : DedupeConfig | None, optional
        Run configuration. If None, uses defaults.
    logger : AuditLogger | None, optional
        Audit logger. If None, no logging.
    allow_empty : bool, optional
        Return an empty result for zero records instead of raising.

    Returns
    -------
    DedupeResult
        Processed records, groups, actions and summary.

    Raises
    ------
    EmptyInputError
        If there are no records and *allow_empty* is False.
    ConfigurationError
        If a blocker cannot be built from the configuration.
    """
    config = config or DedupeConfig()
    records = list(records)

    if not records:
        if not allow_empty:
            raise EmptyInputError("run_pipeline received no records")
        return DedupeResult(
            processed_records=[],
            duplicate_groups=[],
            actions=[],
            summary=_summary([], [], 0, config.strategy, config.thresholds),
        )

    if logger:
        logger.run_started(command=["run_pipeline"], parameters=config.to_dict())

    try:
        prepared = _prepare(records, config)
        candidates = None
        if config.blockers:
            candidates = blocked_candidates(create_blockers(config.blockers), logger=logger)

        groups = find_duplicate_groups(
            prepared, config.thresholds, candidates=candidates, logger=logger
        )
        strategy = create_strategy(config.strategy)
        processed, actions = resolve_groups(prepared, groups, strategy, logger=logger)
    except Exception as e:
        if logger:
            logger.record_error(e, stage=PIPELINE_STAGE)
            logger.run_finished("failed")
        raise

    summary = _summary(processed, groups, len(records), config.strategy, config.thresholds)
    if logger:
        logger.run_finished("success", records_processed=len(records))

    return DedupeResult(
        processed_records=processed,
        duplicate_groups=groups,
        actions=actions,
        summary=summary,
    )


def run_cross_merge(
    primary: Iterable[Record],
    secondary: Iterable[Record],
    config: DedupeConfig | None = None,
    *,
    logger: AuditLogger | None = None,
) -> CrossMergeResult:
    """Merge a primary collection into a secondary one.

    Every primary record is matched against the secondary collection
    (first match wins). Output is all secondary records in order, then
    the unmatched primary records in order. The configured strategy does
    not apply: matched primary records are always dropped in favour of
    the secondary version.

    Parameters
    ----------
    primary : Iterable[Record]
        Collection whose duplicates are dropped.
    secondary : Iterable[Record]
        Collection kept in full.
    config : DedupeConfig | None, optional
        Thresholds, blockers and region standardization. If None, uses
        defaults.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    CrossMergeResult
        Group members and action indices are positions in the combined
        sequence ``secondary + primary``.

    Raises
    ------
    EmptyInputError
        If both collections are empty.
    """
    config = config or DedupeConfig()
    primary = list(primary)
    secondary = list(secondary)
    if not primary and not secondary:
        raise EmptyInputError("run_cross_merge received no records")

    if logger:
        logger.run_started(command=["run_cross_merge"], parameters=config.to_dict())

    try:
        primary = _prepare(primary, config)
        secondary = _prepare(secondary, config)
        candidates = None
        if config.blockers:
            candidates = blocked_cross_candidates(create_blockers(config.blockers), logger=logger)

        matches = match_collections(
            primary, secondary, config.thresholds, candidates=candidates, logger=logger
        )
        groups, actions = _cross_groups(primary, secondary, matches, config.thresholds, logger)
    except Exception as e:
        if logger:
            logger.record_error(e, stage=PIPELINE_STAGE)
            logger.run_finished("failed")
        raise

    matched = {m.primary_index for m in matches}
    processed = secondary + [r for i, r in enumerate(primary) if i not in matched]
    summary = _summary(
        processed,
        groups,
        len(primary) + len(secondary),
        CROSS_STRATEGY,
        config.thresholds,
    )
    if logger:
        logger.run_finished("success", records_processed=len(primary) + len(secondary))

    return CrossMergeResult(
        processed_records=processed,
        duplicate_groups=groups,
        actions=actions,
        summary=summary,
        matches=matches,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _prepare(records: list[Record], config: DedupeConfig) -> list[Record]:
    """Apply opt-in record preparation (region standardization)."""
    if not config.standardize_regions:
        return records
    return [
        r.replace(region=standardize_region(r.region)) if r.region else r for r in records
    ]


def _cross_groups(
    primary: Sequence[Record],
    secondary: Sequence[Record],
    matches: Sequence[CrossMatch],
    thresholds: Thresholds,
    logger: AuditLogger | None,
) -> tuple[list[DuplicateGroup], list[MergeAction]]:
    """Build one group per absorbing secondary record, in discovery order."""
    if logger:
        logger.stage_started(RESOLUTION_STAGE, expected_records=len(matches))

    offset = len(secondary)
    by_secondary: dict[int, list[CrossMatch]] = {}
    for match in matches:
        by_secondary.setdefault(match.secondary_index, []).append(match)

    groups: list[DuplicateGroup] = []
    actions: list[MergeAction] = []
    for group_id, (j, group_matches) in enumerate(by_secondary.items(), start=1):
        kept = secondary[j]
        members = [GroupMember(j, kept, MatchCriterion.NONE)]
        members.extend(
            GroupMember(offset + m.primary_index, primary[m.primary_index], m.criterion)
            for m in group_matches
        )
        group = DuplicateGroup(
            group_id=group_id,
            members=tuple(members),
            similarities=tuple(
                score_pair(a.index, b.index, a.record, b.record, thresholds)
                for a, b in combinations(members, 2)
            ),
        )
        groups.append(group)
        actions.extend(
            MergeAction(
                group_id=group_id,
                kind=ActionKind.REMOVE,
                reason=ActionReason.KEPT_SECONDARY,
                affected_indices=(member.index,),
                record=kept,
                base_index=j,
                origins=record_origins([member.record]),
            )
            for member in members[1:]
        )
        if logger:
            logger.duplicate_group_found(
                group_id=group_id,
                indices=list(group.indices),
                criteria=[c.value for c in group.criteria],
                stage=RESOLUTION_STAGE,
            )

    if logger:
        logger.stage_finished(
            stage=RESOLUTION_STAGE,
            counters={"groups": len(groups), "actions": len(actions)},
        )
    return groups, actions


def _summary(
    processed: Sequence[Record],
    groups: Sequence[DuplicateGroup],
    records_in: int,
    strategy: str,
    thresholds: Thresholds,
) -> DedupeSummary:
    """Compute run statistics."""
    regions = Counter(r.region for r in processed)
    return DedupeSummary(
        records_in=records_in,
        records_out=len(processed),
        groups_found=len(groups),
        records_in_groups=sum(g.size for g in groups),
        records_removed=records_in - len(processed),
        strategy=strategy,
        thresholds=thresholds.to_dict(),
        records_by_region=dict(sorted(regions.items())),
    )
