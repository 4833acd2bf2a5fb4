"""Merge resolution: ranking, field merge rules and strategies."""

from orgdedupe.merge.field_merge import combine_notes, merge_records, union_commitments
from orgdedupe.merge.models import ActionKind, ActionReason, MergeAction, record_origins
from orgdedupe.merge.processor import resolve_groups
from orgdedupe.merge.ranking import (
    COMPLETENESS_WEIGHTS,
    EPOCH,
    MAX_COMPLETENESS,
    completeness_score,
    parse_date,
    rank_key,
    sort_by_completeness,
    sort_by_date,
)
from orgdedupe.merge.strategies import (
    STRATEGY_REGISTRY,
    MergeStrategy,
    MergeStrategyProtocol,
    RemoveNewestStrategy,
    RemoveOldestStrategy,
    ReviewStrategy,
    create_strategy,
    flag_members,
)

__all__ = [
    # Ranking
    "COMPLETENESS_WEIGHTS",
    "EPOCH",
    "MAX_COMPLETENESS",
    "completeness_score",
    "parse_date",
    "rank_key",
    "sort_by_completeness",
    "sort_by_date",
    # Field rules
    "combine_notes",
    "merge_records",
    "union_commitments",
    # Actions
    "ActionKind",
    "ActionReason",
    "MergeAction",
    "record_origins",
    # Strategies
    "STRATEGY_REGISTRY",
    "MergeStrategy",
    "MergeStrategyProtocol",
    "RemoveNewestStrategy",
    "RemoveOldestStrategy",
    "ReviewStrategy",
    "create_strategy",
    "flag_members",
    # Processor
    "resolve_groups",
]
