"""Pipeline orchestration engine.

This package provides the entry points for deduplicating one collection
or merging two, including configuration and result types.
"""

from orgdedupe.engine.config import (
    CONFIG_SCHEMA,
    CrossMergeResult,
    DedupeConfig,
    DedupeResult,
    DedupeSummary,
    load_config,
)
from orgdedupe.engine.runner import run_cross_merge, run_pipeline

__all__ = [
    "CONFIG_SCHEMA",
    "CrossMergeResult",
    "DedupeConfig",
    "DedupeResult",
    "DedupeSummary",
    "load_config",
    "run_cross_merge",
    "run_pipeline",
]
