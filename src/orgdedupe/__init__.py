"""Deduplication of organization and contact records.

This package provides:
- Data models (orgdedupe.models): the Record type
- Normalization (orgdedupe.normalize): text cleaning, comparison keys, regions
- Scoring (orgdedupe.scoring): Levenshtein similarity
- Decision (orgdedupe.decision): multi-criterion duplicate classification
- Candidates (orgdedupe.candidates): blocking and candidate pair generation
- Clustering (orgdedupe.clustering): greedy first-match grouping
- Merge (orgdedupe.merge): ranking, field merge rules and strategies
- Engine (orgdedupe.engine): configuration and runners
- Audit (orgdedupe.audit): JSONL event logging
- CLI (orgdedupe.cli): command-line interface
- Public API (orgdedupe.api): file-level convenience functions
"""

__version__ = "0.1.0"
__license__ = "MIT"

from orgdedupe.api import (
    ParseError,
    dedupe,
    merge_files,
    read_records,
    write_jsonl,
    write_records_csv,
    write_report,
)
from orgdedupe.decision import MatchCriterion, Thresholds
from orgdedupe.engine import (
    CrossMergeResult,
    DedupeConfig,
    DedupeResult,
    load_config,
    run_cross_merge,
    run_pipeline,
)
from orgdedupe.errors import ConfigurationError, EmptyInputError
from orgdedupe.models import Record

__all__ = [
    "__version__",
    "__license__",
    "ConfigurationError",
    "CrossMergeResult",
    "DedupeConfig",
    "DedupeResult",
    "EmptyInputError",
    "MatchCriterion",
    "ParseError",
    "Record",
    "Thresholds",
    "dedupe",
    "load_config",
    "merge_files",
    "read_records",
    "run_cross_merge",
    "run_pipeline",
    "write_jsonl",
    "write_records_csv",
    "write_report",
]
