"""Candidate pair generation via blocking strategies."""

from orgdedupe.candidates.blockers import (
    Blocker,
    BlockerStats,
    EmailExactBlocker,
    MinHashLSHNameBlocker,
    NamePrefixBlocker,
)
from orgdedupe.candidates.factory import (
    BLOCKER_REGISTRY,
    BlockerConfig,
    create_blocker,
    create_blockers,
)
from orgdedupe.candidates.generator import (
    CandidateGenerator,
    CrossCandidateGenerator,
    all_cross_pairs,
    all_pairs,
    blocked_candidates,
    blocked_cross_candidates,
)

__all__ = [
    # Protocol
    "Blocker",
    "BlockerStats",
    # Blockers
    "EmailExactBlocker",
    "NamePrefixBlocker",
    "MinHashLSHNameBlocker",
    # Factory
    "BLOCKER_REGISTRY",
    "BlockerConfig",
    "create_blocker",
    "create_blockers",
    # Generators
    "CandidateGenerator",
    "CrossCandidateGenerator",
    "all_cross_pairs",
    "all_pairs",
    "blocked_candidates",
    "blocked_cross_candidates",
]
