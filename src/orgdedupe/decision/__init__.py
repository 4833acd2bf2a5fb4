"""Pairwise duplicate classification."""

from orgdedupe.decision.classifier import (
    are_duplicates,
    center_similarity,
    classify_pair,
    email_similarity,
    location_similarity,
    representative_similarity,
)
from orgdedupe.decision.models import (
    MODERATE_NAME_FLOOR,
    REPRESENTATIVE_LOCATION_FLOOR,
    MatchCriterion,
    MatchResult,
    Thresholds,
)

__all__ = [
    "MODERATE_NAME_FLOOR",
    "REPRESENTATIVE_LOCATION_FLOOR",
    "MatchCriterion",
    "MatchResult",
    "Thresholds",
    "are_duplicates",
    "center_similarity",
    "classify_pair",
    "email_similarity",
    "location_similarity",
    "representative_similarity",
]
