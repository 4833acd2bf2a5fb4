"""Pairwise string similarity scoring."""

from orgdedupe.scoring.similarity import levenshtein_distance, similarity

__all__ = [
    "levenshtein_distance",
    "similarity",
]
