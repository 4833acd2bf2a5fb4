"""Clustering of records into duplicate groups."""

from orgdedupe.clustering.cluster_builder import (
    find_duplicate_groups,
    match_collections,
    score_pair,
)
from orgdedupe.clustering.models import (
    GROUP_FLAG_PREFIX,
    CrossMatch,
    DuplicateGroup,
    GroupMember,
    PairSimilarity,
)

__all__ = [
    "GROUP_FLAG_PREFIX",
    "CrossMatch",
    "DuplicateGroup",
    "GroupMember",
    "PairSimilarity",
    "find_duplicate_groups",
    "match_collections",
    "score_pair",
]
