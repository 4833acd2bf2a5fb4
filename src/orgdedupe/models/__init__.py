"""Shared data types for orgdedupe.

Domain-specific types live closer to their consumers:
- Match types → orgdedupe.decision.models
- Group types → orgdedupe.clustering.models
- Action types → orgdedupe.merge.models
"""

from orgdedupe.models.records import RECORD_FIELDS, REVIEW_FIELDS, Record

__all__ = [
    "RECORD_FIELDS",
    "REVIEW_FIELDS",
    "Record",
]
