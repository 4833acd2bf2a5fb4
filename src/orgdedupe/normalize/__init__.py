"""Text normalization for duplicate detection.

All functions are total: absent or non-string input yields ``""``.
"""

from orgdedupe.normalize.keys import LOCATION_FIELDS, location_key
from orgdedupe.normalize.regions import OFFICIAL_REGIONS, is_known_region, standardize_region
from orgdedupe.normalize.text import (
    LOCATION_SEPARATOR,
    ORG_ABBREVIATIONS,
    ORG_GENERIC_WORDS,
    clean,
    normalize_email,
    normalize_org_name,
)

__all__ = [
    "LOCATION_FIELDS",
    "LOCATION_SEPARATOR",
    "OFFICIAL_REGIONS",
    "ORG_ABBREVIATIONS",
    "ORG_GENERIC_WORDS",
    "clean",
    "is_known_region",
    "location_key",
    "normalize_email",
    "normalize_org_name",
    "standardize_region",
]
