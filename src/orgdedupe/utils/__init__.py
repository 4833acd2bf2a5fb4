"""Common utility functions for orgdedupe."""

from orgdedupe.utils.hashing import calculate_file_sha256, fingerprint_file, format_sha256
from orgdedupe.utils.timestamps import get_iso_timestamp

__all__ = [
    "calculate_file_sha256",
    "fingerprint_file",
    "format_sha256",
    "get_iso_timestamp",
]
