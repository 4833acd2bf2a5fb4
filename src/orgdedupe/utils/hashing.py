"""Content hashes for report files."""

import hashlib
from pathlib import Path

__all__ = [
    "calculate_file_sha256",
    "fingerprint_file",
    "format_sha256",
]


def format_sha256(hex_digest: str) -> str:
    """Prefix a hex digest with ``sha256:``."""
    return f"sha256:{hex_digest}"


def calculate_file_sha256(path: Path) -> str:
    """Return the prefixed SHA256 of a file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    with path.open("rb") as f:
        return format_sha256(hashlib.file_digest(f, "sha256").hexdigest())


def fingerprint_file(path: Path) -> tuple[str, int]:
    """Return ``(sha256, size_in_bytes)`` for an ``artifact_written`` event."""
    return calculate_file_sha256(path), path.stat().st_size
