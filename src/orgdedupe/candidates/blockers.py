"""Blocker plug-ins for candidate generation.

Each blocker maps records to block keys. Records sharing a key become
candidate pairs. Blocking trades recall for speed: pairs that share no key
are never compared, so blockers are opt-in and the default generator
compares every pair.

Architecture
------------
* ``Blocker``: structural protocol (two attributes + one method).
* Pure functions for hashing / shingling (no hidden state).
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Protocol, runtime_checkable

from orgdedupe.models import Record
from orgdedupe.normalize import normalize_email, normalize_org_name

try:
    from datasketch import MinHash
except ImportError:  # pragma: no cover
    MinHash = None


# ============================================================================
# Constants
# ============================================================================

NAME_PREFIX_LEN = 5

MINHASH_NUM_PERM = 64
MINHASH_BANDS = 16
MINHASH_SHINGLE_SIZE = 3
MINHASH_MIN_SHINGLES = 3
MINHASH_SEED = 42


# ============================================================================
# Statistics
# ============================================================================


@dataclass
class BlockerStats:
    """Counters collected while running a single blocker.

    Attributes
    ----------
    records_seen : int
        Total records processed.
    records_keyed : int
        Records that produced at least one blocking key.
    unique_keys : int
        Distinct blocking keys generated.
    blocks_gt1 : int
        Blocks containing two or more records.
    pairs_unique : int
        Unique pairs emitted by this blocker.
    max_block : int
        Largest block size encountered.
    """

    records_seen: int = 0
    records_keyed: int = 0
    unique_keys: int = 0
    blocks_gt1: int = 0
    pairs_unique: int = 0
    max_block: int = 0

    def to_dict(self) -> dict[str, int]:
        """Serialise to a plain dict."""
        return asdict(self)


# ============================================================================
# Protocol
# ============================================================================


@runtime_checkable
class Blocker(Protocol):
    """Structural protocol every blocker must satisfy.

    Attributes
    ----------
    name : str
        Stable identifier used in audit logs.
    match_key : str
        Semantic label for the field(s) this blocker relies on.
    """

    name: str
    match_key: str

    def block_keys(self, record: Record) -> Iterable[str]:
        """Yield zero or more blocking keys for *record*.

        Returns an empty iterable when the record lacks the data this
        blocker needs.
        """
        ...


# ============================================================================
# Pure helpers
# ============================================================================


def _char_shingles(text: str, size: int = MINHASH_SHINGLE_SIZE) -> list[str]:
    """Character n-grams of *text* with spaces removed."""
    compact = text.replace(" ", "")
    if len(compact) < size:
        return [compact] if compact else []
    return [compact[i : i + size] for i in range(len(compact) - size + 1)]


# ============================================================================
# Exact-match blockers
# ============================================================================


class EmailExactBlocker:
    """Block by normalised email."""

    name: str = "email_exact"
    match_key: str = "email"

    def block_keys(self, record: Record) -> Iterable[str]:
        """Yield the normalised email if present."""
        email = normalize_email(record.email)
        if email:
            yield email


class NamePrefixBlocker:
    """Block by the leading characters of the normalised center name.

    Attributes
    ----------
    prefix_len : int
        Number of leading characters (spaces removed) used as key.
    """

    name: str = "name_prefix"
    match_key: str = "center"

    def __init__(self, prefix_len: int = NAME_PREFIX_LEN) -> None:
        if prefix_len < 1:
            raise ValueError(f"prefix_len must be >= 1, got {prefix_len}")
        self.prefix_len = prefix_len

    def block_keys(self, record: Record) -> Iterable[str]:
        """Yield the name prefix if the normalised name is non-empty."""
        compact = normalize_org_name(record.center).replace(" ", "")
        if compact:
            yield f"np:{compact[: self.prefix_len]}"


# ============================================================================
# Lexical / fuzzy blockers
# ============================================================================


class MinHashLSHNameBlocker:
    """LSH banding over MinHash signatures of center-name shingles.

    Attributes
    ----------
    num_perm : int
        Number of MinHash permutations.
    bands : int
        Number of LSH bands.
    min_shingles : int
        Minimum shingle count to produce keys.
    """

    name: str = "minhash_lsh_name"
    match_key: str = "center"

    def __init__(
        self,
        num_perm: int = MINHASH_NUM_PERM,
        bands: int = MINHASH_BANDS,
        min_shingles: int = MINHASH_MIN_SHINGLES,
    ) -> None:
        if MinHash is None:
            raise ImportError(
                "datasketch is required for MinHashLSHNameBlocker. "
                "Install with: pip install 'orgdedupe[lsh]'"
            )
        if bands < 1 or num_perm % bands:
            raise ValueError(f"num_perm ({num_perm}) must be a multiple of bands ({bands})")
        self.num_perm = num_perm
        self.bands = bands
        self.rows_per_band = num_perm // bands
        self.min_shingles = min_shingles

    def block_keys(self, record: Record) -> Iterable[str]:
        """Yield one band-hash key per LSH band."""
        shingles = _char_shingles(normalize_org_name(record.center))
        if len(shingles) < self.min_shingles:
            return

        mh = MinHash(num_perm=self.num_perm, seed=MINHASH_SEED)
        for shingle in shingles:
            mh.update(shingle.encode("utf-8"))

        hv = mh.hashvalues
        for band in range(self.bands):
            start = band * self.rows_per_band
            band_bytes = ",".join(map(str, hv[start : start + self.rows_per_band]))
            band_hash = hashlib.sha256(band_bytes.encode("utf-8")).hexdigest()[:16]
            yield f"mh:b{band}:{band_hash}"
