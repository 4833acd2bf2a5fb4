"""Candidate pair generation.

A candidate generator decides which record pairs the classifier compares.
The default compares every pair; blocked generators restrict comparisons to
pairs sharing at least one blocking key. Generators never change the order
in which pairs are examined or how records are claimed, only which pairs are
examined at all.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Iterator, Sequence
from itertools import combinations, product

from orgdedupe.audit.logger import AuditLogger
from orgdedupe.audit.models import EventType
from orgdedupe.candidates.blockers import Blocker, BlockerStats
from orgdedupe.models import Record

DEFAULT_MAX_BLOCK_SIZE = 1000
STAGE_NAME = "candidate_generation"

CandidateGenerator = Callable[[Sequence[Record]], Iterable[tuple[int, int]]]
CrossCandidateGenerator = Callable[[Sequence[Record], Sequence[Record]], Iterable[tuple[int, int]]]


def all_pairs(records: Sequence[Record]) -> Iterator[tuple[int, int]]:
    """Yield every pair ``(i, j)`` with ``i < j`` in ascending order."""
    return combinations(range(len(records)), 2)


def all_cross_pairs(
    primary: Sequence[Record],
    secondary: Sequence[Record],
) -> Iterator[tuple[int, int]]:
    """Yield every ``(primary_index, secondary_index)`` pair in order."""
    return product(range(len(primary)), range(len(secondary)))


def blocked_candidates(
    blockers: Sequence[Blocker],
    *,
    logger: AuditLogger | None = None,
    max_block_size: int = DEFAULT_MAX_BLOCK_SIZE,
) -> CandidateGenerator:
    """Build a self-collection generator from *blockers*.

    Parameters
    ----------
    blockers : Sequence[Blocker]
        Blocker plug-ins; a pair is a candidate if any blocker puts both
        records in the same block.
    logger : AuditLogger | None, optional
        Audit logger for per-blocker statistics.
    max_block_size : int, optional
        Log a warning when a block exceeds this size.

    Returns
    -------
    CandidateGenerator
        Callable returning sorted ``(i, j)`` pairs with ``i < j``.

    Raises
    ------
    ValueError
        If *blockers* is empty.
    """
    if not blockers:
        raise ValueError("blocked_candidates requires at least one blocker")
    sorted_blockers = sorted(blockers, key=lambda b: b.name)

    def generate(records: Sequence[Record]) -> list[tuple[int, int]]:
        if logger:
            logger.stage_started(STAGE_NAME, expected_records=len(records))

        pairs: set[tuple[int, int]] = set()
        stats: dict[str, BlockerStats] = {}
        for blocker in sorted_blockers:
            index = _build_index(blocker, records, stats)
            emitted: set[tuple[int, int]] = set()
            for block_key in sorted(index):
                members = sorted(set(index[block_key]))
                size = len(members)
                if not _check_block(blocker, block_key, size, stats, max_block_size, logger):
                    continue
                emitted.update(combinations(members, 2))
            stats[blocker.name].pairs_unique = len(emitted)
            pairs |= emitted

        result = sorted(pairs)
        if logger:
            _log_finished(logger, stats, len(result))
        return result

    return generate


def blocked_cross_candidates(
    blockers: Sequence[Blocker],
    *,
    logger: AuditLogger | None = None,
    max_block_size: int = DEFAULT_MAX_BLOCK_SIZE,
) -> CrossCandidateGenerator:
    """Build a cross-collection generator from *blockers*.

    Returns
    -------
    CrossCandidateGenerator
        Callable returning sorted ``(primary_index, secondary_index)`` pairs
        whose records share at least one blocking key.

    Raises
    ------
    ValueError
        If *blockers* is empty.
    """
    if not blockers:
        raise ValueError("blocked_cross_candidates requires at least one blocker")
    sorted_blockers = sorted(blockers, key=lambda b: b.name)

    def generate(
        primary: Sequence[Record],
        secondary: Sequence[Record],
    ) -> list[tuple[int, int]]:
        if logger:
            logger.stage_started(STAGE_NAME, expected_records=len(primary) + len(secondary))

        pairs: set[tuple[int, int]] = set()
        stats: dict[str, BlockerStats] = {}
        for blocker in sorted_blockers:
            primary_index = _build_index(blocker, primary, stats)
            secondary_index = _build_index(blocker, secondary, stats)
            emitted: set[tuple[int, int]] = set()
            for block_key in sorted(primary_index.keys() & secondary_index.keys()):
                left = sorted(set(primary_index[block_key]))
                right = sorted(set(secondary_index[block_key]))
                size = len(left) + len(right)
                if not _check_block(blocker, block_key, size, stats, max_block_size, logger):
                    continue
                emitted.update(product(left, right))
            stats[blocker.name].pairs_unique = len(emitted)
            pairs |= emitted

        result = sorted(pairs)
        if logger:
            _log_finished(logger, stats, len(result))
        return result

    return generate


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_index(
    blocker: Blocker,
    records: Sequence[Record],
    stats: dict[str, BlockerStats],
) -> dict[str, list[int]]:
    """Build the inverted index ``key -> [position, ...]`` for one blocker."""
    blocker_stats = stats.setdefault(blocker.name, BlockerStats())
    index: dict[str, list[int]] = defaultdict(list)

    for position, record in enumerate(records):
        blocker_stats.records_seen += 1
        keys = list(blocker.block_keys(record))
        if not keys:
            continue
        blocker_stats.records_keyed += 1
        for key in keys:
            index[key].append(position)

    blocker_stats.unique_keys += len(index)
    return index


def _check_block(
    blocker: Blocker,
    block_key: str,
    block_size: int,
    stats: dict[str, BlockerStats],
    max_block_size: int,
    logger: AuditLogger | None,
) -> bool:
    """Update block counters; return whether the block yields pairs."""
    if block_size < 2:
        return False

    blocker_stats = stats[blocker.name]
    blocker_stats.blocks_gt1 += 1
    blocker_stats.max_block = max(blocker_stats.max_block, block_size)

    if block_size > max_block_size and logger:
        logger.event(
            EventType.OVERSIZED_BLOCK,
            data={
                "blocker": blocker.name,
                "block_key": block_key[:100],
                "block_size": block_size,
                "max_block_size": max_block_size,
            },
            level="WARN",
            stage=STAGE_NAME,
        )
    return True


def _log_finished(
    logger: AuditLogger,
    stats: dict[str, BlockerStats],
    pairs_total: int,
) -> None:
    """Flatten per-blocker stats into one stage_finished event."""
    flat: dict[str, int] = {}
    for bname, bstats in stats.items():
        for key, value in bstats.to_dict().items():
            flat[f"{bname}_{key}"] = value
    flat["pairs_total_unique"] = pairs_total
    logger.stage_finished(STAGE_NAME, counters=flat)
