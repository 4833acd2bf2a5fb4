"""Group records from pairwise duplicate decisions.

Grouping is a greedy first-match pass, not a transitive closure: a record
joins the group of the first unclaimed anchor that matches it directly.
If A matches B and B matches C but A does not match C, scanning A, B, C
yields the group {A, B} and leaves C alone. Results depend only on the
input order and the thresholds.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from itertools import combinations

from orgdedupe.audit.logger import AuditLogger
from orgdedupe.candidates import CandidateGenerator, CrossCandidateGenerator
from orgdedupe.clustering.models import CrossMatch, DuplicateGroup, GroupMember, PairSimilarity
from orgdedupe.decision import (
    MatchCriterion,
    Thresholds,
    center_similarity,
    classify_pair,
    email_similarity,
    location_similarity,
    representative_similarity,
)
from orgdedupe.models import Record

STAGE_NAME = "clustering"
CROSS_STAGE_NAME = "cross_matching"


def score_pair(
    left_index: int,
    right_index: int,
    left: Record,
    right: Record,
    thresholds: Thresholds,
) -> PairSimilarity:
    """Compute the full similarity breakdown for one pair.

    Unlike :func:`classify_pair`, every similarity is evaluated.
    """
    return PairSimilarity(
        left_index=left_index,
        right_index=right_index,
        center=center_similarity(left, right),
        location=location_similarity(left, right),
        email=email_similarity(left, right),
        representative=representative_similarity(left, right),
        criterion=classify_pair(left, right, thresholds).criterion,
    )


def find_duplicate_groups(
    records: Sequence[Record],
    thresholds: Thresholds,
    *,
    candidates: CandidateGenerator | None = None,
    logger: AuditLogger | None = None,
) -> list[DuplicateGroup]:
    """Group duplicates inside one collection.

    Single pass over ``i = 0..n-1``. Claimed records are skipped. Each
    unclaimed ``i`` scans the unclaimed ``j > i`` in ascending order and
    claims every ``j`` it matches.

    Parameters
    ----------
    records : Sequence[Record]
        Input records; positions are used as member indices.
    thresholds : Thresholds
        Classifier thresholds.
    candidates : CandidateGenerator | None, optional
        Restricts which pairs are compared. ``None`` compares every pair.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    list[DuplicateGroup]
        Groups of size >= 2 in discovery order, ids starting at 1.

    Raises
    ------
    ValueError
        If the candidate generator yields an out-of-range or self pair.
    """
    total = len(records)

    neighbours = None
    if candidates is not None:
        neighbours = _neighbour_index(candidates(records), total, total, symmetric=True)

    if logger:
        logger.stage_started(STAGE_NAME, expected_records=total)

    claimed = [False] * total
    groups: list[DuplicateGroup] = []
    comparisons = 0

    for i in range(total):
        if claimed[i]:
            continue

        partners: Iterable[int] = range(i + 1, total) if neighbours is None else neighbours[i]
        members = [GroupMember(i, records[i], MatchCriterion.NONE)]

        for j in partners:
            if claimed[j]:
                continue
            comparisons += 1
            result = classify_pair(records[i], records[j], thresholds)
            if result.is_duplicate:
                members.append(GroupMember(j, records[j], result.criterion))
                claimed[j] = True

        if len(members) < 2:
            continue

        claimed[i] = True
        group = DuplicateGroup(
            group_id=len(groups) + 1,
            members=tuple(members),
            similarities=_group_breakdown(members, thresholds),
        )
        groups.append(group)

        if logger:
            logger.duplicate_group_found(
                group_id=group.group_id,
                indices=list(group.indices),
                criteria=[c.value for c in group.criteria],
                stage=STAGE_NAME,
            )

    if logger:
        logger.stage_finished(
            stage=STAGE_NAME,
            counters={
                "records": total,
                "comparisons": comparisons,
                "groups": len(groups),
                "records_in_groups": sum(g.size for g in groups),
            },
        )

    return groups


def match_collections(
    primary: Sequence[Record],
    secondary: Sequence[Record],
    thresholds: Thresholds,
    *,
    candidates: CrossCandidateGenerator | None = None,
    logger: AuditLogger | None = None,
) -> list[CrossMatch]:
    """Match each primary record against the secondary collection.

    For every primary record, secondary records are scanned in order and
    the scan stops at the first match. Secondary records are never claimed,
    so one secondary record may absorb several primary records.

    Parameters
    ----------
    primary : Sequence[Record]
        Collection whose duplicates are dropped.
    secondary : Sequence[Record]
        Collection whose version is kept.
    thresholds : Thresholds
        Classifier thresholds.
    candidates : CrossCandidateGenerator | None, optional
        Restricts which ``(primary, secondary)`` pairs are compared.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    list[CrossMatch]
        One match per matched primary record, in primary order.
    """

    neighbours = None
    if candidates is not None:
        neighbours = _neighbour_index(
            candidates(primary, secondary), len(primary), len(secondary), symmetric=False
        )

    if logger:
        logger.stage_started(CROSS_STAGE_NAME, expected_records=len(primary) + len(secondary))

    matches: list[CrossMatch] = []
    comparisons = 0

    for i, record in enumerate(primary):
        partners: Iterable[int] = range(len(secondary)) if neighbours is None else neighbours[i]
        for j in partners:
            comparisons += 1
            result = classify_pair(record, secondary[j], thresholds)
            if result.is_duplicate:
                matches.append(CrossMatch(i, j, result))
                break

    if logger:
        logger.stage_finished(
            stage=CROSS_STAGE_NAME,
            counters={
                "primary_records": len(primary),
                "secondary_records": len(secondary),
                "comparisons": comparisons,
                "matches": len(matches),
            },
        )

    return matches


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _group_breakdown(
    members: list[GroupMember],
    thresholds: Thresholds,
) -> tuple[PairSimilarity, ...]:
    """Score every member pair of a group."""
    return tuple(
        score_pair(a.index, b.index, a.record, b.record, thresholds)
        for a, b in combinations(members, 2)
    )


def _neighbour_index(
    pairs: Iterable[tuple[int, int]],
    left_size: int,
    right_size: int,
    *,
    symmetric: bool,
) -> defaultdict[int, list[int]]:
    """Turn candidate pairs into sorted partner lists.

    In symmetric mode each pair is stored under its smaller index, so a
    record only scans partners after itself.
    """
    index: defaultdict[int, set[int]] = defaultdict(set)
    for left, right in pairs:
        if not (0 <= left < left_size and 0 <= right < right_size):
            raise ValueError(f"candidate pair out of range: ({left}, {right})")
        if symmetric:
            if left == right:
                raise ValueError(f"candidate pair pairs a record with itself: {left}")
            left, right = min(left, right), max(left, right)
        index[left].add(right)

    ordered: defaultdict[int, list[int]] = defaultdict(list)
    for key, partners in index.items():
        ordered[key] = sorted(partners)
    return ordered
