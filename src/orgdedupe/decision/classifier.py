"""Multi-criterion duplicate classifier.

Applies the ordered decision rule to a record pair. A single strong signal
(matching email or near-identical center name) is enough; a moderate name
match needs corroborating location evidence, and a repeated representative
needs a similar location.
"""

from orgdedupe.decision.models import (
    MODERATE_NAME_FLOOR,
    REPRESENTATIVE_LOCATION_FLOOR,
    MatchCriterion,
    MatchResult,
    Thresholds,
)
from orgdedupe.models import Record
from orgdedupe.normalize import location_key, normalize_email, normalize_org_name
from orgdedupe.scoring import similarity


def email_similarity(record_a: Record, record_b: Record) -> float:
    """Similarity of normalized emails, 0.0 unless both are present."""
    email_a = normalize_email(record_a.email)
    email_b = normalize_email(record_b.email)
    if not email_a or not email_b:
        return 0.0
    return similarity(email_a, email_b)


def center_similarity(record_a: Record, record_b: Record) -> float:
    """Similarity of normalized center names, 0.0 if either normalizes empty."""
    name_a = normalize_org_name(record_a.center)
    name_b = normalize_org_name(record_b.center)
    if not name_a or not name_b:
        return 0.0
    return similarity(name_a, name_b)


def location_similarity(record_a: Record, record_b: Record) -> float:
    """Similarity of location keys, 0.0 if either record has no location."""
    key_a = location_key(record_a)
    key_b = location_key(record_b)
    if not key_a or not key_b:
        return 0.0
    return similarity(key_a, key_b)


def representative_similarity(record_a: Record, record_b: Record) -> float:
    """Similarity of representatives, 0.0 unless both are present."""
    rep_a = record_a.representative.strip()
    rep_b = record_b.representative.strip()
    if not rep_a or not rep_b:
        return 0.0
    return similarity(rep_a, rep_b)


def classify_pair(
    record_a: Record,
    record_b: Record,
    thresholds: Thresholds,
) -> MatchResult:
    """Classify a record pair as duplicate or distinct.

    Rules, in priority order (first satisfied wins):

    1. ``email_exact``: both emails present and email similarity
       ``>= thresholds.email``.
    2. ``name_match``: center-name similarity ``>= thresholds.center_name``.
    3. ``name_location_match``: center-name similarity in
       ``[0.70, thresholds.center_name)`` and location similarity
       ``>= thresholds.location``.
    4. ``representative_location_match``: both representatives present,
       representative similarity ``>= thresholds.representative`` and
       location similarity ``>= 0.60``.

    Parameters
    ----------
    record_a : Record
        First record.
    record_b : Record
        Second record.
    thresholds : Thresholds
        Similarity thresholds.

    Returns
    -------
    MatchResult
        Decision, criterion and the similarities that were evaluated.
    """
    email_sim: float | None = None
    if record_a.email.strip() and record_b.email.strip():
        email_sim = email_similarity(record_a, record_b)
        if email_sim >= thresholds.email:
            return MatchResult(True, MatchCriterion.EMAIL_EXACT, email_similarity=email_sim)

    center_sim = center_similarity(record_a, record_b)
    if center_sim > 0.0 and center_sim >= thresholds.center_name:
        return MatchResult(
            True,
            MatchCriterion.NAME_MATCH,
            center_similarity=center_sim,
            email_similarity=email_sim,
        )

    location_sim = location_similarity(record_a, record_b)
    if MODERATE_NAME_FLOOR <= center_sim < thresholds.center_name:
        if location_sim >= thresholds.location:
            return MatchResult(
                True,
                MatchCriterion.NAME_LOCATION_MATCH,
                center_similarity=center_sim,
                location_similarity=location_sim,
                email_similarity=email_sim,
            )

    rep_sim: float | None = None
    if record_a.representative.strip() and record_b.representative.strip():
        rep_sim = representative_similarity(record_a, record_b)
        if rep_sim >= thresholds.representative and location_sim >= REPRESENTATIVE_LOCATION_FLOOR:
            return MatchResult(
                True,
                MatchCriterion.REPRESENTATIVE_LOCATION_MATCH,
                center_similarity=center_sim,
                location_similarity=location_sim,
                email_similarity=email_sim,
                representative_similarity=rep_sim,
            )

    return MatchResult(
        False,
        MatchCriterion.NONE,
        center_similarity=center_sim,
        location_similarity=location_sim,
        email_similarity=email_sim,
        representative_similarity=rep_sim,
    )


def are_duplicates(
    record_a: Record,
    record_b: Record,
    thresholds: Thresholds,
) -> tuple[bool, MatchCriterion]:
    """Return the duplicate decision and its criterion for a pair."""
    result = classify_pair(record_a, record_b, thresholds)
    return result.is_duplicate, result.criterion
