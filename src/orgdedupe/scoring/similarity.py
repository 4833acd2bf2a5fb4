"""Normalized edit-distance similarity.

Pure, deterministic string comparison used by the match classifier. This is
the hot path of a run: every classified pair calls :func:`similarity` up to
four times.
"""


def levenshtein_distance(left: str, right: str) -> int:
    """Compute the Levenshtein edit distance between two strings.

    Insertion, deletion and substitution each cost 1. Uses the standard
    dynamic-programming table, keeping one row at a time.

    Parameters
    ----------
    left : str
        First string.
    right : str
        Second string.

    Returns
    -------
    int
        Minimum number of edits turning *left* into *right*.
    """
    if left == right:
        return 0
    if not left:
        return len(right)
    if not right:
        return len(left)

    prev = list(range(len(right) + 1))
    for i, c1 in enumerate(left, start=1):
        curr = [i]
        for j, c2 in enumerate(right, start=1):
            cost = 0 if c1 == c2 else 1
            curr.append(min(curr[j - 1] + 1, prev[j] + 1, prev[j - 1] + cost))
        prev = curr
    return prev[-1]


def similarity(left: str | None, right: str | None) -> float:
    """Normalized Levenshtein similarity in [0, 1].

    Both inputs are case-folded and trimmed before comparison.

    Parameters
    ----------
    left : str | None
        First string.
    right : str | None
        Second string.

    Returns
    -------
    float
        ``(max_len - distance) / max_len``; 1.0 when both are empty, 0.0 when
        exactly one is empty.

    Notes
    -----
    Symmetric: ``similarity(a, b) == similarity(b, a)``.
    """
    a = (left or "").casefold().strip()
    b = (right or "").casefold().strip()

    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    max_len = max(len(a), len(b))
    return (max_len - levenshtein_distance(a, b)) / max_len
