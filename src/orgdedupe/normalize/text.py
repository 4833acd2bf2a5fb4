"""Text normalization for comparison and cleaning.

Compiled patterns and pure functions used by every comparison in the
engine. Normalized forms are used for matching only, never for display.
"""

import re
from typing import Any

# Pre-compiled regex patterns
INVISIBLE_RE = re.compile("[\u2060\u200b-\u200d\ufeff]")
WHITESPACE_RE = re.compile(r"\s+")
PUNCT_RE = re.compile(r"[^\w\s]")

# Institution-type abbreviations found in center names
ORG_ABBREVIATIONS: tuple[str, ...] = (
    "ies",
    "ceip",
    "cep",
    "cee",
    "ieso",
    "cifp",
    "cpifp",
    "cea",
)

# Generic institution words
ORG_GENERIC_WORDS: tuple[str, ...] = (
    "instituto",
    "colegio",
    "centro",
    "escuela",
)

ORG_BOILERPLATE_RE = re.compile(
    r"\b(?:" + "|".join(ORG_ABBREVIATIONS + ORG_GENERIC_WORDS) + r")\b"
)

LOCATION_SEPARATOR = " | "


def clean(text: Any) -> str:
    """Strip invisible characters and canonicalize whitespace.

    Removes the word joiner, the zero-width space family and the BOM, turns
    non-breaking spaces into ordinary spaces, collapses whitespace runs and
    trims.

    Parameters
    ----------
    text : Any
        Raw cell value.

    Returns
    -------
    str
        Cleaned text, ``""`` for non-string or empty input.
    """
    if not text or not isinstance(text, str):
        return ""
    text = INVISIBLE_RE.sub("", text)
    text = text.replace("\u00a0", " ")
    return WHITESPACE_RE.sub(" ", text).strip()


def normalize_org_name(name: Any) -> str:
    """Normalize a center/organization name for similarity comparison.

    Lowercases, removes institution abbreviations and generic institution
    words (whole words only), turns punctuation into spaces and collapses
    whitespace.

    Parameters
    ----------
    name : Any
        Raw center name.

    Returns
    -------
    str
        Comparison key, possibly empty.

    Examples
    --------
        >>> normalize_org_name("IES Lope de Vega")
        'lope de vega'
    """
    if not name or not isinstance(name, str):
        return ""
    text = name.lower()
    text = ORG_BOILERPLATE_RE.sub("", text)
    text = PUNCT_RE.sub(" ", text)
    return WHITESPACE_RE.sub(" ", text).strip()


def normalize_email(email: Any) -> str:
    """Lowercase and trim an email address. No validation."""
    if not email or not isinstance(email, str):
        return ""
    return email.lower().strip()
