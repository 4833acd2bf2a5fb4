"""Data models for the match classifier.

This module defines the match criteria, the threshold configuration and the
per-pair classification result.
"""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any

from orgdedupe.errors import ConfigurationError

# Name similarity floor for the name + location rule
MODERATE_NAME_FLOOR = 0.70

# Location similarity floor for the representative + location rule
REPRESENTATIVE_LOCATION_FLOOR = 0.60


class MatchCriterion(StrEnum):
    """Rule that justified a duplicate decision.

    Attributes
    ----------
    EMAIL_EXACT : str
        Both emails present and (near) identical.
    NAME_MATCH : str
        Normalized center names above the center-name threshold.
    NAME_LOCATION_MATCH : str
        Moderate name similarity corroborated by location.
    REPRESENTATIVE_LOCATION_MATCH : str
        Same representative in a similar location.
    NONE : str
        No rule satisfied.
    """

    EMAIL_EXACT = "email_exact"
    NAME_MATCH = "name_match"
    NAME_LOCATION_MATCH = "name_location_match"
    REPRESENTATIVE_LOCATION_MATCH = "representative_location_match"
    NONE = "none"


@dataclass(frozen=True)
class Thresholds:
    """Similarity thresholds for the match classifier.

    Attributes
    ----------
    center_name : float
        Normalized center-name similarity for a match on name alone.
    location : float
        Location-key similarity required to corroborate a moderate name match.
    email : float
        Normalized email similarity for an email match (strictest).
    representative : float
        Representative-name similarity for the representative rule.

    Raises
    ------
    ConfigurationError
        If any threshold lies outside [0, 1].
    """

    center_name: float = 0.85
    location: float = 0.80
    email: float = 0.95
    representative: float = 0.90

    def __post_init__(self) -> None:
        """Validate threshold ranges."""
        for name, value in asdict(self).items():
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise ConfigurationError(
                    f"threshold {name} must be a number, got {value!r}", option=name
                )
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(
                    f"threshold {name} must be in [0, 1], got {value}", option=name
                )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Thresholds":
        """Build thresholds from a mapping.

        Accepts both snake_case keys and the camelCase ``centerName`` used by
        older configuration files. Missing keys keep their defaults.

        Parameters
        ----------
        data : dict[str, Any]
            Threshold mapping.

        Returns
        -------
        Thresholds
            Validated thresholds.

        Raises
        ------
        ConfigurationError
            If a key is unknown or a value is out of range.
        """
        aliases = {"centerName": "center_name"}
        values: dict[str, Any] = {}
        known = set(asdict(cls()))
        for key, value in data.items():
            name = aliases.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown threshold: {key!r}", option=key)
            values[name] = value
        return cls(**values)

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of classifying one record pair.

    Attributes
    ----------
    is_duplicate : bool
        Whether the pair is considered a duplicate.
    criterion : MatchCriterion
        First rule satisfied, ``NONE`` otherwise.
    center_similarity : float | None
        Similarity of normalized center names (0.0 if either is empty).
    location_similarity : float | None
        Similarity of location keys (0.0 if either key is empty).
    email_similarity : float | None
        Similarity of normalized emails (0.0 unless both present).
    representative_similarity : float | None
        Similarity of representatives (0.0 unless both present).

    Notes
    -----
    Rules are evaluated lazily; a similarity the decision never needed is
    left as ``None``.
    """

    is_duplicate: bool
    criterion: MatchCriterion
    center_similarity: float | None = None
    location_similarity: float | None = None
    email_similarity: float | None = None
    representative_similarity: float | None = None

    def __bool__(self) -> bool:
        """Truthiness follows the duplicate decision."""
        return self.is_duplicate

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["criterion"] = self.criterion.value
        return data
