"""Run configuration and result dataclasses."""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from orgdedupe.candidates import BLOCKER_REGISTRY, BlockerConfig
from orgdedupe.clustering import CrossMatch, DuplicateGroup
from orgdedupe.decision import Thresholds
from orgdedupe.errors import ConfigurationError
from orgdedupe.merge import STRATEGY_REGISTRY, MergeAction
from orgdedupe.models import Record

DEFAULT_STRATEGY = "review"
CROSS_STRATEGY = "keep_secondary"

_UNIT_INTERVAL: dict[str, Any] = {"type": "number", "minimum": 0, "maximum": 1}

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "orgdedupe configuration",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "thresholds": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "center_name": _UNIT_INTERVAL,
                "centerName": _UNIT_INTERVAL,
                "location": _UNIT_INTERVAL,
                "email": _UNIT_INTERVAL,
                "representative": _UNIT_INTERVAL,
            },
        },
        "strategy": {"type": "string", "enum": sorted(STRATEGY_REGISTRY)},
        "blockers": {
            "type": ["array", "null"],
            "items": {
                "anyOf": [
                    {"type": "string", "enum": sorted(BLOCKER_REGISTRY)},
                    {
                        "type": "object",
                        "additionalProperties": False,
                        "required": ["type"],
                        "properties": {
                            "type": {"type": "string", "enum": sorted(BLOCKER_REGISTRY)},
                            "enabled": {"type": "boolean"},
                            "params": {"type": "object"},
                        },
                    },
                ]
            },
        },
        "standardize_regions": {"type": "boolean"},
    },
}


@dataclass
class DedupeConfig:
    """Configuration for a deduplication run.

    Attributes
    ----------
    thresholds : Thresholds
        Classifier thresholds. A mapping is converted with
        :meth:`Thresholds.from_dict`.
    strategy : str
        Resolution strategy: ``review``, ``remove_oldest``,
        ``remove_newest`` or ``merge``.
    blockers : list[BlockerConfig] | None
        Blockers restricting compared pairs. ``None`` compares every pair.
        Names and mappings are converted to :class:`BlockerConfig`.
    standardize_regions : bool
        Map region spelling variants to official names before matching.

    Raises
    ------
    ConfigurationError
        If a threshold, the strategy or a blocker type is invalid.
    """

    thresholds: Thresholds = field(default_factory=Thresholds)
    strategy: str = DEFAULT_STRATEGY
    blockers: list[BlockerConfig] | None = None
    standardize_regions: bool = False

    def __post_init__(self) -> None:
        """Coerce nested values and validate."""
        if isinstance(self.thresholds, dict):
            self.thresholds = Thresholds.from_dict(self.thresholds)
        if not isinstance(self.thresholds, Thresholds):
            raise ConfigurationError(
                f"thresholds must be Thresholds or a mapping, got {type(self.thresholds).__name__}",
                option="thresholds",
            )

        if self.strategy not in STRATEGY_REGISTRY:
            valid = ", ".join(sorted(STRATEGY_REGISTRY))
            raise ConfigurationError(
                f"Unknown strategy: {self.strategy!r}. Valid strategies: {valid}",
                option="strategy",
            )

        if self.blockers is not None:
            self.blockers = [BlockerConfig.from_value(b) for b in self.blockers]
            for blocker in self.blockers:
                if blocker.type not in BLOCKER_REGISTRY:
                    valid = ", ".join(sorted(BLOCKER_REGISTRY))
                    raise ConfigurationError(
                        f"Unknown blocker type: {blocker.type!r}. Valid types: {valid}",
                        option="blockers",
                    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DedupeConfig":
        """Build a configuration from a JSON-like mapping.

        The mapping is validated against :data:`CONFIG_SCHEMA` first.

        Parameters
        ----------
        data : dict[str, Any]
            Configuration mapping.

        Returns
        -------
        DedupeConfig
            Validated configuration.

        Raises
        ------
        ConfigurationError
            If the mapping fails schema or value validation.
        """
        try:
            jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            option = ".".join(str(p) for p in e.absolute_path) or None
            raise ConfigurationError(f"Invalid configuration: {e.message}", option=option) from e

        return cls(
            thresholds=Thresholds.from_dict(data.get("thresholds", {})),
            strategy=data.get("strategy", DEFAULT_STRATEGY),
            blockers=data.get("blockers"),
            standardize_regions=data.get("standardize_regions", False),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "thresholds": self.thresholds.to_dict(),
            "strategy": self.strategy,
            "blockers": None if self.blockers is None else [b.to_dict() for b in self.blockers],
            "standardize_regions": self.standardize_regions,
        }


def load_config(path: Path | str) -> DedupeConfig:
    """Load and validate a JSON configuration file.

    Parameters
    ----------
    path : Path | str
        Path to the JSON file.

    Returns
    -------
    DedupeConfig
        Validated configuration.

    Raises
    ------
    ConfigurationError
        If the file is not valid JSON or fails validation.
    FileNotFoundError
        If the file does not exist.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return DedupeConfig.from_dict(data)


@dataclass
class DedupeSummary:
    """Run statistics.

    Attributes
    ----------
    records_in : int
        Records received.
    records_out : int
        Records in the processed collection.
    groups_found : int
        Duplicate groups found.
    records_in_groups : int
        Records belonging to any group.
    records_removed : int
        Records dropped by the strategy.
    strategy : str
        Strategy applied.
    thresholds : dict[str, float]
        Thresholds used.
    records_by_region : dict[str, int]
        Processed records per region, ``""`` for records without one.
    """

    records_in: int = 0
    records_out: int = 0
    groups_found: int = 0
    records_in_groups: int = 0
    records_removed: int = 0
    strategy: str = DEFAULT_STRATEGY
    thresholds: dict[str, float] = field(default_factory=dict)
    records_by_region: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


@dataclass
class DedupeResult:
    """Output of a self-collection run.

    Attributes
    ----------
    processed_records : list[Record]
        Resolved collection in input order.
    duplicate_groups : list[DuplicateGroup]
        Groups in discovery order.
    actions : list[MergeAction]
        Actions in group order.
    summary : DedupeSummary
        Run statistics.
    """

    processed_records: list[Record]
    duplicate_groups: list[DuplicateGroup]
    actions: list[MergeAction]
    summary: DedupeSummary

    def to_dict(self) -> dict[str, Any]:
        """Convert groups, actions and summary to dictionaries."""
        return {
            "summary": self.summary.to_dict(),
            "duplicate_groups": [g.to_dict() for g in self.duplicate_groups],
            "actions": [a.to_dict() for a in self.actions],
        }


@dataclass
class CrossMergeResult(DedupeResult):
    """Output of a cross-collection run.

    Group members and action indices are positions in the combined
    sequence ``secondary + primary``, which is also the order the output
    starts from.

    Attributes
    ----------
    matches : list[CrossMatch]
        First match of every matched primary record, in primary order.
    """

    matches: list[CrossMatch] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert groups, matches, actions and summary to dictionaries."""
        data = super().to_dict()
        data["matches"] = [m.to_dict() for m in self.matches]
        return data
