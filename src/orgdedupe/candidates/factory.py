"""Registry-based factory for blocker instantiation.

New blocker types are added by extending ``BLOCKER_REGISTRY``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from orgdedupe.candidates.blockers import (
    Blocker,
    EmailExactBlocker,
    MinHashLSHNameBlocker,
    NamePrefixBlocker,
)
from orgdedupe.errors import ConfigurationError

# type → callable that returns a Blocker
BLOCKER_REGISTRY: dict[str, type] = {
    "email": EmailExactBlocker,
    "name_prefix": NamePrefixBlocker,
    "minhash": MinHashLSHNameBlocker,
}


@dataclass(frozen=True)
class BlockerConfig:
    """Declarative configuration for a single blocker.

    Attributes
    ----------
    type : str
        Key in ``BLOCKER_REGISTRY``.
    enabled : bool
        Disabled configs are skipped by ``create_blockers``.
    params : dict[str, Any]
        Keyword arguments forwarded to the blocker constructor.
    """

    type: str
    enabled: bool = True
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_value(cls, value: "str | dict[str, Any] | BlockerConfig") -> "BlockerConfig":
        """Coerce a blocker name, mapping or config into a ``BlockerConfig``."""
        if isinstance(value, BlockerConfig):
            return value
        if isinstance(value, str):
            return cls(type=value)
        if isinstance(value, dict) and "type" in value:
            return cls(
                type=value["type"],
                enabled=value.get("enabled", True),
                params=dict(value.get("params", {})),
            )
        raise ConfigurationError(f"Invalid blocker configuration: {value!r}", option="blockers")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"type": self.type, "enabled": self.enabled, "params": dict(self.params)}


def create_blocker(config: BlockerConfig) -> Blocker:
    """Instantiate a single blocker from *config*.

    Parameters
    ----------
    config : BlockerConfig
        Blocker specification.

    Returns
    -------
    Blocker
        Ready-to-use blocker instance.

    Raises
    ------
    ConfigurationError
        If ``config.type`` is not in the registry or its parameters are
        rejected by the blocker.
    """
    cls = BLOCKER_REGISTRY.get(config.type)
    if cls is None:
        valid = ", ".join(sorted(BLOCKER_REGISTRY))
        raise ConfigurationError(
            f"Unknown blocker type: {config.type!r}. Valid types: {valid}", option="blockers"
        )
    try:
        return cls(**config.params)  # type: ignore[no-any-return]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid parameters for blocker {config.type!r}: {exc}", option="blockers"
        ) from exc


def create_blockers(
    configs: Sequence["str | dict[str, Any] | BlockerConfig"],
) -> list[Blocker]:
    """Instantiate all *enabled* blockers.

    Parameters
    ----------
    configs : Sequence[str | dict[str, Any] | BlockerConfig]
        Registry names, mappings or blocker configs. Disabled entries are
        filtered out.

    Returns
    -------
    list[Blocker]
        Instantiated blockers.
    """
    parsed = [BlockerConfig.from_value(cfg) for cfg in configs]
    return [create_blocker(cfg) for cfg in parsed if cfg.enabled]
