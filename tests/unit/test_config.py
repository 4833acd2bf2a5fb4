"""Tests for run configuration loading and validation."""

import json
from pathlib import Path

import pytest

from orgdedupe.candidates import BlockerConfig
from orgdedupe.decision import Thresholds
from orgdedupe.engine import DedupeConfig, load_config
from orgdedupe.errors import ConfigurationError


@pytest.mark.unit
def test_defaults() -> None:
    """Default config: review, default thresholds, exhaustive pairs."""
    config = DedupeConfig()

    assert config.strategy == "review"
    assert config.thresholds == Thresholds()
    assert config.blockers is None
    assert config.standardize_regions is False


@pytest.mark.unit
def test_nested_values_are_coerced() -> None:
    """Threshold mappings and blocker names become typed values."""
    config = DedupeConfig(thresholds={"centerName": 0.9}, blockers=["email"])  # type: ignore[arg-type]

    assert config.thresholds.center_name == 0.9
    assert config.blockers == [BlockerConfig(type="email")]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("kwargs", "option"),
    [
        pytest.param({"strategy": "keep_all"}, "strategy", id="strategy"),
        pytest.param({"blockers": ["phone"]}, "blockers", id="blocker"),
        pytest.param({"thresholds": {"email": 3}}, "email", id="threshold"),
        pytest.param({"thresholds": 0.5}, "thresholds", id="thresholds-type"),
    ],
)
def test_invalid_values_rejected(kwargs, option: str) -> None:
    """Invalid settings raise ConfigurationError naming the option."""
    with pytest.raises(ConfigurationError) as exc_info:
        DedupeConfig(**kwargs)

    assert exc_info.value.option == option


@pytest.mark.unit
def test_from_dict_full() -> None:
    """A complete mapping is validated and converted."""
    config = DedupeConfig.from_dict(
        {
            "thresholds": {"center_name": 0.8, "location": 0.75},
            "strategy": "merge",
            "blockers": ["email", {"type": "name_prefix", "params": {"prefix_len": 4}}],
            "standardize_regions": True,
        }
    )

    assert config.thresholds.location == 0.75
    assert config.strategy == "merge"
    assert [b.type for b in config.blockers or []] == ["email", "name_prefix"]
    assert config.standardize_regions is True


@pytest.mark.unit
@pytest.mark.parametrize(
    ("data", "option"),
    [
        pytest.param({"thresholds": {"email": 2}}, "thresholds.email", id="out-of-range"),
        pytest.param({"thresholds": {"phone": 0.5}}, "thresholds", id="unknown-threshold"),
        pytest.param({"strategy": "keep_all"}, "strategy", id="unknown-strategy"),
        pytest.param({"blockers": [{"enabled": True}]}, "blockers.0", id="blocker-without-type"),
        pytest.param({"colour": "blue"}, None, id="unknown-key"),
    ],
)
def test_from_dict_schema_errors(data, option) -> None:
    """Schema violations are reported as configuration errors."""
    with pytest.raises(ConfigurationError, match="Invalid configuration") as exc_info:
        DedupeConfig.from_dict(data)

    assert exc_info.value.option == option


@pytest.mark.unit
def test_to_dict_round_trip() -> None:
    """to_dict output is itself a valid configuration."""
    config = DedupeConfig(strategy="remove_oldest", blockers=["name_prefix"])  # type: ignore[list-item]

    assert DedupeConfig.from_dict(config.to_dict()) == config


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_load_config(tmp_path: Path) -> None:
    """JSON files are loaded through from_dict."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"strategy": "merge", "thresholds": {"centerName": 0.9}}))

    config = load_config(path)

    assert config.strategy == "merge"
    assert config.thresholds.center_name == 0.9


@pytest.mark.unit
@pytest.mark.parametrize(
    ("content", "message"),
    [
        pytest.param("{not json", "Invalid JSON", id="malformed"),
        pytest.param("[1, 2]", "must contain a JSON object", id="array"),
    ],
)
def test_load_config_rejects_bad_files(tmp_path: Path, content: str, message: str) -> None:
    """Unreadable configs raise ConfigurationError."""
    path = tmp_path / "config.json"
    path.write_text(content)

    with pytest.raises(ConfigurationError, match=message):
        load_config(path)


@pytest.mark.unit
def test_load_config_missing_file(tmp_path: Path) -> None:
    """A missing file is a FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.json")
