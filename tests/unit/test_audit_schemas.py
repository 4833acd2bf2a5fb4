"""Tests for schema validation of audit events."""

import json
from pathlib import Path

import jsonschema
import pytest

from orgdedupe.audit.logger import AuditLogger
from orgdedupe.engine import DedupeConfig, run_cross_merge, run_pipeline

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load log event JSON schema."""
    with (_SCHEMAS_DIR / "log_event.schema.json").open() as f:
        return json.load(f)


def _validate_log(path: Path, schema: dict) -> int:
    count = 0
    with path.open() as f:
        for line in f:
            if line.strip():
                jsonschema.validate(instance=json.loads(line), schema=schema)
                count += 1
    return count


@pytest.mark.unit
@pytest.mark.parametrize("strategy", ["review", "remove_oldest", "merge"])
def test_pipeline_events_validate(
    mixed_records, tmp_path: Path, event_schema: dict, strategy: str
) -> None:
    """Every event of a blocked pipeline run matches the event schema."""
    log_path = tmp_path / "events.jsonl"
    config = DedupeConfig(strategy=strategy, blockers=["email", "name_prefix"])  # type: ignore[list-item]

    with AuditLogger(run_id="test", log_path=log_path) as logger:
        run_pipeline(mixed_records, config, logger=logger)

    assert _validate_log(log_path, event_schema) > 0


@pytest.mark.unit
def test_cross_merge_events_validate(make_record, tmp_path: Path, event_schema: dict) -> None:
    """Cross-collection events match the event schema."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="test", log_path=log_path) as logger:
        run_cross_merge(
            [make_record("Lope de Vega")],
            [make_record("IES Lope de Vega")],
            logger=logger,
        )

    assert _validate_log(log_path, event_schema) > 0


@pytest.mark.unit
def test_warning_and_error_events_validate(tmp_path: Path, event_schema: dict) -> None:
    """WARN and ERROR level events match the event schema."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="test", log_path=log_path) as logger:
        logger.event("oversized_block", data={"block_size": 3}, level="WARN")
        logger.group_resolution_failed(1, "merge", RuntimeError("boom"), stage="resolution")
        logger.record_error(ValueError("bad"), rid="7")

    assert _validate_log(log_path, event_schema) == 3


@pytest.mark.unit
@pytest.mark.parametrize(
    "event",
    [
        pytest.param({"ts": "x", "run_id": "x"}, id="missing-fields"),
        pytest.param(
            {
                "ts": "2026-01-01T00:00:00Z",
                "run_id": "r",
                "level": "FATAL",
                "event": "e",
                "data": {},
            },
            id="bad-level",
        ),
        pytest.param(
            {
                "ts": "2026-01-01T00:00:00Z",
                "run_id": "r",
                "level": "INFO",
                "event": "e",
                "data": {},
                "extra": 1,
            },
            id="extra-key",
        ),
    ],
)
def test_invalid_events_rejected(event_schema: dict, event: dict) -> None:
    """The schema rejects malformed events."""
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance=event, schema=event_schema)
