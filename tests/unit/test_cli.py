"""Tests for CLI module."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from orgdedupe.cli.main import STRATEGIES, cli
from orgdedupe.merge import STRATEGY_REGISTRY


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "orgdedupe" in result.output


@pytest.mark.unit
def test_cli_help(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "dedupe" in result.output
    assert "merge" in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# dedupe command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_dedupe_help(runner: CliRunner) -> None:
    """Test dedupe command help lists the strategies."""
    result = runner.invoke(cli, ["dedupe", "--help"])

    assert result.exit_code == 0
    assert "remove_oldest" in result.output
    assert "--threshold" in result.output


@pytest.mark.unit
def test_strategy_choices_follow_registry(runner: CliRunner) -> None:
    """Every registered strategy is accepted by --strategy."""
    result = runner.invoke(cli, ["dedupe", "--help"])

    assert set(STRATEGIES) == set(STRATEGY_REGISTRY)
    assert all(name in result.output for name in STRATEGY_REGISTRY)


@pytest.mark.unit
def test_dedupe_nonexistent_file(runner: CliRunner) -> None:
    """Test dedupe with a missing input file fails."""
    result = runner.invoke(cli, ["dedupe", "/nonexistent/file.csv"])

    assert result.exit_code != 0


@pytest.mark.unit
def test_dedupe_execution(runner: CliRunner, sample_csv_file: Path, tmp_path: Path) -> None:
    """Test dedupe writes the report and prints a summary line."""
    out = tmp_path / "out"

    result = runner.invoke(cli, ["dedupe", str(sample_csv_file), "-o", str(out), "-s", "merge"])

    assert result.exit_code == 0
    assert "Processed 7 records: 3 duplicate groups, 4 records written" in result.output
    assert (out / "records.csv").exists()
    summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
    assert summary["strategy"] == "merge"


@pytest.mark.unit
def test_dedupe_threshold_override(
    runner: CliRunner, sample_csv_file: Path, tmp_path: Path
) -> None:
    """Test -t overrides reach the classifier."""
    out = tmp_path / "out"

    result = runner.invoke(
        cli,
        ["dedupe", str(sample_csv_file), "-o", str(out), "-t", "location=0.99"],
    )

    assert result.exit_code == 0
    summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
    assert summary["thresholds"]["location"] == 0.99
    assert summary["groups_found"] == 2


@pytest.mark.unit
@pytest.mark.parametrize(
    "threshold",
    [
        pytest.param("center_name", id="missing-value"),
        pytest.param("center_name=high", id="not-a-number"),
    ],
)
def test_dedupe_bad_threshold_syntax(
    runner: CliRunner, sample_csv_file: Path, threshold: str
) -> None:
    """Test malformed -t values are usage errors."""
    result = runner.invoke(cli, ["dedupe", str(sample_csv_file), "-t", threshold])

    assert result.exit_code == 2


@pytest.mark.unit
def test_dedupe_invalid_threshold_value(
    runner: CliRunner, sample_csv_file: Path, tmp_path: Path
) -> None:
    """Test out-of-range thresholds fail with exit code 1."""
    result = runner.invoke(
        cli,
        ["dedupe", str(sample_csv_file), "-o", str(tmp_path / "out"), "-t", "email=1.5"],
    )

    assert result.exit_code == 1
    assert "Error" in result.output


@pytest.mark.unit
def test_dedupe_with_config_and_blockers(
    runner: CliRunner, sample_csv_file: Path, tmp_path: Path
) -> None:
    """Test config file values combine with --blockers."""
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"strategy": "remove_newest"}), encoding="utf-8")
    out = tmp_path / "out"

    result = runner.invoke(
        cli,
        [
            "dedupe",
            str(sample_csv_file),
            "-o",
            str(out),
            "--config",
            str(config),
            "--blockers",
            "email",
        ],
    )

    assert result.exit_code == 0
    summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
    assert summary["strategy"] == "remove_newest"
    assert summary["groups_found"] == 1


@pytest.mark.unit
def test_dedupe_writes_audit_log(runner: CliRunner, sample_csv_file: Path, tmp_path: Path) -> None:
    """Test --log writes JSONL audit events."""
    log_path = tmp_path / "logs" / "events.jsonl"

    result = runner.invoke(
        cli,
        ["dedupe", str(sample_csv_file), "-o", str(tmp_path / "out"), "--log", str(log_path)],
    )

    assert result.exit_code == 0
    events = [json.loads(line) for line in log_path.read_text().splitlines()]
    names = [e["event"] for e in events]
    assert names[0] == "run_started"
    assert "artifact_written" in names
    assert len({e["run_id"] for e in events}) == 1


@pytest.mark.unit
def test_dedupe_verbose_flag(runner: CliRunner, sample_csv_file: Path, tmp_path: Path) -> None:
    """Test verbose output includes the results block."""
    result = runner.invoke(
        cli, ["dedupe", str(sample_csv_file), "-o", str(tmp_path / "out"), "-v"]
    )

    assert result.exit_code == 0
    assert "Duplicate groups: 3" in result.output


@pytest.mark.unit
def test_dedupe_unsupported_file(runner: CliRunner, tmp_path: Path) -> None:
    """Test unreadable input reports an error and exits 1."""
    path = tmp_path / "records.txt"
    path.write_text("center\nA\n", encoding="utf-8")

    result = runner.invoke(cli, ["dedupe", str(path), "-o", str(tmp_path / "out")])

    assert result.exit_code == 1
    assert "Unsupported file type" in result.output


# ---------------------------------------------------------------------------
# merge command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_merge_execution(runner: CliRunner, sample_csv_file: Path, tmp_path: Path) -> None:
    """Test merge keeps the secondary file and reports dropped records."""
    primary = tmp_path / "corrected.csv"
    primary.write_text("center\nLope de Vega\nNew Center\n", encoding="utf-8")
    out = tmp_path / "merged"

    result = runner.invoke(cli, ["merge", str(primary), str(sample_csv_file), "-o", str(out)])

    assert result.exit_code == 0
    assert "Merged 2 + 7 records: 1 duplicates dropped, 8 records written" in result.output
    assert (out / "matches.jsonl").exists()
