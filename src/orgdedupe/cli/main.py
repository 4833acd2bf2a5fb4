"""Command-line interface for orgdedupe.

Provides CLI commands for deduplicating one record file and for merging
two record files.
"""

import importlib.metadata
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Any

import click

from orgdedupe.merge import STRATEGY_REGISTRY

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("orgdedupe")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development

STRATEGIES = tuple(STRATEGY_REGISTRY)


def _parse_thresholds(
    ctx: click.Context,
    param: click.Parameter,
    values: tuple[str, ...],
) -> dict[str, float]:
    """Parse repeated ``NAME=VALUE`` threshold overrides."""
    overrides: dict[str, float] = {}
    for item in values:
        name, sep, raw = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}", ctx=ctx, param=param)
        try:
            overrides[name.strip()] = float(raw)
        except ValueError:
            raise click.BadParameter(
                f"threshold {name.strip()!r} is not a number: {raw!r}", ctx=ctx, param=param
            ) from None
    return overrides


def _build_config(
    config_path: str | None,
    strategy: str | None,
    thresholds: dict[str, float],
    blockers: str | None,
    standardize_regions: bool,
) -> Any:
    """Combine a config file with command-line overrides."""
    from orgdedupe.engine import DedupeConfig, load_config

    base = load_config(config_path) if config_path else DedupeConfig()
    data = base.to_dict()
    if strategy:
        data["strategy"] = strategy
    if thresholds:
        data["thresholds"] = {**data["thresholds"], **thresholds}
    if blockers:
        data["blockers"] = [b.strip() for b in blockers.split(",") if b.strip()]
    if standardize_regions:
        data["standardize_regions"] = True
    return DedupeConfig.from_dict(data)


def _open_logger(log_path: str | None) -> Any:
    """Return an audit logger context, or a no-op context without a path."""
    if not log_path:
        return nullcontext(None)
    from orgdedupe.audit import AuditLogger, generate_run_id

    return AuditLogger(run_id=generate_run_id(), log_path=Path(log_path))


def _common_options(func: Any) -> Any:
    """Options shared by all run commands."""
    options = [
        click.option(
            "--output-dir",
            "-o",
            type=click.Path(),
            default="out",
            help="Output directory for results (default: out)",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="JSON configuration file",
        ),
        click.option(
            "--threshold",
            "-t",
            "thresholds",
            multiple=True,
            callback=_parse_thresholds,
            help="Threshold override NAME=VALUE (repeatable), e.g. center_name=0.9",
        ),
        click.option(
            "--blockers",
            type=str,
            default=None,
            help="Comma-separated blockers: email, name_prefix, minhash (default: compare all)",
        ),
        click.option(
            "--standardize-regions",
            is_flag=True,
            help="Map region spelling variants to official names before matching",
        ),
        click.option(
            "--log",
            "log_path",
            type=click.Path(dir_okay=False),
            default=None,
            help="Write JSONL audit events to this file",
        ),
        click.option("--verbose", "-v", is_flag=True, help="Enable verbose output"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _echo_summary(summary: Any, output_files: dict[str, Path]) -> None:
    click.echo("\nResults:", err=True)
    click.echo(f"  Records in: {summary.records_in}", err=True)
    click.echo(f"  Records out: {summary.records_out}", err=True)
    click.echo(f"  Duplicate groups: {summary.groups_found}", err=True)
    click.echo(f"  Records in groups: {summary.records_in_groups}", err=True)
    click.echo("\nOutputs:", err=True)
    for name, path in output_files.items():
        click.echo(f"  {name}: {path}", err=True)


@click.group()
@click.version_option(version=__version__, prog_name="orgdedupe")
def cli() -> None:
    """Deduplicate organization and contact records.

    Use 'orgdedupe COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--strategy",
    "-s",
    type=click.Choice(STRATEGIES),
    default=None,
    help="Resolution strategy (default: review, or the config file's)",
)
@_common_options
def dedupe(
    input_path: str,
    strategy: str | None,
    output_dir: str,
    config_path: str | None,
    thresholds: dict[str, float],
    blockers: str | None,
    standardize_regions: bool,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Find and resolve duplicates inside INPUT_PATH.

    INPUT_PATH is a CSV or JSONL file of records.

    Examples
    --------
        orgdedupe dedupe signatures.csv
        orgdedupe dedupe signatures.csv -s merge -o results
        orgdedupe dedupe signatures.csv -t center_name=0.9 --blockers email,name_prefix
    """
    from orgdedupe.api import read_records, write_report
    from orgdedupe.engine import run_pipeline

    try:
        config = _build_config(config_path, strategy, thresholds, blockers, standardize_regions)

        if verbose:
            click.echo(f"Reading: {input_path}", err=True)
            click.echo(f"  Strategy: {config.strategy}", err=True)
            click.echo(f"  Thresholds: {config.thresholds.to_dict()}", err=True)

        records = read_records(input_path)

        with _open_logger(log_path) as logger:
            result = run_pipeline(records, config, logger=logger)
            output_files = write_report(result, output_dir, logger=logger)

        summary = result.summary
        if verbose:
            _echo_summary(summary, output_files)
        click.secho(
            f"✓ Processed {summary.records_in} records: {summary.groups_found} duplicate "
            f"groups, {summary.records_out} records written to {output_dir}",
            fg="green",
        )

    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)


@cli.command()
@click.argument("primary_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("secondary_path", type=click.Path(exists=True, dir_okay=False))
@_common_options
def merge(
    primary_path: str,
    secondary_path: str,
    output_dir: str,
    config_path: str | None,
    thresholds: dict[str, float],
    blockers: str | None,
    standardize_regions: bool,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Merge PRIMARY_PATH into SECONDARY_PATH.

    Every SECONDARY_PATH record is kept. PRIMARY_PATH records that match a
    secondary record are dropped; the rest are appended.

    Examples
    --------
        orgdedupe merge corrected.csv standardized.csv -o merged
    """
    from orgdedupe.api import read_records, write_report
    from orgdedupe.engine import run_cross_merge

    try:
        config = _build_config(config_path, None, thresholds, blockers, standardize_regions)

        if verbose:
            click.echo(f"Primary: {primary_path}", err=True)
            click.echo(f"Secondary: {secondary_path}", err=True)
            click.echo(f"  Thresholds: {config.thresholds.to_dict()}", err=True)

        primary = read_records(primary_path)
        secondary = read_records(secondary_path)

        with _open_logger(log_path) as logger:
            result = run_cross_merge(primary, secondary, config, logger=logger)
            output_files = write_report(result, output_dir, logger=logger)

        summary = result.summary
        if verbose:
            _echo_summary(summary, output_files)
        click.secho(
            f"✓ Merged {len(primary)} + {len(secondary)} records: "
            f"{summary.records_removed} duplicates dropped, "
            f"{summary.records_out} records written to {output_dir}",
            fg="green",
        )

    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
