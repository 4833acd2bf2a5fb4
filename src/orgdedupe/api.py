"""Public API for reading, deduplicating and writing record files.

This module provides the file boundary around the in-memory engine:
- Reading CSV or JSONL files into Record objects
- Writing processed records, groups, actions and summaries
- One-call helpers running a whole deduplication or cross merge
"""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from orgdedupe.models import RECORD_FIELDS, REVIEW_FIELDS, Record
from orgdedupe.utils import fingerprint_file

if TYPE_CHECKING:
    from orgdedupe.audit import AuditLogger
    from orgdedupe.engine.config import CrossMergeResult, DedupeConfig, DedupeResult

__all__ = [
    "CSV_COLUMNS",
    "ParseError",
    "dedupe",
    "merge_files",
    "read_records",
    "write_jsonl",
    "write_records_csv",
    "write_report",
]

CSV_COLUMNS: tuple[str, ...] = (*RECORD_FIELDS, "source", "original_index", *REVIEW_FIELDS)

JSONL_SUFFIXES = frozenset({".jsonl", ".ndjson"})
CSV_SUFFIXES = frozenset({".csv"})

REPORT_STAGE = "export"


class ParseError(Exception):
    """Raised when an input file cannot be read."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
    ) -> None:
        """Initialize parse error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        """
        super().__init__(message)
        self.file = file


def _normalize_header(name: str | None) -> str:
    return (name or "").strip().lower()


def read_records(
    path: str | Path,
    *,
    source: str | None = None,
) -> list[Record]:
    """Read records from a CSV or JSONL file.

    Column names are matched case-insensitively; unknown columns are
    ignored and missing ones read as empty. Each record's
    ``original_index`` is its row position unless the file provides one.

    Parameters
    ----------
    path : str | Path
        ``.csv``, ``.jsonl`` or ``.ndjson`` file.
    source : str | None, optional
        Source tag for every record, by default the file stem.

    Returns
    -------
    list[Record]
        Records in file order.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ParseError
        If the extension is unsupported or a JSONL line is malformed.

    Examples
    --------
        >>> from orgdedupe import read_records
        >>> records = read_records("signatures.csv")
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    tag = source if source is not None else file_path.stem
    suffix = file_path.suffix.lower()

    if suffix in CSV_SUFFIXES:
        rows = _read_csv_rows(file_path)
    elif suffix in JSONL_SUFFIXES:
        rows = _read_jsonl_rows(file_path)
    else:
        raise ParseError(f"Unsupported file type: {file_path.suffix or '(none)'}", file=str(path))

    records = []
    for position, row in enumerate(rows):
        index = None if row.get("original_index") not in (None, "") else position
        records.append(Record.from_dict(row, source=tag, original_index=index))
    return records


def _read_csv_rows(path: Path) -> list[dict[str, Any]]:
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return [
            {_normalize_header(key): value for key, value in row.items() if key is not None}
            for row in reader
        ]


def _read_jsonl_rows(path: Path) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise ParseError(f"{path.name}:{line_number}: {e}", file=str(path)) from e
            if not isinstance(data, dict):
                raise ParseError(
                    f"{path.name}:{line_number}: expected a JSON object", file=str(path)
                )
            rows.append({_normalize_header(k): v for k, v in data.items()})
    return rows


def write_records_csv(
    records: Iterable[Record],
    path: str | Path,
    *,
    include_review: bool = True,
) -> None:
    """Write records to a CSV file with a fixed column order.

    Parameters
    ----------
    records : Iterable[Record]
        Records to write.
    path : str | Path
        Output file path.
    include_review : bool, optional
        Include the review annotation columns, by default True.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    columns = CSV_COLUMNS if include_review else CSV_COLUMNS[: -len(REVIEW_FIELDS)]

    with file_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns)
        writer.writeheader()
        for record in records:
            writer.writerow(record.to_dict(include_review=include_review))


def write_jsonl(
    items: Iterable[Any],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> None:
    """Write records or result objects to a JSONL file.

    Output is deterministic with consistent field ordering and UTF-8 encoding.

    Parameters
    ----------
    items : Iterable[Any]
        Objects with a ``to_dict()`` method (records, groups, actions).
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys for deterministic output,
        by default True.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for item in items:
            data = item.to_dict(include_review=True) if isinstance(item, Record) else item.to_dict()
            f.write(json.dumps(data, ensure_ascii=False, sort_keys=sort_keys) + "\n")


def write_report(
    result: DedupeResult,
    output_dir: str | Path,
    *,
    logger: AuditLogger | None = None,
) -> dict[str, Path]:
    """Write the output triple and summary of a run.

    Files written:

    - ``records.csv``: processed records
    - ``groups.jsonl``: duplicate groups with similarity breakdowns
    - ``actions.jsonl``: merge actions
    - ``matches.jsonl``: cross-collection matches (cross merges only)
    - ``summary.json``: run statistics

    Parameters
    ----------
    result : DedupeResult
        Result of :func:`run_pipeline` or :func:`run_cross_merge`.
    output_dir : str | Path
        Destination directory, created if needed.
    logger : AuditLogger | None, optional
        Audit logger; one ``artifact_written`` event per file.

    Returns
    -------
    dict[str, Path]
        Map of artifact name to file path.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    paths = {
        "records": out / "records.csv",
        "groups": out / "groups.jsonl",
        "actions": out / "actions.jsonl",
        "summary": out / "summary.json",
    }
    counts = {
        "records": len(result.processed_records),
        "groups": len(result.duplicate_groups),
        "actions": len(result.actions),
        "summary": 1,
    }

    write_records_csv(result.processed_records, paths["records"])
    write_jsonl(result.duplicate_groups, paths["groups"])
    write_jsonl(result.actions, paths["actions"])

    matches: Sequence[Any] | None = getattr(result, "matches", None)
    if matches is not None:
        paths["matches"] = out / "matches.jsonl"
        counts["matches"] = len(matches)
        write_jsonl(matches, paths["matches"])

    with paths["summary"].open("w", encoding="utf-8") as f:
        json.dump(result.summary.to_dict(), f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")

    if logger:
        for name, file_path in paths.items():
            sha256, size = fingerprint_file(file_path)
            logger.artifact_written(
                path=file_path.name,
                sha256=sha256,
                stage=REPORT_STAGE,
                bytes_written=size,
                record_count=counts[name],
            )

    return paths


def dedupe(
    input_path: str | Path,
    *,
    output_dir: str | Path | None = None,
    config: DedupeConfig | None = None,
    logger: AuditLogger | None = None,
) -> DedupeResult:
    """Deduplicate a record file.

    Parameters
    ----------
    input_path : str | Path
        CSV or JSONL input file.
    output_dir : str | Path | None, optional
        If given, the report is written there.
    config : DedupeConfig | None, optional
        Run configuration. If None, uses defaults.
    logger : AuditLogger | None, optional
        Audit logger.

    Returns
    -------
    DedupeResult
        Pipeline result.

    Examples
    --------
        >>> from orgdedupe import dedupe
        >>> result = dedupe("signatures.csv", output_dir="out")
        >>> print(result.summary.groups_found)
    """
    from orgdedupe.engine import run_pipeline

    records = read_records(input_path)
    result = run_pipeline(records, config, logger=logger)
    if output_dir is not None:
        write_report(result, output_dir, logger=logger)
    return result


def merge_files(
    primary_path: str | Path,
    secondary_path: str | Path,
    *,
    output_dir: str | Path | None = None,
    config: DedupeConfig | None = None,
    logger: AuditLogger | None = None,
) -> CrossMergeResult:
    """Merge a primary record file into a secondary one.

    Matched primary records are dropped in favour of the secondary
    version; see :func:`orgdedupe.engine.run_cross_merge`.

    Returns
    -------
    CrossMergeResult
        Cross merge result.
    """
    from orgdedupe.engine import run_cross_merge

    primary = read_records(primary_path)
    secondary = read_records(secondary_path)
    result = run_cross_merge(primary, secondary, config, logger=logger)
    if output_dir is not None:
        write_report(result, output_dir, logger=logger)
    return result
