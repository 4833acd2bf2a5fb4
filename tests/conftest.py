"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from orgdedupe.models import Record  # noqa: E402


@pytest.fixture
def make_record() -> Callable[..., Record]:
    """Factory for test records with minimal boilerplate.

    Every data field defaults to empty; pass only what the test needs.
    """

    def _factory(
        center: str = "",
        *,
        email: str = "",
        representative: str = "",
        locality: str = "",
        province: str = "",
        region: str = "",
        date: str = "",
        **other: Any,
    ) -> Record:
        return Record(
            center=center,
            email=email,
            representative=representative,
            locality=locality,
            province=province,
            region=region,
            date=date,
            **other,
        )

    return _factory


@pytest.fixture
def mixed_records(make_record: Callable[..., Record]) -> list[Record]:
    """Small collection with three duplicate groups and one singleton."""
    return [
        make_record("IES Lope de Vega", locality="Madrid", date="15/01/2024", original_index=0),
        make_record("Zulu River Academy", email="zulu@example.org", original_index=1),
        make_record(
            "Lope de Vega",
            locality="Madrid",
            representative="Ana Pérez",
            commitments="A, B",
            date="01/03/2024",
            original_index=2,
        ),
        make_record("Colegio San Jose", locality="Sevilla", original_index=3),
        make_record("Kappa Lab", email="ZULU@example.org ", original_index=4),
        make_record("San Josefa", locality="Sevilla", additional="late entry", original_index=5),
        make_record("Omega Workshop", locality="Bilbao", original_index=6),
    ]


SAMPLE_CSV = """\
Center,Email,Representative,Locality,Region,Commitments,Date
IES Lope de Vega,,,Madrid,Comunidad de Madrid,,15/01/2024
Zulu River Academy,zulu@example.org,,,,,
Lope de Vega,,Ana Pérez,Madrid,Madrid,"A, B",01/03/2024
Colegio San Jose,,,Sevilla,Andalucía,,
Kappa Lab,ZULU@example.org,,,,,
San Josefa,,,Sevilla,Andalucia,,
Omega Workshop,,,Bilbao,País Vasco,,
"""


@pytest.fixture
def sample_csv_file(tmp_path: Path) -> Path:
    """CSV export (BOM, capitalised headers) holding three duplicate groups."""
    path = tmp_path / "signatures.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8-sig")
    return path
