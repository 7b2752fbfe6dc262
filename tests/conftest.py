# tests/conftest.py
"""Shared pytest configuration and fixtures for feargreed tests."""
from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure feargreed package is importable when running tests from repo root.
_src_dir = Path(__file__).resolve().parents[1] / "src"
if _src_dir.exists() and str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from feargreed.sentiment_widget.dataset import Record  # noqa: E402

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_records(values_and_labels, *, with_price: bool = False) -> list[Record]:
    """Daily records starting 2024-01-01 from (value, label) pairs."""
    return [
        Record(
            timestamp=START + timedelta(days=i),
            value=float(v),
            classification=label,
            secondary_value=(1000.0 + i) if with_price else None,
        )
        for i, (v, label) in enumerate(values_and_labels)
    ]


@pytest.fixture
def sample_records() -> list[Record]:
    """Records covering all five classifications."""
    return make_records([
        (10, "Extreme Fear"), (20, "Extreme Fear"), (35, "Fear"), (40, "Fear"),
        (30, "Fear"), (50, "Neutral"), (52, "Neutral"), (60, "Greed"),
        (70, "Greed"), (65, "Greed"), (80, "Extreme Greed"), (90, "Extreme Greed"),
    ], with_price=True)


@pytest.fixture
def csv_file(tmp_path) -> Path:
    """Small CSV in the dataset's format, with malformed rows mixed in (unsorted)."""
    path = tmp_path / "fear_greed_index.csv"
    path.write_text(
        "timestamp,value,classification,price\n"
        "1704153600,71,Greed,43612.5\n"
        "1704067200,65,Greed,42835.5\n"
        "1704240000,abc,Greed,43000\n"
        "1704326400,22,,41000\n"
        "not_a_time,30,Fear,40000\n"
        "1704412800,18, extreme fear ,\n"
        "1704499200,47,Neutral,40500\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def record_factory():
    """Factory fixture: make_records((value, label), ...)."""
    return make_records
