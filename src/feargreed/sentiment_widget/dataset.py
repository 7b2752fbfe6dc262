"""Loading the Fear & Greed CSV into immutable records.

The CSV has one row per day:

    timestamp,value,classification[,price]
    1704067200,65,Greed,42280.2

Ingestion is best-effort: rows whose value or timestamp is not a finite
number (timestamps also within the datetime64 range), or whose
classification is missing, are dropped and counted, never fatal.
Only a failure to read the source at all raises DataLoadError.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

from feargreed.errors import DataLoadError
from feargreed.sentiment_widget.categories import Category
from feargreed.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("timestamp", "value", "classification")
DEFAULT_SECONDARY_COLUMN = "price"

# Seconds since epoch representable as datetime64[ns] (about 1677..2262).
_TIMESTAMP_RANGE_S = (-9_223_372_036, 9_223_372_036)


@dataclass(frozen=True)
class Record:
    """One day of the index."""
    timestamp: datetime  # timezone-aware, UTC
    value: float
    classification: str  # canonical Category label when recognized
    secondary_value: Optional[float] = None

    @property
    def category(self) -> Optional[Category]:
        return Category.from_label(self.classification)


def load_records(
    source: Union[str, Path],
    *,
    secondary_column: Optional[str] = DEFAULT_SECONDARY_COLUMN,
) -> list[Record]:
    """Read the dataset from a local path or http(s) URL.

    Args:
        source: CSV path or URL (anything pandas.read_csv accepts).
        secondary_column: Optional column holding the secondary series
            (e.g. price). Ignored when absent from the CSV.

    Returns:
        Valid records sorted by timestamp.

    Raises:
        DataLoadError: If the source cannot be read or lacks required columns.
    """
    source_str = str(source)
    logger.info("Loading dataset from %s", source_str)
    try:
        df = pd.read_csv(source)
    except FileNotFoundError as e:
        raise DataLoadError(f"Dataset not found (404): {source_str}", source=source_str) from e
    except (OSError, pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Failed to read dataset {source_str}: {e}", source=source_str) from e

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(
            f"Dataset {source_str} is missing required column(s): {', '.join(missing)}",
            source=source_str,
        )
    records = records_from_dataframe(df, secondary_column=secondary_column)
    logger.info("Loaded %s valid records from %s (%s rows read)", len(records), source_str, len(df))
    return records


def records_from_dataframe(
    df: pd.DataFrame,
    *,
    secondary_column: Optional[str] = DEFAULT_SECONDARY_COLUMN,
) -> list[Record]:
    """Coerce a raw dataframe into sorted records, dropping malformed rows.

    Classification labels are normalized to the canonical Category label when
    recognized (case and surrounding whitespace ignored); other non-empty
    labels are kept as-is so the timeline still shows them.
    """
    ts_num = pd.to_numeric(df["timestamp"], errors="coerce").astype(float)
    # inf and seconds outside the datetime64[ns] range become NaT
    ts_num = ts_num.where(np.isfinite(ts_num) & ts_num.between(*_TIMESTAMP_RANGE_S))
    timestamp = pd.to_datetime(ts_num, unit="s", utc=True, errors="coerce")
    value = pd.to_numeric(df["value"], errors="coerce")
    classification = df["classification"].astype("string").str.strip()

    valid = (
        timestamp.notna()
        & value.notna()
        & np.isfinite(value.astype(float))
        & classification.notna()
        & (classification != "")
    ).fillna(False).astype(bool)
    n_dropped = int((~valid).sum())
    if n_dropped:
        logger.info("Dropped %s malformed row(s) of %s", n_dropped, len(df))

    tmp = pd.DataFrame({
        "timestamp": timestamp[valid],
        "value": value[valid].astype(float),
        "classification": classification[valid].astype(str),
    })
    if secondary_column and secondary_column in df.columns:
        tmp["secondary_value"] = pd.to_numeric(df.loc[valid, secondary_column], errors="coerce")
    else:
        tmp["secondary_value"] = np.nan

    tmp = tmp.sort_values("timestamp", kind="mergesort")

    records: list[Record] = []
    for ts, v, label, sec in zip(tmp["timestamp"], tmp["value"], tmp["classification"], tmp["secondary_value"]):
        category = Category.from_label(label)
        records.append(Record(
            timestamp=ts.to_pydatetime(),
            value=float(v),
            classification=category.value if category is not None else label,
            secondary_value=None if pd.isna(sec) else float(sec),
        ))
    return records


def records_to_dataframe(records: Iterable[Record]) -> pd.DataFrame:
    """Tabular view of records (columns: timestamp, value, classification, secondary_value)."""
    rows = [
        {
            "timestamp": r.timestamp,
            "value": r.value,
            "classification": r.classification,
            "secondary_value": r.secondary_value,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=["timestamp", "value", "classification", "secondary_value"])
