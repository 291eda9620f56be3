"""Load the storm track CSV into a DataFrame with canonical column names.

Usage:
    from storm_eda.clean_storms import load_storms
    df = load_storms("data/storms.csv")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from storm_eda.config import CAT_COL, NAME_COL, NUMERIC_COLUMNS, REQUIRED_COLUMNS
from storm_eda.errors import DataUnavailable

logger = logging.getLogger(__name__)

ENCODINGS = ["utf-8", "utf-8-sig", "latin1"]


def try_read_csv(path: Path) -> Optional[pd.DataFrame]:
    """
    Read CSV with fallback encodings.
    Returns DataFrame or None if no encoding produced a table.
    """
    for enc in ENCODINGS:
        try:
            df = pd.read_csv(path, encoding=enc, low_memory=False)
            logger.info("CSV loaded: %s (encoding=%s rows=%d cols=%d)", path, enc, len(df), len(df.columns))
            return df
        except pd.errors.EmptyDataError:
            logger.error("CSV is empty: %s", path)
            return None
        except (UnicodeDecodeError, pd.errors.ParserError) as e:
            logger.debug("read_csv failed for encoding=%s: %s", enc, e)
            continue
    logger.error("Unable to read CSV: %s (tried encodings %s)", path, ENCODINGS)
    return None


def canonicalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Strip header whitespace and map required columns case-insensitively to their canonical names."""
    df = df.rename(columns={c: str(c).strip() for c in df.columns})
    lowmap = {c.lower(): c for c in df.columns}
    mapping = {}
    for col in REQUIRED_COLUMNS:
        found = lowmap.get(col.lower())
        if found is not None and found != col:
            mapping[found] = col
    return df.rename(columns=mapping)


def validate_columns(df: pd.DataFrame) -> List[str]:
    """Return the required columns missing from df (empty when the schema is complete)."""
    return [c for c in REQUIRED_COLUMNS if c not in df.columns]


def coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    for col in NUMERIC_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    for col in (NAME_COL, CAT_COL):
        df[col] = df[col].where(df[col].isna(), df[col].astype(str).str.strip())
    return df


def load_storms(path: str | Path) -> pd.DataFrame:
    """Load every track observation from path.

    Raises DataUnavailable when the file is missing, not parseable as a table,
    or lacks any of the required columns.
    """
    p = Path(path)
    if not p.is_file():
        raise DataUnavailable(f"Storm track file not found: {p}")

    df = try_read_csv(p)
    if df is None:
        raise DataUnavailable(f"Storm track file is not a readable CSV: {p}")

    df = canonicalize_columns(df)
    missing = validate_columns(df)
    if missing:
        raise DataUnavailable(f"Storm track file {p} is missing columns: {', '.join(missing)}")

    df = coerce_types(df)
    logger.info("Loaded %d track observations for %d storms", len(df), df[NAME_COL].nunique())
    return df
