"""
Group/aggregate helpers behind every chart in the storm report.

Conventions:
 - "distinct storms" means unique NAME values inside a group, never row count
 - groups with nothing to count are absent from the output, not zero-filled
 - time series come back sorted ascending by YEAR
 - every function raises EmptyInput when filtering leaves no rows; rows with a
   null grouping key count as filtered out
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable, Iterable, List, Optional, Union

import pandas as pd

from storm_eda.config import (
    CAT_COL,
    DAY_COL,
    LAT_COL,
    LONG_COL,
    MONTH_COL,
    NAME_COL,
    NUMERIC_COLUMNS,
    PRESSURE_COL,
    WIND_KTS_COL,
    WIND_MPH_COL,
    YEAR_COL,
)
from storm_eda.errors import EmptyInput, UndefinedRatio
from storm_eda.feature_engineering import named_storms

CategoryFilter = Optional[Callable[[object], bool]]
SeriesLike = Union[pd.Series, Mapping, Iterable]

LOCATION_KEYS = [CAT_COL, YEAR_COL, MONTH_COL, DAY_COL, LAT_COL, LONG_COL]
CHANGE_KINDS = ("absolute", "percent")
CALENDAR_MONTHS = list(range(1, 13))


# --------------------------- filtering helpers ---------------------------

def _require_rows(df: pd.DataFrame, what: str) -> pd.DataFrame:
    if df.empty:
        raise EmptyInput(f"No rows left to compute {what}")
    return df


def _require_column(df: pd.DataFrame, col: str) -> None:
    if col not in df.columns:
        raise ValueError(f"Column '{col}' not found; run derive_columns() first. Available: {list(df.columns)}")


def _counting_rows(
    table: pd.DataFrame,
    keys: List[str],
    exclude_unnamed: bool,
    category_filter: CategoryFilter = None,
) -> pd.DataFrame:
    # groupby drops null keys, so they must go before the emptiness check
    rows = named_storms(table) if exclude_unnamed else table
    rows = rows.dropna(subset=[NAME_COL] + keys)
    if category_filter is not None:
        rows = rows[rows[CAT_COL].map(category_filter).astype(bool)]
    return rows


# --------------------------- distinct storm counts ---------------------------

def distinct_storm_count_by_year(table: pd.DataFrame, exclude_unnamed: bool = True) -> pd.Series:
    """Number of distinct storm names per YEAR."""
    rows = _require_rows(_counting_rows(table, [YEAR_COL], exclude_unnamed), "storm counts by year")
    counts = rows.groupby(YEAR_COL)[NAME_COL].nunique().sort_index()
    counts.name = "storms"
    return counts


def distinct_storm_count_by_year_and_category(
    table: pd.DataFrame,
    category_filter: CategoryFilter = None,
    exclude_unnamed: bool = True,
) -> pd.Series:
    """Number of distinct storm names per (YEAR, CAT), optionally restricted to matching categories."""
    rows = _require_rows(
        _counting_rows(table, [YEAR_COL, CAT_COL], exclude_unnamed, category_filter),
        "storm counts by year and category",
    )
    counts = rows.groupby([YEAR_COL, CAT_COL])[NAME_COL].nunique().sort_index()
    counts.name = "storms"
    return counts


def count_by_month(
    table: pd.DataFrame,
    category_filter: CategoryFilter = None,
    exclude_unnamed: bool = True,
) -> pd.Series:
    """Distinct storm names per calendar MONTH (1-12), pooled across all years.

    Rows whose MONTH is not a whole number from 1 to 12 are left out.
    """
    rows = _counting_rows(table, [MONTH_COL], exclude_unnamed, category_filter)
    rows = _require_rows(rows[rows[MONTH_COL].isin(CALENDAR_MONTHS)], "storm counts by month")
    counts = rows.groupby(MONTH_COL)[NAME_COL].nunique().sort_index()
    counts.index = counts.index.astype(int)
    counts.name = "storms"
    return counts


def storm_count_by_category(
    table: pd.DataFrame,
    category_filter: CategoryFilter = None,
    exclude_unnamed: bool = True,
) -> pd.Series:
    """Distinct storm names per CAT over the whole table."""
    rows = _require_rows(
        _counting_rows(table, [CAT_COL], exclude_unnamed, category_filter),
        "storm counts by category",
    )
    counts = rows.groupby(CAT_COL)[NAME_COL].nunique().sort_index()
    counts.name = "storms"
    return counts


# --------------------------- year-over-year change ---------------------------

def _as_series(series: SeriesLike) -> pd.Series:
    if isinstance(series, pd.Series):
        s = series.copy()
    elif isinstance(series, Mapping):
        s = pd.Series(dict(series), dtype="float64")
    else:
        pairs = list(series)
        s = pd.Series([v for _, v in pairs], index=[y for y, _ in pairs], dtype="float64")
    if s.index.has_duplicates:
        raise ValueError("Year-over-year input has duplicate years")
    if s.index.name is None:
        s.index.name = YEAR_COL
    return s.sort_index()


def year_over_year_change(series: SeriesLike, kind: str = "absolute") -> pd.Series:
    """
    Change between consecutive years of a yearly series.

    absolute: value[t] - value[t-1]
    percent:  (value[t] - value[t-1]) / value[t-1], as a fraction
    Both are rounded to 2 decimals. The first year has no predecessor and is
    dropped, so the result is one element shorter than the input.
    """
    if kind not in CHANGE_KINDS:
        raise ValueError(f"kind must be one of {CHANGE_KINDS}, got {kind!r}")

    s = _as_series(series)
    if len(s) < 2:
        raise EmptyInput(f"Year-over-year change needs at least two years, got {len(s)}")

    s = s.astype(float)
    prev = s.shift(1)
    if kind == "absolute":
        delta = s - prev
    else:
        zero_prev = prev.iloc[1:] == 0
        if zero_prev.any():
            years = list(prev.iloc[1:][zero_prev].index)
            raise UndefinedRatio(f"Percent change undefined: previous value is 0 before year(s) {years}")
        delta = (s - prev) / prev

    delta = delta.iloc[1:].round(2)
    delta.name = f"{kind}_change"
    return delta


def year_over_year_table(series: SeriesLike) -> pd.DataFrame:
    """Value, absolute change and percent change side by side, one row per year after the first."""
    s = _as_series(series)
    absolute = year_over_year_change(s, "absolute")
    percent = year_over_year_change(s, "percent")
    out = pd.DataFrame({
        "value": s.loc[absolute.index],
        "absolute_change": absolute,
        "percent_change": percent,
    })
    out.index.name = s.index.name
    return out.reset_index()


# --------------------------- means ---------------------------

def mean_wind_speed_by_year(table: pd.DataFrame) -> pd.Series:
    """Mean wind_speed_mph per YEAR over every observation row."""
    _require_column(table, WIND_MPH_COL)
    rows = _require_rows(table.dropna(subset=[YEAR_COL, WIND_MPH_COL]), "mean wind speed by year")
    means = rows.groupby(YEAR_COL)[WIND_MPH_COL].mean().sort_index()
    means.name = "mean_wind_mph"
    return means


def mean_by_category_year_month_day_location(
    table: pd.DataFrame,
    require_positive_pressure: bool = True,
) -> pd.DataFrame:
    """
    Mean wind (kts) and mean pressure per (CAT, YEAR, MONTH, DAY, LAT, LONG).

    With require_positive_pressure, rows whose PRESSURE is the 0 "not recorded"
    sentinel (or below) are dropped before grouping.
    """
    rows = table[table[PRESSURE_COL] > 0] if require_positive_pressure else table
    rows = _require_rows(rows.dropna(subset=LOCATION_KEYS), "mean wind and pressure by category/date/location")
    out = rows.groupby(LOCATION_KEYS, as_index=False).agg(
        mean_wind_kts=(WIND_KTS_COL, "mean"),
        mean_pressure=(PRESSURE_COL, "mean"),
    )
    return out.sort_values(LOCATION_KEYS).reset_index(drop=True)


# --------------------------- descriptive statistics ---------------------------

def summary_statistics(table: pd.DataFrame) -> pd.DataFrame:
    """describe() of the numeric columns with PRESSURE sentinel zeros treated as missing."""
    _require_rows(table, "summary statistics")
    cols = [c for c in NUMERIC_COLUMNS + [WIND_MPH_COL] if c in table.columns]
    stats = table[cols].assign(**{PRESSURE_COL: table[PRESSURE_COL].where(table[PRESSURE_COL] > 0)})
    return stats.describe().T.round(2)
