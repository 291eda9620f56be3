"""
Derived columns and row predicates for storm track observations.

derive_columns() appends:
  - wind_speed_mph: WIND_KTS converted with KNOTS_TO_MPH
  - observation_date: calendar date from YEAR/MONTH/DAY, NaT when the
    combination is not a real date

Nothing here modifies its input frame.
"""

from __future__ import annotations

import datetime
import logging

import pandas as pd

from storm_eda.config import (
    CAT_COL,
    DATE_COL,
    DAY_COL,
    HURRICANE_MARKER,
    KNOTS_TO_MPH,
    MONTH_COL,
    NAME_COL,
    UNNAMED_SENTINELS,
    WIND_KTS_COL,
    WIND_MPH_COL,
    YEAR_COL,
)
from storm_eda.errors import InvalidDate

logger = logging.getLogger(__name__)


# -------------------------
# Dates
# -------------------------
def _as_int(value) -> int:
    f = float(value)
    if not f.is_integer():
        raise ValueError(f"not a whole number: {value!r}")
    return int(f)


def make_date(year, month, day) -> datetime.date:
    """Build a calendar date, raising InvalidDate when the parts don't form one."""
    try:
        return datetime.date(_as_int(year), _as_int(month), _as_int(day))
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidDate(f"invalid date year={year} month={month} day={day}: {e}") from e


def _date_or_none(year, month, day):
    try:
        return make_date(year, month, day)
    except InvalidDate as e:
        logger.debug("%s", e)
        return None


# -------------------------
# Derivation
# -------------------------
def derive_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of df with wind_speed_mph and observation_date appended."""
    out = df.copy()
    out[WIND_MPH_COL] = out[WIND_KTS_COL] * KNOTS_TO_MPH

    dates = [
        _date_or_none(y, m, d)
        for y, m, d in zip(out[YEAR_COL], out[MONTH_COL], out[DAY_COL])
    ]
    out[DATE_COL] = pd.to_datetime(pd.Series(dates, index=out.index, dtype="object"))

    n_invalid = int(out[DATE_COL].isna().sum())
    if n_invalid:
        logger.warning("%d of %d rows have no valid observation date", n_invalid, len(out))
    return out


# -------------------------
# Predicates and filters
# -------------------------
def is_hurricane(cat) -> bool:
    """Hurricane-strength category codes contain 'H' (H1..H5)."""
    if cat is None or pd.isna(cat):
        return False
    return HURRICANE_MARKER in str(cat)


def is_named(name) -> bool:
    if name is None or pd.isna(name):
        return False
    return str(name).strip() not in UNNAMED_SENTINELS


def named_storms(df: pd.DataFrame) -> pd.DataFrame:
    """Rows belonging to storms with a real name."""
    return df[df[NAME_COL].map(is_named).astype(bool)]


def hurricanes(df: pd.DataFrame) -> pd.DataFrame:
    return df[df[CAT_COL].map(is_hurricane).astype(bool)]


def within_years(df: pd.DataFrame, start: int, end: int) -> pd.DataFrame:
    """Rows with start <= YEAR <= end."""
    if start > end:
        raise ValueError(f"start year {start} is after end year {end}")
    return df[(df[YEAR_COL] >= start) & (df[YEAR_COL] <= end)]
