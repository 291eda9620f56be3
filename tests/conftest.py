"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from storm_eda.feature_engineering import derive_columns

COLUMNS = ["NAME", "YEAR", "MONTH", "DAY", "LAT", "LONG", "WIND_KTS", "PRESSURE", "CAT"]

# Three seasons of track points. Named storms per year: 2000 -> 2, 2001 -> 3, 2002 -> 2.
# CHRIS (TS, 2001-09-05) and GUS have PRESSURE == 0 (not recorded).
# FAY is logged on 2002-02-30, which is not a calendar date.
_ROWS = [
    ("ALPHA", 2000, 8, 10, 15.0, -45.0, 40.0, 1005.0, "TS"),
    ("ALPHA", 2000, 8, 10, 15.0, -45.0, 45.0, 1000.0, "TS"),
    ("ALPHA", 2000, 8, 11, 16.5, -47.0, 70.0, 985.0, "H1"),
    ("BETA", 2000, 9, 1, 20.0, -60.0, 90.0, 970.0, "H2"),
    ("NOTNAMED", 2000, 7, 2, 25.0, -80.0, 25.0, 1010.0, "TD"),
    ("CHRIS", 2001, 9, 5, 18.0, -55.0, 50.0, 0.0, "TS"),
    ("CHRIS", 2001, 9, 6, 19.0, -57.0, 75.0, 980.0, "H1"),
    ("DEBBY", 2001, 6, 1, 27.0, -88.0, 30.0, 1009.0, "TD"),
    ("EMILY", 2001, 10, 2, 22.0, -70.0, 100.0, 960.0, "H3"),
    ("SUBTROP1", 2001, 10, 3, 30.0, -65.0, 40.0, 1002.0, "TS"),
    ("FAY", 2002, 2, 30, 12.0, -40.0, 70.0, 990.0, "H1"),
    ("GUS", 2002, 8, 20, 24.0, -75.0, 45.0, 0.0, "TS"),
]


@pytest.fixture()
def raw_storms() -> pd.DataFrame:
    """Track observations as loaded, before derived columns."""
    return pd.DataFrame(_ROWS, columns=COLUMNS)


@pytest.fixture()
def storms(raw_storms: pd.DataFrame) -> pd.DataFrame:
    """Track observations with wind_speed_mph and observation_date."""
    return derive_columns(raw_storms)


@pytest.fixture()
def storms_csv(tmp_path: Path, raw_storms: pd.DataFrame) -> Path:
    """The fixture rows written to a CSV file."""
    path = tmp_path / "storms.csv"
    raw_storms.to_csv(path, index=False)
    return path


@pytest.fixture()
def tmp_output_dir(tmp_path: Path) -> Path:
    """Provide a temporary output directory."""
    out = tmp_path / "outputs"
    out.mkdir()
    return out
