"""Shared column names, constants and logging setup for the storm EDA."""

from __future__ import annotations

import logging
import os
from pathlib import Path

# ---------- USER CONFIG ----------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
# Point STORM_EDA_CSV at a track file to skip passing --input every run.
DEFAULT_INPUT = Path(os.environ.get("STORM_EDA_CSV", PROJECT_ROOT / "data" / "storms.csv"))
DEFAULT_OUT_ROOT = PROJECT_ROOT / "analysis_outputs" / "storm_eda"
# Years with consistent reconnaissance coverage in the track archive.
DEFAULT_START_YEAR = 1951
DEFAULT_END_YEAR = 2008
# -------------------------------

NAME_COL = "NAME"
YEAR_COL = "YEAR"
MONTH_COL = "MONTH"
DAY_COL = "DAY"
LAT_COL = "LAT"
LONG_COL = "LONG"
WIND_KTS_COL = "WIND_KTS"
PRESSURE_COL = "PRESSURE"
CAT_COL = "CAT"

REQUIRED_COLUMNS = [
    NAME_COL, YEAR_COL, MONTH_COL, DAY_COL,
    LAT_COL, LONG_COL, WIND_KTS_COL, PRESSURE_COL, CAT_COL,
]
NUMERIC_COLUMNS = [YEAR_COL, MONTH_COL, DAY_COL, LAT_COL, LONG_COL, WIND_KTS_COL, PRESSURE_COL]

WIND_MPH_COL = "wind_speed_mph"
DATE_COL = "observation_date"

UNNAMED_SENTINELS = frozenset({"NOTNAMED", "SUBTROP1"})
HURRICANE_MARKER = "H"
KNOTS_TO_MPH = 1.15
# Saffir-Simpson category 1 lower bound.
HURRICANE_MPH = 74.0

LOG_FORMAT = "%(asctime)s %(levelname)s - %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install the root handler used by the command-line entry point."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
