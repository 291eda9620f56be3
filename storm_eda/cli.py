"""
storm-eda: load the storm track CSV, derive columns and render the report.

Usage examples
--------------
# Default input (config.DEFAULT_INPUT or $STORM_EDA_CSV) and output root:
storm-eda

# Explicit input, custom window, tables and captions only:
storm-eda -i data/storms.csv --out-root analysis_outputs/storms \
  --start-year 1960 --end-year 2000 --no-plots
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from storm_eda.clean_storms import load_storms
from storm_eda.config import (
    DATE_COL,
    DEFAULT_END_YEAR,
    DEFAULT_INPUT,
    DEFAULT_OUT_ROOT,
    DEFAULT_START_YEAR,
    configure_logging,
)
from storm_eda.errors import DataUnavailable
from storm_eda.exploratory_analysis import build_report
from storm_eda.feature_engineering import derive_columns

logger = logging.getLogger(__name__)


def _safe_rel(path: Path) -> str:
    """Return a nice relative path if possible; otherwise absolute string."""
    try:
        return os.path.relpath(path, start=Path.cwd())
    except ValueError:
        return str(path)


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Exploratory analysis report over historical storm tracks.")
    p.add_argument("-i", "--input", default=str(DEFAULT_INPUT), help="Storm track CSV (NAME, YEAR, MONTH, DAY, LAT, LONG, WIND_KTS, PRESSURE, CAT).")
    p.add_argument("--out-root", default=str(DEFAULT_OUT_ROOT), help="Output directory root.")
    p.add_argument("--start-year", type=int, default=DEFAULT_START_YEAR, help=f"First year of the yearly series (default: {DEFAULT_START_YEAR}).")
    p.add_argument("--end-year", type=int, default=DEFAULT_END_YEAR, help=f"Last year of the yearly series (default: {DEFAULT_END_YEAR}).")
    p.add_argument("--no-plots", action="store_true", help="Write tables and captions only.")
    p.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    args = p.parse_args(argv)
    if args.start_year > args.end_year:
        p.error(f"--start-year {args.start_year} is after --end-year {args.end_year}")
    return args


def run(input_path: Path, out_root: Path, start_year: int, end_year: int, make_plots: bool = True) -> dict:
    """Load, derive and report; returns the run metadata written to run_metadata.json."""
    raw = load_storms(input_path)
    df = derive_columns(raw)

    out_root.mkdir(parents=True, exist_ok=True)
    report = build_report(df, out_root, start_year, end_year, make_plots=make_plots)

    meta = {
        "input": str(input_path),
        "rows": int(len(df)),
        "invalid_dates": int(df[DATE_COL].isna().sum()),
        "start_year": start_year,
        "end_year": end_year,
        "plots": make_plots,
        "sections": report["sections"],
        "failed_sections": report["failed_sections"],
        "outputs": {
            "report": _safe_rel(Path(report["report"])),
            "tables_dir": _safe_rel(out_root / "tables"),
            "plots_dir": _safe_rel(out_root / "plots") if make_plots else None,
        },
    }
    meta_path = out_root / "run_metadata.json"
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)
    logger.info("Wrote metadata: %s", meta_path)
    return meta


def main(argv=None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)

    logger.info("Loading input: %s", args.input)
    try:
        meta = run(
            input_path=Path(args.input),
            out_root=Path(args.out_root),
            start_year=args.start_year,
            end_year=args.end_year,
            make_plots=not args.no_plots,
        )
    except DataUnavailable as e:
        logger.error("%s", e)
        sys.exit(2)

    logger.info("Storm report completed. Outputs:")
    print(json.dumps(meta, indent=2))


if __name__ == "__main__":
    main()
