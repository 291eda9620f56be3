"""
Narrative storm report: charts, captions and a markdown summary.

Each section computes one aggregate, saves it under tables/, draws it under
plots/ and writes a short caption. A section whose aggregate fails
(EmptyInput, UndefinedRatio, ...) is reported by name and the rest of the
report still renders.

Usage:
    from storm_eda.exploratory_analysis import build_report
    meta = build_report(derived_df, "analysis_outputs/storm_eda", 1951, 2008)
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple, Optional

import matplotlib
matplotlib.use("Agg")  # headless
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.ticker import PercentFormatter

from storm_eda.aggregations import (
    count_by_month,
    distinct_storm_count_by_year,
    distinct_storm_count_by_year_and_category,
    mean_by_category_year_month_day_location,
    mean_wind_speed_by_year,
    storm_count_by_category,
    summary_statistics,
    year_over_year_table,
)
from storm_eda.config import (
    CAT_COL,
    HURRICANE_MPH,
    LAT_COL,
    LONG_COL,
    WIND_MPH_COL,
    YEAR_COL,
)
from storm_eda.errors import EmptyInput, StormDataError
from storm_eda.feature_engineering import is_hurricane, within_years
from storm_eda.trend_analysis import describe_trend, fit_trend, trend_line

logger = logging.getLogger(__name__)

sns.set_theme(style="whitegrid")


class SectionResult(NamedTuple):
    table: pd.DataFrame
    caption: str
    draw: Callable


@dataclass
class Section:
    key: str
    title: str
    caption: str = ""
    plot: Optional[str] = None
    table: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# --------------------------- section builders ---------------------------

def named_storms_per_year(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    counts = distinct_storm_count_by_year(within_years(df, start, end), exclude_unnamed=True)
    fit = fit_trend(counts)
    trend = trend_line(counts, fit)

    caption = (
        f"From {counts.index.min()} to {counts.index.max()} the archive averages "
        f"{counts.mean():.1f} named storms per year; the busiest year is "
        f"{counts.idxmax()} with {counts.max()}. "
        + describe_trend(fit, "storms", "The yearly count of named storms")
    )

    def draw(ax):
        ax.plot(counts.index, counts.values, marker="o", linewidth=1.5, label="Named storms")
        ax.plot(trend.index, trend.values, color="black", linestyle="--", label="Linear trend")
        ax.set_xlabel("Year")
        ax.set_ylabel("Distinct named storms")
        ax.legend()

    table = pd.DataFrame({"storms": counts, "trend": trend.round(2)}).reset_index()
    return SectionResult(table, caption, draw)


def _yearly_change(df: pd.DataFrame, start: int, end: int) -> pd.DataFrame:
    """Named-storm counts with absolute and percent change, one row per year after the first."""
    counts = distinct_storm_count_by_year(within_years(df, start, end), exclude_unnamed=True)
    return year_over_year_table(counts)


def _change_colors(change: pd.Series) -> List[str]:
    return ["tab:red" if v >= 0 else "tab:blue" for v in change.values]


def storm_count_change(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    table = _yearly_change(df, start, end)
    change = table.set_index(YEAR_COL)["absolute_change"]
    caption = (
        f"The largest single-season jump is {change.max():+.0f} storms in {change.idxmax()}, "
        f"the steepest drop {change.min():+.0f} in {change.idxmin()}. "
        f"Across {len(change)} consecutive-year pairs the mean change is {change.mean():+.2f}."
    )

    def draw(ax):
        ax.bar(change.index, change.values, color=_change_colors(change))
        ax.axhline(0, color="black", linewidth=0.8)
        ax.set_xlabel("Year")
        ax.set_ylabel("Change in named storms vs previous year")

    return SectionResult(table, caption, draw)


def storm_count_percent_change(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    table = _yearly_change(df, start, end)
    change = table.set_index(YEAR_COL)["percent_change"]
    caption = (
        f"In relative terms the count swings from {change.min():+.0%} ({change.idxmin()}) "
        f"to {change.max():+.0%} ({change.idxmax()}) year over year."
    )

    def draw(ax):
        ax.bar(change.index, change.values, color=_change_colors(change))
        ax.axhline(0, color="black", linewidth=0.8)
        ax.yaxis.set_major_formatter(PercentFormatter(1.0))
        ax.set_xlabel("Year")
        ax.set_ylabel("Change vs previous year")

    return SectionResult(table, caption, draw)


def hurricanes_by_category(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    window = within_years(df, start, end)
    counts = distinct_storm_count_by_year_and_category(window, category_filter=is_hurricane)
    table = counts.reset_index()
    totals = storm_count_by_category(window, category_filter=is_hurricane).sort_values(ascending=False)
    caption = (
        f"Hurricanes split across {len(totals)} intensity categories. "
        f"{totals.index[0]} is the most frequent, reached by {totals.iloc[0]} distinct storms; "
        f"{totals.index[-1]} is the rarest with {totals.iloc[-1]}."
    )

    def draw(ax):
        sns.lineplot(data=table, x=YEAR_COL, y="storms", hue=CAT_COL, marker="o", ax=ax)
        ax.set_xlabel("Year")
        ax.set_ylabel("Distinct hurricanes")

    return SectionResult(table, caption, draw)


def mean_wind_by_year(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    means = mean_wind_speed_by_year(within_years(df, start, end))
    fit = fit_trend(means)
    trend = trend_line(means, fit)
    caption = (
        f"Mean recorded wind ranges from {means.min():.1f} mph ({means.idxmin()}) "
        f"to {means.max():.1f} mph ({means.idxmax()}). "
        + describe_trend(fit, "mph", "Mean wind speed")
    )

    def draw(ax):
        ax.plot(means.index, means.values, marker="o", color="tab:purple", label="Mean wind (mph)")
        ax.plot(trend.index, trend.values, color="black", linestyle="--", label="Linear trend")
        ax.set_xlabel("Year")
        ax.set_ylabel("Mean wind speed (mph)")
        ax.legend()

    table = pd.DataFrame({"mean_wind_mph": means.round(2), "trend": trend.round(2)}).reset_index()
    return SectionResult(table, caption, draw)


def _wind_values(df: pd.DataFrame) -> pd.Series:
    values = df[WIND_MPH_COL].dropna()
    if values.empty:
        raise EmptyInput("No wind speed observations to plot")
    return values


def wind_histogram(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    values = _wind_values(df)
    share = (values >= HURRICANE_MPH).mean()
    caption = (
        f"Half of all track points carry winds below {values.median():.0f} mph; "
        f"{share:.0%} are at hurricane strength ({HURRICANE_MPH:.0f} mph or more)."
    )

    def draw(ax):
        sns.histplot(values, bins=30, color="tab:blue", ax=ax)
        ax.axvline(HURRICANE_MPH, color="black", linestyle="--", linewidth=1)
        ax.set_xlabel("Wind speed (mph)")
        ax.set_ylabel("Track observations")

    table = values.describe().round(2).rename_axis("statistic").reset_index()
    return SectionResult(table, caption, draw)


def wind_density(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    _wind_values(df)
    rows = df.dropna(subset=[WIND_MPH_COL])
    data = pd.DataFrame({
        WIND_MPH_COL: rows[WIND_MPH_COL],
        "strength": rows[CAT_COL].map(is_hurricane).map({True: "Hurricane", False: "Non-hurricane"}),
    })
    medians = data.groupby("strength")[WIND_MPH_COL].median()
    caption = "Median wind by strength class: " + ", ".join(
        f"{k} {v:.0f} mph" for k, v in medians.items()
    ) + "."

    def draw(ax):
        sns.kdeplot(data=data, x=WIND_MPH_COL, hue="strength", common_norm=False, fill=True, ax=ax)
        ax.set_xlabel("Wind speed (mph)")
        ax.set_ylabel("Density")

    table = data.groupby("strength")[WIND_MPH_COL].describe().round(2).reset_index()
    return SectionResult(table, caption, draw)


def wind_vs_pressure(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    means = mean_by_category_year_month_day_location(df, require_positive_pressure=True)
    corr = means["mean_wind_kts"].corr(means["mean_pressure"])
    caption = (
        f"Across {len(means)} category/date/location groups with a recorded pressure, "
        f"mean wind and mean pressure correlate at r = {corr:.2f}: lower central pressure "
        f"goes with stronger winds."
    )

    def draw(ax):
        sns.scatterplot(
            data=means, x="mean_pressure", y="mean_wind_kts", hue=CAT_COL,
            s=12, alpha=0.6, linewidth=0, ax=ax,
        )
        ax.set_xlabel("Mean pressure (mb)")
        ax.set_ylabel("Mean wind (kts)")

    return SectionResult(means, caption, draw)


def track_hexbin(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    positions = df[[LONG_COL, LAT_COL]].dropna()
    if positions.empty:
        raise EmptyInput("No track positions to plot")
    cells = (positions // 5 * 5).value_counts()
    (lon, lat), n = cells.index[0], cells.iloc[0]
    caption = (
        f"{len(positions)} track points; the densest 5° cell starts at "
        f"longitude {lon:.0f}, latitude {lat:.0f} with {n} observations."
    )

    def draw(ax):
        hb = ax.hexbin(positions[LONG_COL], positions[LAT_COL], gridsize=40, cmap="Purples", mincnt=1)
        ax.figure.colorbar(hb, ax=ax, label="Track points per hexagon")
        ax.set_xlabel("Longitude")
        ax.set_ylabel("Latitude")

    table = cells.rename("observations").reset_index()
    return SectionResult(table, caption, draw)


def _month_label(month, names) -> str:
    m = int(month)
    return names[m] if 1 <= m <= 12 else str(month)


def hurricanes_by_month(df: pd.DataFrame, start: int, end: int) -> SectionResult:
    counts = count_by_month(df, category_filter=is_hurricane)
    peak = counts.idxmax()
    caption = (
        f"Hurricane activity peaks in {_month_label(peak, calendar.month_name)} with {counts.max()} "
        f"distinct named hurricanes; {len(counts)} calendar months see at least one."
    )

    def draw(ax):
        labels = [_month_label(m, calendar.month_abbr) for m in counts.index]
        ax.bar(labels, counts.values, color="tab:orange")
        ax.set_xlabel("Month")
        ax.set_ylabel("Distinct hurricanes")

    return SectionResult(counts.reset_index(), caption, draw)


SECTIONS = [
    ("named_storms_per_year", "Named storms per year", named_storms_per_year),
    ("storm_count_change", "Year-over-year change in named storms", storm_count_change),
    ("storm_count_percent_change", "Year-over-year percent change in named storms", storm_count_percent_change),
    ("hurricanes_by_category", "Hurricanes per year by category", hurricanes_by_category),
    ("mean_wind_by_year", "Mean wind speed per year", mean_wind_by_year),
    ("wind_histogram", "Distribution of wind speed", wind_histogram),
    ("wind_density", "Wind speed density: hurricanes vs weaker systems", wind_density),
    ("wind_vs_pressure", "Mean wind vs mean pressure", wind_vs_pressure),
    ("track_hexbin", "Where storms travel", track_hexbin),
    ("hurricanes_by_month", "Hurricanes by month", hurricanes_by_month),
]


# --------------------------- rendering ---------------------------

def save_plot(draw: Callable, out_path: Path, title: str) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(10, 5))
    try:
        draw(ax)
        ax.set_title(title)
        fig.tight_layout()
        fig.savefig(out_path, dpi=150)
    finally:
        plt.close(fig)


def markdown_table(df: pd.DataFrame) -> List[str]:
    cols = [str(c) for c in df.columns]
    lines = ["| " + " | ".join(cols) + " |", "|" + "|".join("---" for _ in cols) + "|"]
    for row in df.itertuples(index=False):
        lines.append("| " + " | ".join(str(v) for v in row) + " |")
    return lines


def run_section(
    key: str,
    title: str,
    builder: Callable,
    df: pd.DataFrame,
    start: int,
    end: int,
    out_root: Path,
    make_plots: bool = True,
) -> Section:
    """Build, save and caption one section; aggregation failures become a named error."""
    try:
        result = builder(df, start, end)
    except StormDataError as e:
        logger.error("Section %s failed: %s: %s", key, type(e).__name__, e)
        return Section(key, title, error=f"{type(e).__name__}: {e}")

    table_path = out_root / "tables" / f"{key}.csv"
    table_path.parent.mkdir(parents=True, exist_ok=True)
    result.table.to_csv(table_path, index=False)

    plot_rel = None
    if make_plots:
        plot_rel = f"plots/{key}.png"
        save_plot(result.draw, out_root / plot_rel, title)
        logger.info("Saved plot: %s", out_root / plot_rel)

    return Section(key, title, caption=result.caption, plot=plot_rel, table=f"tables/{key}.csv")


def write_report(
    sections: List[Section],
    stats: Optional[pd.DataFrame],
    out_path: Path,
    start: int,
    end: int,
) -> None:
    lines = [
        "# Historical tropical storm tracks",
        "",
        f"Yearly series cover {start}-{end}; distributions and maps use every observation.",
        "",
        "## Summary statistics",
        "",
    ]
    if stats is not None:
        lines.extend(markdown_table(stats.reset_index().rename(columns={"index": "column"})))
    else:
        lines.append("Summary statistics unavailable: no observations.")
    lines.append("")

    for s in sections:
        lines.append(f"## {s.title}")
        lines.append("")
        if not s.ok:
            lines.append(f"**Section failed:** {s.error}")
        else:
            if s.plot:
                lines.append(f"![{s.title}]({s.plot})")
                lines.append("")
            lines.append(s.caption)
        lines.append("")

    out_path.write_text("\n".join(lines), encoding="utf-8")


def build_report(
    df: pd.DataFrame,
    out_root: str | Path,
    start_year: int,
    end_year: int,
    make_plots: bool = True,
) -> Dict:
    """Render every section plus report.md under out_root and return run metadata."""
    out_root = Path(out_root)
    out_root.mkdir(parents=True, exist_ok=True)

    stats = None
    try:
        stats = summary_statistics(df)
        stats_path = out_root / "tables" / "summary_statistics.csv"
        stats_path.parent.mkdir(parents=True, exist_ok=True)
        stats.to_csv(stats_path)
    except EmptyInput as e:
        logger.error("Summary statistics failed: %s", e)

    sections = [
        run_section(key, title, builder, df, start_year, end_year, out_root, make_plots)
        for key, title, builder in SECTIONS
    ]

    report_path = out_root / "report.md"
    write_report(sections, stats, report_path, start_year, end_year)
    logger.info("Wrote report: %s", report_path)

    failed = [s.key for s in sections if not s.ok]
    if failed:
        logger.warning("%d section(s) failed: %s", len(failed), ", ".join(failed))

    return {
        "report": str(report_path),
        "sections": [dict(asdict(s), status="ok" if s.ok else "failed") for s in sections],
        "failed_sections": failed,
    }
