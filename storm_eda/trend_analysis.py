"""
Simple linear trends over yearly series, used as chart overlays.

fit_trend() reports:
 - slope (per year)
 - intercept
 - r_value (Pearson)
 - p_value (two-sided, slope == 0)
 - stderr (SE of slope)
 - n (observations)
"""

from __future__ import annotations

import logging
from typing import Dict

import numpy as np
import pandas as pd
from scipy.stats import linregress

logger = logging.getLogger(__name__)

_NAN_FIT = {"slope": np.nan, "intercept": np.nan, "r_value": np.nan, "p_value": np.nan, "stderr": np.nan}


def fit_trend(series: pd.Series) -> Dict[str, float]:
    """Fit value = slope * year + intercept over a year-indexed series."""
    s = series.dropna()
    n = len(s)
    x = s.index.to_numpy(dtype=float)
    y = s.to_numpy(dtype=float)
    if n < 2 or np.all(x == x[0]):
        logger.warning("Not enough distinct years to fit a trend (n=%d)", n)
        return {**_NAN_FIT, "n": n}

    res = linregress(x, y)
    return {
        "slope": float(res.slope),
        "intercept": float(res.intercept),
        "r_value": float(res.rvalue),
        "p_value": float(res.pvalue),
        "stderr": float(res.stderr),
        "n": int(n),
    }


def trend_line(series: pd.Series, fit: Dict[str, float]) -> pd.Series:
    """Fitted values on the same index as series."""
    x = series.index.to_numpy(dtype=float)
    return pd.Series(fit["slope"] * x + fit["intercept"], index=series.index, name="trend")


def describe_trend(fit: Dict[str, float], unit: str, label: str) -> str:
    if np.isnan(fit["slope"]):
        return f"Too few years ({fit['n']}) to estimate a trend in {label}."
    direction = "increases" if fit["slope"] >= 0 else "decreases"
    return (
        f"{label} {direction} {abs(fit['slope']):.3f} {unit} per year "
        f"(R² = {fit['r_value'] ** 2:.2f}, p = {fit['p_value']:.4f}, n = {fit['n']})."
    )
