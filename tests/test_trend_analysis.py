"""Tests for linear trend fitting."""

from __future__ import annotations

import math

import pandas as pd
import pytest

from storm_eda.trend_analysis import describe_trend, fit_trend, trend_line


def test_exact_line() -> None:
    s = pd.Series([3.0, 5.0, 7.0, 9.0], index=[2000, 2001, 2002, 2003])
    fit = fit_trend(s)
    assert fit["slope"] == pytest.approx(2.0)
    assert fit["r_value"] == pytest.approx(1.0)
    assert fit["n"] == 4
    assert trend_line(s, fit).tolist() == pytest.approx(s.tolist())


def test_too_few_points() -> None:
    fit = fit_trend(pd.Series([4.0], index=[2000]))
    assert math.isnan(fit["slope"])
    assert fit["n"] == 1
    assert "Too few years" in describe_trend(fit, "storms", "Storm count")


def test_nan_values_dropped() -> None:
    s = pd.Series([1.0, float("nan"), 3.0], index=[2000, 2001, 2002])
    assert fit_trend(s)["n"] == 2


def test_describe_direction() -> None:
    s = pd.Series([9.0, 7.0, 6.0, 2.0], index=[2000, 2001, 2002, 2003])
    text = describe_trend(fit_trend(s), "mph", "Mean wind speed")
    assert text.startswith("Mean wind speed decreases")
    assert "mph per year" in text
