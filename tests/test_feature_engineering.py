"""Tests for derived columns and row predicates."""

from __future__ import annotations

import datetime

import numpy as np
import pandas as pd
import pytest

from storm_eda.config import DATE_COL, WIND_MPH_COL
from storm_eda.errors import InvalidDate
from storm_eda.feature_engineering import (
    derive_columns,
    hurricanes,
    is_hurricane,
    is_named,
    make_date,
    named_storms,
    within_years,
)


# ---------------------------------------------------------------------------
# derive_columns
# ---------------------------------------------------------------------------


class TestDeriveColumns:
    def test_wind_speed_mph(self, storms: pd.DataFrame) -> None:
        assert storms[WIND_MPH_COL].tolist() == pytest.approx(
            (storms["WIND_KTS"] * 1.15).tolist()
        )

    def test_mph_round_trips_to_knots(self, storms: pd.DataFrame) -> None:
        np.testing.assert_allclose(storms[WIND_MPH_COL] / 1.15, storms["WIND_KTS"])

    def test_observation_date(self, storms: pd.DataFrame) -> None:
        assert storms.loc[0, DATE_COL] == pd.Timestamp(2000, 8, 10)
        assert pd.api.types.is_datetime64_any_dtype(storms[DATE_COL])

    def test_invalid_date_is_null_not_fatal(self, storms: pd.DataFrame) -> None:
        fay = storms[storms["NAME"] == "FAY"]
        assert fay[DATE_COL].isna().all()
        assert storms[DATE_COL].notna().sum() == len(storms) - 1

    def test_input_not_mutated(self, raw_storms: pd.DataFrame) -> None:
        before = raw_storms.copy()
        derive_columns(raw_storms)
        pd.testing.assert_frame_equal(raw_storms, before)
        assert WIND_MPH_COL not in raw_storms.columns

    def test_empty_frame(self, raw_storms: pd.DataFrame) -> None:
        out = derive_columns(raw_storms.iloc[0:0])
        assert out.empty
        assert {WIND_MPH_COL, DATE_COL} <= set(out.columns)


class TestMakeDate:
    def test_valid(self) -> None:
        assert make_date(1999, 9, 15) == datetime.date(1999, 9, 15)

    def test_float_parts(self) -> None:
        assert make_date(1999.0, 9.0, 15.0) == datetime.date(1999, 9, 15)

    @pytest.mark.parametrize("parts", [(2002, 2, 30), (2001, 13, 1), (2001, 6, np.nan), (2001, 6, 1.5)])
    def test_invalid(self, parts) -> None:
        with pytest.raises(InvalidDate):
            make_date(*parts)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


class TestPredicates:
    @pytest.mark.parametrize("cat,expected", [("H1", True), ("H5", True), ("TS", False), ("TD", False), (None, False)])
    def test_is_hurricane(self, cat, expected) -> None:
        assert is_hurricane(cat) is expected

    @pytest.mark.parametrize("name,expected", [("ALPHA", True), ("NOTNAMED", False), ("SUBTROP1", False), (np.nan, False)])
    def test_is_named(self, name, expected) -> None:
        assert is_named(name) is expected

    def test_named_storms_drops_sentinels(self, storms: pd.DataFrame) -> None:
        names = set(named_storms(storms)["NAME"])
        assert "NOTNAMED" not in names
        assert "SUBTROP1" not in names
        assert len(named_storms(storms)) == len(storms) - 2

    def test_hurricanes(self, storms: pd.DataFrame) -> None:
        assert set(hurricanes(storms)["CAT"]) == {"H1", "H2", "H3"}

    def test_within_years_is_inclusive(self, storms: pd.DataFrame) -> None:
        assert set(within_years(storms, 2001, 2002)["YEAR"]) == {2001, 2002}

    def test_within_years_ignores_row_order(self, storms: pd.DataFrame) -> None:
        shuffled = storms.sample(frac=1, random_state=3)
        assert len(within_years(shuffled, 2000, 2000)) == 5

    def test_within_years_rejects_reversed_range(self, storms: pd.DataFrame) -> None:
        with pytest.raises(ValueError):
            within_years(storms, 2002, 2000)
