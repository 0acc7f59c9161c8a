#!/usr/bin/env python3
"""
Tests for reshaping observations into the week x brand table.
"""
import unittest
import os
import sys

import numpy as np
import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from data.reshaper import build_wide_table, wide_columns
from model.exceptions import DataValidationError


def _observations(rows):
    return pd.DataFrame(rows, columns=["brand_id", "week", "units", "price", "feature", "display", "tpr"])


class TestReshaper(unittest.TestCase):
    """Tests for build_wide_table."""

    def setUp(self):
        """Two brands over two weeks, several products per brand-week."""
        self.observations = _observations([
            (1, "2009-01-21", 10, 2.0, 0, 1, 0),
            (1, "2009-01-21", 5, 8.0, 1, 0, 0),
            (2, "2009-01-21", 7, 3.0, 0, 0, 0),
            (1, "2009-01-14", 4, 5.0, 0, 0, 1),
            (2, "2009-01-14", 0, 3.5, 0, 0, 0),
        ])

    def test_column_layout(self):
        """Columns are metric-major with brands in id order."""
        self.assertEqual(
            wide_columns([2, 1]),
            ["UNITS1", "UNITS2", "LOGPRICE1", "LOGPRICE2", "FEATURE1", "FEATURE2",
             "DISPLAY1", "DISPLAY2", "TPR1", "TPR2"]
        )

    def test_aggregation(self):
        """Units sum, price is the geometric mean, flags are ORed."""
        wide = build_wide_table(self.observations)

        self.assertEqual(list(wide.index), ["2009-01-14", "2009-01-21"])
        self.assertEqual(wide.index.name, "week")
        week = wide.loc["2009-01-21"]
        self.assertEqual(week["UNITS1"], 15)
        self.assertAlmostEqual(week["LOGPRICE1"], np.log(4.0))
        self.assertEqual(week["FEATURE1"], 1)
        self.assertEqual(week["DISPLAY1"], 1)
        self.assertEqual(week["TPR1"], 0)
        self.assertEqual(wide.loc["2009-01-14", "UNITS2"], 0)
        self.assertAlmostEqual(wide.loc["2009-01-14", "LOGPRICE2"], np.log(3.5))

    def test_brand_without_observations_gets_columns(self):
        """Every requested brand has columns, missing where it has no data."""
        wide = build_wide_table(self.observations, brand_ids=[1, 2, 3])

        self.assertEqual(list(wide.columns), wide_columns([1, 2, 3]))
        self.assertTrue(wide["UNITS3"].isna().all())
        self.assertTrue(wide["LOGPRICE3"].isna().all())

    def test_brands_outside_lookup_dropped(self):
        """Observations for unknown brands do not create columns."""
        wide = build_wide_table(self.observations, brand_ids=[1])
        self.assertEqual(list(wide.columns), wide_columns([1]))
        self.assertEqual(wide.loc["2009-01-21", "UNITS1"], 15)

    def test_no_valid_price(self):
        """A brand-week without a positive price has a missing log price."""
        observations = _observations([
            (1, "2009-01-14", 3, np.nan, 0, 0, 0),
            (1, "2009-01-21", 3, 2.0, 0, 0, 0),
        ])
        wide = build_wide_table(observations)
        self.assertTrue(np.isnan(wide.loc["2009-01-14", "LOGPRICE1"]))
        self.assertTrue(np.isfinite(wide["LOGPRICE1"]).sum() == 1)

    def test_empty_observations(self):
        """No observations gives an empty table with every column."""
        wide = build_wide_table(self.observations.iloc[0:0], brand_ids=[1, 2])
        self.assertTrue(wide.empty)
        self.assertEqual(list(wide.columns), wide_columns([1, 2]))

    def test_missing_columns(self):
        """Observation tables must carry every observation column."""
        with self.assertRaises(DataValidationError):
            build_wide_table(self.observations.drop(columns=["tpr"]))


if __name__ == "__main__":
    unittest.main()
