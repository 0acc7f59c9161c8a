#!/usr/bin/env python3
"""
Tests for collecting and summarizing brand model results.
"""
import unittest
import os
import sys

import numpy as np
import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from model.base_model import BrandModel, ModelResult
from model.constants import STATUS_EMPTY, STATUS_REDUCED
from model.results_aggregator import (
    SUMMARY_COLUMNS, classify_term, collect_coefficients, model_fit_table, summarize_brands
)


def brand_model(brand_id, estimates, r_squared=0.8, n_obs=50):
    terms = [ModelResult(brand_id, term, value, r_squared) for term, value in estimates.items()]
    return BrandModel(brand_id=brand_id, terms=terms, r_squared=r_squared,
                      n_obs=n_obs, status=STATUS_REDUCED)


class TestResultsAggregator(unittest.TestCase):
    """Tests for the results aggregator."""

    def setUp(self):
        """Three brands; brand 2 keeps no own price, brand 3 has no usable weeks."""
        self.lookup = pd.DataFrame({"brand_id": [1, 2, 3], "brand": ["ACT", "LISTERINE", "SCOPE"]})
        self.models = [
            brand_model(1, {"Intercept": 4.0, "LOGPRICE1": -2.1, "LOGPRICE2": 0.4,
                            "LOGPRICE3": 0.9, "FEATURE1": 0.3, "DISPLAY2": -0.7, "TPR3": 0.2}),
            brand_model(2, {"Intercept": 3.0, "LOGPRICE1": 0.5}, r_squared=0.6, n_obs=40),
            BrandModel(brand_id=3, status=STATUS_EMPTY, message="no usable weeks"),
        ]

    def test_classify_term(self):
        """Terms are classified relative to the model's own brand."""
        self.assertEqual(classify_term("LOGPRICE1", 1), "own_price")
        self.assertEqual(classify_term("LOGPRICE2", 1), "cross_price")
        self.assertEqual(classify_term("DISPLAY2", 1), "cross_promotion")
        self.assertEqual(classify_term("FEATURE1", 1), "other")
        self.assertEqual(classify_term("Intercept", 1), "other")

    def test_collect_coefficients(self):
        """Every surviving term becomes one row; empty models add none."""
        coefficients = collect_coefficients(self.models, self.lookup)

        self.assertEqual(len(coefficients), 9)
        self.assertEqual(set(coefficients["brand_id"]), {1, 2})
        row = coefficients[(coefficients["brand_id"] == 1) & (coefficients["term"] == "LOGPRICE3")].iloc[0]
        self.assertEqual(row["brand"], "ACT")
        self.assertEqual(row["metric"], "LOGPRICE")
        self.assertEqual(row["term_brand_id"], 3)
        self.assertEqual(row["term_type"], "cross_price")
        intercept = coefficients[coefficients["term"] == "Intercept"].iloc[0]
        self.assertTrue(pd.isna(intercept["term_brand_id"]))

    def test_summary_one_row_per_brand(self):
        """The summary covers every brand in the lookup."""
        coefficients = collect_coefficients(self.models, self.lookup)
        summary = summarize_brands(coefficients, self.lookup, model_fit_table(self.models))

        self.assertEqual(list(summary.columns), SUMMARY_COLUMNS)
        self.assertEqual(list(summary["brand_id"]), [1, 2, 3])

    def test_summary_values(self):
        """Own price, largest cross price and largest absolute cross promotion."""
        coefficients = collect_coefficients(self.models, self.lookup)
        summary = summarize_brands(coefficients, self.lookup).set_index("brand_id")

        self.assertAlmostEqual(summary.loc[1, "own_price_elasticity"], -2.1)
        self.assertAlmostEqual(summary.loc[1, "max_cross_price"], 0.9)
        self.assertAlmostEqual(summary.loc[1, "max_abs_cross_promotion"], 0.7)
        self.assertAlmostEqual(summary.loc[1, "r_squared"], 0.8)
        self.assertEqual(summary.loc[1, "n_obs"], 50)

    def test_missing_terms_count_as_zero(self):
        """A brand that keeps no own price or promotion terms reports zeros."""
        coefficients = collect_coefficients(self.models, self.lookup)
        summary = summarize_brands(coefficients, self.lookup).set_index("brand_id")

        self.assertEqual(summary.loc[2, "own_price_elasticity"], 0.0)
        self.assertAlmostEqual(summary.loc[2, "max_cross_price"], 0.5)
        self.assertEqual(summary.loc[2, "max_abs_cross_promotion"], 0.0)

    def test_empty_brand_summary(self):
        """A brand with no result set gets zeros and a missing R²."""
        coefficients = collect_coefficients(self.models, self.lookup)
        summary = summarize_brands(coefficients, self.lookup, model_fit_table(self.models)).set_index("brand_id")

        self.assertEqual(summary.loc[3, "own_price_elasticity"], 0.0)
        self.assertEqual(summary.loc[3, "max_cross_price"], 0.0)
        self.assertTrue(np.isnan(summary.loc[3, "r_squared"]))
        self.assertEqual(summary.loc[3, "n_obs"], 0)
        self.assertEqual(summary.loc[3, "status"], STATUS_EMPTY)

    def test_summary_without_lookup(self):
        """Without a lookup the brands in the coefficient table are summarized."""
        coefficients = collect_coefficients(self.models)
        summary = summarize_brands(coefficients)
        self.assertEqual(list(summary["brand_id"]), [1, 2])

    def test_model_fit_table(self):
        """One fit row per model, including empty ones."""
        fits = model_fit_table(self.models)
        self.assertEqual(len(fits), 3)
        self.assertEqual(list(fits["n_terms"]), [7, 2, 0])
        self.assertEqual(fits.loc[2, "message"], "no usable weeks")


if __name__ == "__main__":
    unittest.main()
