#!/usr/bin/env python3
"""
Tests for the scanner data simulator.
"""
import unittest
import json
import tempfile
import os
import sys

import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from config.default_config import DEFAULT_CATEGORY
from data.simulation import OTHER_CATEGORY, generate_synthetic_data


class TestSimulation(unittest.TestCase):
    """Tests for generate_synthetic_data."""

    def test_layout(self):
        """Tables follow the transactions/products layout."""
        transactions, products = generate_synthetic_data(
            n_brands=2, n_products_per_brand=2, n_stores=3, n_weeks=10, include_other_category=False
        )

        self.assertEqual(len(transactions), 2 * 2 * 3 * 10)
        for col in ["UPC", "WEEK_END_DATE", "UNITS", "SPEND", "BASE_PRICE", "FEATURE", "DISPLAY", "TPR_ONLY"]:
            self.assertIn(col, transactions.columns)
        self.assertEqual(len(products), 4)
        self.assertEqual(set(products["SUB_CATEGORY"]), {DEFAULT_CATEGORY})
        self.assertTrue(set(transactions["UPC"]) <= set(products["UPC"]))
        self.assertTrue((transactions["UNITS"] >= 0).all())
        self.assertTrue(set(transactions["TPR_ONLY"]) <= {0, 1})

    def test_deterministic(self):
        """The same seed reproduces the same tables."""
        first = generate_synthetic_data(n_weeks=8, seed=3)
        second = generate_synthetic_data(n_weeks=8, seed=3)
        pd.testing.assert_frame_equal(first[0], second[0])
        pd.testing.assert_frame_equal(first[1], second[1])

    def test_other_category(self):
        """The extra product sits in a different sub-category."""
        _, products = generate_synthetic_data(n_weeks=4)
        other = products[products["SUB_CATEGORY"] == OTHER_CATEGORY]
        self.assertEqual(len(other), 1)
        self.assertTrue((products.loc[products["SUB_CATEGORY"] == DEFAULT_CATEGORY, "TRUE_OWN_ELASTICITY"] < 0).all())

    def test_output_dir(self):
        """Tables and true elasticities are saved when requested."""
        with tempfile.TemporaryDirectory() as tmp_dir:
            generate_synthetic_data(n_brands=2, n_weeks=4, output_dir=tmp_dir)
            self.assertTrue(os.path.exists(os.path.join(tmp_dir, "transactions.parquet")))
            self.assertTrue(os.path.exists(os.path.join(tmp_dir, "products.csv")))
            with open(os.path.join(tmp_dir, "simulation_metadata.json")) as f:
                metadata = json.load(f)
            self.assertEqual(len(metadata["true_elasticities"]), 2)

    def test_invalid_sizes(self):
        """Non-positive sizes are rejected."""
        with self.assertRaises(ValueError):
            generate_synthetic_data(n_brands=0)


if __name__ == "__main__":
    unittest.main()
