#!/usr/bin/env python3
"""
Tests for reading the transaction and product tables.
"""
import unittest
import tempfile
import os
import sys

import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from data.data_loader import DataLoader, DataLoaderError
from model.exceptions import DataError


class TestDataLoader(unittest.TestCase):
    """Tests for DataLoader."""

    def setUp(self):
        """Write small source files to a temporary directory."""
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.transactions_path = os.path.join(self.tmp_dir.name, "transactions.csv")
        self.products_path = os.path.join(self.tmp_dir.name, "products.parquet")

        pd.DataFrame({
            "upc": [101, 102],
            "Week_End_Date": ["2009-01-14", "2009-01-14"],
            "QTY": [3, 4],
        }).to_csv(self.transactions_path, index=False)
        pd.DataFrame({
            "UPC": [101, 102],
            "DESCRIPTION": ["SCOPE", "LISTERINE"],
        }).to_parquet(self.products_path, index=False)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def test_load_both_formats(self):
        """CSV and Parquet files are both read."""
        loader = DataLoader(self.transactions_path, self.products_path)
        self.assertEqual(len(loader.load_transactions()), 2)
        products = loader.load_products(["UPC", "DESCRIPTION"])
        self.assertEqual(list(products["DESCRIPTION"]), ["SCOPE", "LISTERINE"])

    def test_case_insensitive_columns(self):
        """Required columns match regardless of case."""
        loader = DataLoader(self.transactions_path, self.products_path)
        transactions = loader.load_transactions(["UPC", "WEEK_END_DATE"])
        self.assertIn("UPC", transactions.columns)
        self.assertIn("WEEK_END_DATE", transactions.columns)

    def test_column_mapping(self):
        """Mapped columns are renamed before validation."""
        loader = DataLoader(self.transactions_path, self.products_path, column_mapping={"QTY": "UNITS"})
        transactions = loader.load_transactions(["UNITS"])
        self.assertEqual(list(transactions["UNITS"]), [3, 4])

    def test_missing_required_column(self):
        """A required column absent from the file raises."""
        loader = DataLoader(self.transactions_path, self.products_path)
        with self.assertRaises(DataLoaderError):
            loader.load_transactions(["SPEND"])

    def test_missing_file(self):
        """Nonexistent files are rejected at construction."""
        with self.assertRaises(DataLoaderError):
            DataLoader(os.path.join(self.tmp_dir.name, "nope.csv"), self.products_path)

    def test_unsupported_format(self):
        """Only CSV and Parquet are accepted."""
        path = os.path.join(self.tmp_dir.name, "transactions.xlsx")
        with open(path, "w") as f:
            f.write("not a spreadsheet")
        with self.assertRaises(DataError):
            DataLoader(path, self.products_path)


if __name__ == "__main__":
    unittest.main()
