#!/usr/bin/env python3
"""
Scanner Data Loader for Brand Elasticity Analysis.

This module provides a DataLoader class that reads the two source tables the
analysis needs: weekly store/product transactions and the product lookup.

ASSUMPTIONS:
- Both tables are stored as CSV or Parquet files
- Column names match the configured names, up to letter case
- Data fits in memory

EDGE CASES:
- Missing files and unsupported formats raise DataLoaderError on construction
- Missing required columns raise DataLoaderError after reading
- Empty tables are returned as-is with a warning
"""

import pandas as pd
from typing import Dict, List, Optional, Sequence, Union
from pathlib import Path

from model.exceptions import DataFormatError
from utils.logging_utils import logger
from utils.data_utils import missing_columns


class DataLoaderError(DataFormatError):
    """Exception raised for errors in the data loading process."""
    pass


class DataLoader:
    """
    Reads transaction and product lookup tables for the elasticity pipeline.

    Parameters
    ----------
    transactions_path : str or Path
        Path to the weekly transactions file (CSV or Parquet).
    products_path : str or Path
        Path to the product lookup file (CSV or Parquet).
    column_mapping : dict, optional
        Mapping from actual column names to the names the pipeline expects.
    """

    SUPPORTED_FORMATS = ('.csv', '.parquet')

    def __init__(
        self,
        transactions_path: Union[str, Path],
        products_path: Union[str, Path],
        column_mapping: Optional[Dict[str, str]] = None
    ):
        self.transactions_path = self._check_path(transactions_path)
        self.products_path = self._check_path(products_path)
        self.column_mapping = dict(column_mapping or {})

        logger.info(f"Initialized DataLoader with transactions={self.transactions_path}, "
                    f"products={self.products_path}")

    def _check_path(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        if not path.exists():
            raise DataLoaderError(f"Data file not found: {path}")
        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise DataLoaderError(f"Unsupported file format: {path.suffix}")
        return path

    def load_transactions(self, required_columns: Sequence[str] = ()) -> pd.DataFrame:
        """Read the transactions table and validate its columns."""
        return self._load(self.transactions_path, required_columns, "transactions")

    def load_products(self, required_columns: Sequence[str] = ()) -> pd.DataFrame:
        """Read the product lookup table and validate its columns."""
        return self._load(self.products_path, required_columns, "products")

    def _load(self, path: Path, required_columns: Sequence[str], label: str) -> pd.DataFrame:
        try:
            if path.suffix.lower() == '.csv':
                data = pd.read_csv(path)
            else:
                data = pd.read_parquet(path)
        except (OSError, ValueError) as e:
            raise DataLoaderError(f"Error loading {label} from {path}", str(e)) from e

        if self.column_mapping:
            rename_dict = {k: v for k, v in self.column_mapping.items() if k in data.columns}
            if rename_dict:
                logger.info(f"Renaming columns: {rename_dict}")
                data = data.rename(columns=rename_dict)

        data = self._match_case_insensitive(data, required_columns)

        missing = missing_columns(data, required_columns)
        if missing:
            raise DataLoaderError(f"Missing required {label} columns: {missing}")

        if data.empty:
            logger.warning(f"{label.capitalize()} table {path} is empty")

        logger.info(f"Loaded {label} with {len(data)} rows and {len(data.columns)} columns")
        return data

    @staticmethod
    def _match_case_insensitive(data: pd.DataFrame, required_columns: Sequence[str]) -> pd.DataFrame:
        mapping: Dict[str, str] = {}
        lowered: Dict[str, List[str]] = {}
        for col in data.columns:
            lowered.setdefault(str(col).lower(), []).append(col)

        for req_col in required_columns:
            if req_col in data.columns:
                continue
            candidates = lowered.get(req_col.lower(), [])
            if len(candidates) == 1:
                mapping[candidates[0]] = req_col
                logger.info(f"Found case-insensitive match: {candidates[0]} -> {req_col}")

        return data.rename(columns=mapping) if mapping else data
