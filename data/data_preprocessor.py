#!/usr/bin/env python3
"""
Data Preprocessor for Brand Elasticity Analysis

This module turns raw scanner transactions and the product lookup into the
observation table the reshaper consumes: one row per source record with a
dense brand id, week, units, unit price and 0/1 promotion flags.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, Optional, Tuple

from model.constants import (
    BRAND, BRAND_ID, OBS_DISPLAY, OBS_FEATURE, OBS_PRICE, OBS_TPR, OBS_UNITS,
    OBSERVATION_COLUMNS, WEEK
)
from model.exceptions import DataValidationError
from utils.logging_utils import logger, LoggingManager
from utils.data_utils import missing_columns


class DataPreprocessor:
    """
    Joins transactions to products, assigns brand ids and derives observations.

    Parameters
    ----------
    product_col : str
        Product code column shared by both tables.
    week_col, units_col, spend_col, base_price_col : str
        Transaction columns.
    feature_col, display_col, tpr_col : str
        Transaction promotion flag columns.
    brand_col : str
        Product lookup column holding the brand description.
    category_col : str, optional
        Product lookup column used to restrict the analysis to one category.
    category : str, optional
        Category value to keep. No filter is applied when empty.
    """

    def __init__(
        self,
        product_col: str = "UPC",
        week_col: str = "WEEK_END_DATE",
        units_col: str = "UNITS",
        spend_col: str = "SPEND",
        base_price_col: str = "BASE_PRICE",
        feature_col: str = "FEATURE",
        display_col: str = "DISPLAY",
        tpr_col: str = "TPR_ONLY",
        brand_col: str = "DESCRIPTION",
        category_col: Optional[str] = "SUB_CATEGORY",
        category: Optional[str] = None
    ):
        self.product_col = product_col
        self.week_col = week_col
        self.units_col = units_col
        self.spend_col = spend_col
        self.base_price_col = base_price_col
        self.feature_col = feature_col
        self.display_col = display_col
        self.tpr_col = tpr_col
        self.brand_col = brand_col
        self.category_col = category_col
        self.category = category

    @classmethod
    def from_config(cls, app_config: Any) -> "DataPreprocessor":
        """Build a preprocessor from an AppConfig."""
        return cls(
            category_col=app_config.data_category_col,
            category=app_config.data_category,
            **app_config.data_columns()
        )

    @property
    def transaction_columns(self):
        return [self.product_col, self.week_col, self.units_col, self.spend_col,
                self.base_price_col, self.feature_col, self.display_col, self.tpr_col]

    @property
    def product_columns(self):
        cols = [self.product_col, self.brand_col]
        if self.category and self.category_col:
            cols.append(self.category_col)
        return cols

    def preprocess(self, transactions: pd.DataFrame, products: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Run the full preprocessing chain.

        Returns
        -------
        tuple of (observations, brand_lookup)
        """
        joined = self.join_products(transactions, products)
        lookup = self.build_brand_lookup(joined)
        observations = self.build_observations(joined, lookup)
        return observations, lookup

    def join_products(self, transactions: pd.DataFrame, products: pd.DataFrame) -> pd.DataFrame:
        """
        Inner-join transactions to the product lookup and apply the category filter.

        Raises
        ------
        DataValidationError
            If required columns are missing or no rows survive the filter.
        """
        missing = missing_columns(transactions, self.transaction_columns)
        if missing:
            raise DataValidationError(f"Missing transaction columns: {missing}")
        missing = missing_columns(products, self.product_columns)
        if missing:
            raise DataValidationError(f"Missing product columns: {missing}")

        lookup = products[self.product_columns]
        duplicated = lookup[self.product_col].duplicated()
        if duplicated.any():
            LoggingManager.log_warning(logger, "Dropping duplicate product lookup rows",
                                       {"count": int(duplicated.sum())})
            lookup = lookup[~duplicated]

        if self.category and self.category_col:
            lookup = lookup[lookup[self.category_col] == self.category]
            logger.info(f"Filtered products to {self.category_col} == '{self.category}': {len(lookup)} products")

        joined = transactions.merge(lookup, on=self.product_col, how="inner")
        if joined.empty:
            raise DataValidationError(
                "No transactions remain after joining products",
                {"category_col": self.category_col, "category": self.category}
            )

        LoggingManager.log_dataframe_info(logger, "joined transactions", joined)
        return joined

    def build_brand_lookup(self, joined: pd.DataFrame) -> pd.DataFrame:
        """
        Assign dense brand ids 1..N by lexicographic order of brand description.
        """
        brands = sorted(joined[self.brand_col].dropna().astype(str).str.strip().unique())
        lookup = pd.DataFrame({
            BRAND_ID: np.arange(1, len(brands) + 1, dtype=int),
            BRAND: brands,
        })
        logger.info(f"Assigned ids to {len(lookup)} brands")
        return lookup

    def build_observations(self, joined: pd.DataFrame, lookup: pd.DataFrame) -> pd.DataFrame:
        """
        Derive the observation table.

        Unit price is spend / units when units are positive and the base
        (shelf) price otherwise; non-positive prices are set to missing.
        """
        brand_ids: Dict[str, int] = dict(zip(lookup[BRAND], lookup[BRAND_ID]))
        brand_names = joined[self.brand_col].astype(str).str.strip()

        units = pd.to_numeric(joined[self.units_col], errors="coerce")
        spend = pd.to_numeric(joined[self.spend_col], errors="coerce")
        base_price = pd.to_numeric(joined[self.base_price_col], errors="coerce")

        with np.errstate(divide="ignore", invalid="ignore"):
            unit_price = (spend / units).where(units > 0, base_price)
        unit_price = unit_price.where(unit_price > 0)

        observations = pd.DataFrame({
            BRAND_ID: brand_names.map(brand_ids),
            WEEK: joined[self.week_col],
            OBS_UNITS: units,
            OBS_PRICE: unit_price,
            OBS_FEATURE: self._flag(joined[self.feature_col]),
            OBS_DISPLAY: self._flag(joined[self.display_col]),
            OBS_TPR: self._flag(joined[self.tpr_col]),
        }, columns=list(OBSERVATION_COLUMNS))

        invalid = observations[BRAND_ID].isna() | observations[WEEK].isna() | \
            observations[OBS_UNITS].isna() | (observations[OBS_UNITS] < 0)
        if invalid.any():
            logger.warning(f"Dropping {int(invalid.sum())} observations with missing brand, week or units")
            observations = observations[~invalid]

        observations = observations.astype({BRAND_ID: int})
        observations = observations.reset_index(drop=True)
        logger.info(f"Built {len(observations)} observations "
                    f"({int(observations[OBS_PRICE].isna().sum())} without a valid price)")
        return observations

    @staticmethod
    def _flag(values: pd.Series) -> pd.Series:
        """Coerce a promotion column to 0/1 integers; missing counts as 0."""
        numeric = pd.to_numeric(values, errors="coerce").fillna(0)
        return (numeric != 0).astype(int)
