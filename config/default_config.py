#!/usr/bin/env python3
"""
Default configuration for the Brand Elasticity Analysis.

This module contains default values for column names, the category filter,
model settings and output locations. Column defaults follow the Dunnhumby
"Breakfast at the Frat" scanner data layout.
"""
import os

# Data defaults
DEFAULT_TRANSACTIONS_PATH = "data/transactions.csv"
DEFAULT_PRODUCTS_PATH = "data/products.csv"
DEFAULT_CATEGORY_COL = "SUB_CATEGORY"
DEFAULT_CATEGORY = "MOUTHWASHES (ANTISEPTIC)"

# Results and output defaults
DEFAULT_RESULTS_DIR = "results"
DEFAULT_LOG_FILE = os.path.join("logs", "elasticity_analysis.log")
DEFAULT_LOG_LEVEL = "INFO"

# Source column names
DEFAULT_COLUMNS = {
    "product_col": "UPC",
    "week_col": "WEEK_END_DATE",
    "units_col": "UNITS",
    "spend_col": "SPEND",
    "base_price_col": "BASE_PRICE",
    "feature_col": "FEATURE",
    "display_col": "DISPLAY",
    "tpr_col": "TPR_ONLY",
    "brand_col": "DESCRIPTION",
}

