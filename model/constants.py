"""
Constants for the brand elasticity models.

This module centralizes the metric prefixes, predictor families and default
model settings used throughout the codebase.
"""
from typing import Dict, Tuple

# =======================================================
# Wide-table metrics
# =======================================================

UNITS = "UNITS"
LOGPRICE = "LOGPRICE"
FEATURE = "FEATURE"
DISPLAY = "DISPLAY"
TPR = "TPR"

# Metrics that appear in a wide row, per brand
WIDE_METRICS: Tuple[str, ...] = (UNITS, LOGPRICE, FEATURE, DISPLAY, TPR)

# Metrics used as predictors, in design-matrix order
PREDICTOR_METRICS: Tuple[str, ...] = (LOGPRICE, FEATURE, DISPLAY, TPR)

# Promotion metrics (cross-promotion classification)
PROMOTION_METRICS: Tuple[str, ...] = (FEATURE, DISPLAY, TPR)

# Predictor family name -> wide-table metric prefix
PREDICTOR_FAMILIES: Dict[str, str] = {
    "price": LOGPRICE,
    "feature": FEATURE,
    "display": DISPLAY,
    "tpr": TPR,
}

INTERCEPT = "Intercept"

# =======================================================
# Observation table columns
# =======================================================

BRAND_ID = "brand_id"
BRAND = "brand"
WEEK = "week"
OBS_UNITS = "units"
OBS_PRICE = "price"
OBS_FEATURE = "feature"
OBS_DISPLAY = "display"
OBS_TPR = "tpr"

OBSERVATION_COLUMNS: Tuple[str, ...] = (
    BRAND_ID, WEEK, OBS_UNITS, OBS_PRICE, OBS_FEATURE, OBS_DISPLAY, OBS_TPR
)

# =======================================================
# Term classification
# =======================================================

OWN_PRICE = "own_price"
CROSS_PRICE = "cross_price"
CROSS_PROMOTION = "cross_promotion"
OTHER_TERM = "other"

# =======================================================
# Brand model status
# =======================================================

STATUS_REDUCED = "reduced"   # stepwise elimination succeeded
STATUS_FULL = "full"         # full model kept (stepwise disabled or failed)
STATUS_EMPTY = "empty"       # no usable weeks
STATUS_FAILED = "failed"     # OLS could not be fitted

# =======================================================
# Default model configuration
# =======================================================

SUPPORTED_CRITERIA = ("aic", "bic")
DEFAULT_CRITERION = "aic"
DEFAULT_STEPWISE = True

# Axis names for effect matrices
ACTING_BRAND = "acting_brand"
RESPONDING_BRAND = "responding_brand"
