#!/usr/bin/env python3
"""
Brand x brand effect matrices.

For one predictor family (price, feature, display or TPR) the matrix has the
acting brand on the rows and the responding brand on the columns. Cell
(i, j) is the coefficient of brand i's variable in brand j's demand model;
the diagonal holds each brand's own effect. A term the responding brand's
model does not retain contributes 0.0, never a missing value.
"""
import math
import numpy as np
import pandas as pd
from typing import Dict, Iterable, Mapping, Optional, Tuple

from model.constants import (
    ACTING_BRAND, BRAND, BRAND_ID, PREDICTOR_FAMILIES, RESPONDING_BRAND
)
from model.exceptions import ResultsError
from model.predictors import column_name
from utils.logging_utils import logger

OWN_EFFECT = "is_own_effect"


def resolve_family(family: str) -> Tuple[str, str]:
    """
    Map a family name or metric prefix to (family, prefix).

    >>> resolve_family("price")
    ('price', 'LOGPRICE')
    >>> resolve_family("DISPLAY")
    ('display', 'DISPLAY')
    """
    if family in PREDICTOR_FAMILIES:
        return family, PREDICTOR_FAMILIES[family]
    for name, prefix in PREDICTOR_FAMILIES.items():
        if family == prefix:
            return name, prefix
    raise ResultsError(f"Unknown predictor family: {family}",
                       {"supported": list(PREDICTOR_FAMILIES)})


def _brand_axis(coefficients: pd.DataFrame, lookup: Optional[pd.DataFrame]) -> Tuple[list, list]:
    """Ordered brand ids and their axis labels."""
    if lookup is None:
        ids = sorted(int(b) for b in coefficients[BRAND_ID].unique())
        return ids, list(ids)
    ordered = lookup.sort_values(BRAND_ID)
    return [int(b) for b in ordered[BRAND_ID]], list(ordered[BRAND])


def build_effect_matrix(
    coefficients: pd.DataFrame,
    lookup: Optional[pd.DataFrame],
    family: str
) -> pd.DataFrame:
    """
    Build the effect matrix of one predictor family.

    Parameters
    ----------
    coefficients : pd.DataFrame
        Long coefficient table with brand_id, term and estimate columns.
    lookup : pd.DataFrame, optional
        Brand lookup; fixes the brand order and the axis labels. Without it
        the brands in ``coefficients`` are used, labelled by id.
    family : str
        "price", "feature", "display", "tpr", or the matching metric prefix.

    Returns
    -------
    pd.DataFrame
        Square float matrix, acting brand x responding brand.
    """
    _, prefix = resolve_family(family)
    ids, labels = _brand_axis(coefficients, lookup)

    estimates: Dict[Tuple[int, str], float] = {}
    for brand_id, term, estimate in zip(coefficients[BRAND_ID], coefficients["term"], coefficients["estimate"]):
        estimates.setdefault((int(brand_id), str(term)), float(estimate))

    values = np.zeros((len(ids), len(ids)), dtype=float)
    for col, responding in enumerate(ids):
        for row, acting in enumerate(ids):
            value = estimates.get((responding, column_name(prefix, acting)), 0.0)
            if not math.isfinite(value):
                logger.warning(f"Non-finite {prefix} estimate for brand {acting} in brand {responding}'s model; using 0")
                value = 0.0
            values[row, col] = value

    return pd.DataFrame(
        values,
        index=pd.Index(labels, name=ACTING_BRAND),
        columns=pd.Index(labels, name=RESPONDING_BRAND),
    )


def build_effect_matrices(
    coefficients: pd.DataFrame,
    lookup: Optional[pd.DataFrame] = None,
    families: Iterable[str] = tuple(PREDICTOR_FAMILIES)
) -> Dict[str, pd.DataFrame]:
    """Effect matrices keyed by family name, in price/feature/display/tpr order."""
    matrices = {}
    for family in families:
        name, _ = resolve_family(family)
        matrices[name] = build_effect_matrix(coefficients, lookup, name)
    logger.info(f"Built {len(matrices)} effect matrices of size {len(_brand_axis(coefficients, lookup)[0])}")
    return matrices


def matrix_to_long(matrix: pd.DataFrame, value_name: str = "effect") -> pd.DataFrame:
    """
    Flatten a matrix to one row per (acting, responding) pair.

    Rows are ordered responding-brand-major, each block in acting-brand order.
    """
    long = matrix.rename_axis(index=ACTING_BRAND, columns=RESPONDING_BRAND).reset_index().melt(
        id_vars=ACTING_BRAND, var_name=RESPONDING_BRAND, value_name=value_name
    )
    return long[[ACTING_BRAND, RESPONDING_BRAND, value_name]]


def long_to_matrix(long: pd.DataFrame, value_name: str = "effect") -> pd.DataFrame:
    """
    Pivot a long table back to a matrix.

    Brand order follows first appearance in ``long``; pairs absent from it are 0.0.
    """
    acting = pd.Index(pd.unique(long[ACTING_BRAND]), name=ACTING_BRAND)
    responding = pd.Index(pd.unique(long[RESPONDING_BRAND]), name=RESPONDING_BRAND)

    matrix = long.pivot(index=ACTING_BRAND, columns=RESPONDING_BRAND, values=value_name)
    matrix = matrix.reindex(index=acting, columns=responding).fillna(0.0).astype(float)
    matrix.index = acting
    matrix.columns = responding
    return matrix


def flatten_effect_matrices(matrices: Mapping[str, pd.DataFrame]) -> pd.DataFrame:
    """
    Join several effect matrices into one row per brand pair.

    Returns a table with acting_brand, responding_brand, is_own_effect and one
    column per family.
    """
    if not matrices:
        return pd.DataFrame(columns=[ACTING_BRAND, RESPONDING_BRAND, OWN_EFFECT])

    flat = None
    for family, matrix in matrices.items():
        long = matrix_to_long(matrix, family)
        flat = long if flat is None else flat.merge(long, on=[ACTING_BRAND, RESPONDING_BRAND], how="left")

    flat.insert(2, OWN_EFFECT, flat[ACTING_BRAND] == flat[RESPONDING_BRAND])
    families = list(matrices)
    flat[families] = flat[families].fillna(0.0)
    return flat
