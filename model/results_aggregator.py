#!/usr/bin/env python3
"""
Aggregation of per-brand model results.

Collects the surviving coefficients of every brand model into one long table,
classifies each term relative to the brand whose model it belongs to, and
condenses them into one summary row per brand. A term type a brand's model
does not retain counts as a zero effect, so every brand stays comparable.
"""
import numpy as np
import pandas as pd
from typing import Iterable, List, Optional

from model.base_model import BrandModel
from model.constants import (
    BRAND, BRAND_ID, CROSS_PRICE, CROSS_PROMOTION, LOGPRICE, OTHER_TERM,
    OWN_PRICE, PROMOTION_METRICS
)
from model.predictors import PredictorKey
from utils.logging_utils import logger

COEFFICIENT_COLUMNS = [
    BRAND_ID, BRAND, "term", "metric", "term_brand_id", "term_type",
    "estimate", "std_error", "t_value", "p_value", "r_squared", "n_obs", "status",
]

FIT_COLUMNS = [
    BRAND_ID, "status", "n_obs", "n_terms", "r_squared", "adj_r_squared",
    "criterion", "criterion_value", "dropped_terms", "message",
]

SUMMARY_COLUMNS = [
    BRAND_ID, BRAND, "own_price_elasticity", "max_cross_price",
    "max_abs_cross_promotion", "r_squared", "n_obs", "status",
]


def classify_term(term: str, brand_id: int) -> str:
    """
    Classify a term of ``brand_id``'s model.

    own_price: the brand's own log price
    cross_price: another brand's log price
    cross_promotion: another brand's feature, display or TPR
    other: intercept and the brand's own promotion variables
    """
    key = PredictorKey.parse(term)
    if key is None:
        return OTHER_TERM
    if key.metric == LOGPRICE:
        return OWN_PRICE if key.brand_id == int(brand_id) else CROSS_PRICE
    if key.metric in PROMOTION_METRICS and key.brand_id != int(brand_id):
        return CROSS_PROMOTION
    return OTHER_TERM


def _brand_names(lookup: Optional[pd.DataFrame]) -> dict:
    if lookup is None:
        return {}
    return dict(zip(lookup[BRAND_ID].astype(int), lookup[BRAND]))


def collect_coefficients(models: Iterable[BrandModel], lookup: Optional[pd.DataFrame] = None) -> pd.DataFrame:
    """
    Concatenate every brand's surviving terms into one long table.

    Empty and failed models contribute no rows.
    """
    names = _brand_names(lookup)
    rows: List[dict] = []
    for model in models:
        for result in model.terms:
            key = PredictorKey.parse(result.term)
            rows.append({
                BRAND_ID: int(model.brand_id),
                BRAND: names.get(int(model.brand_id)),
                "term": result.term,
                "metric": key.metric if key else None,
                "term_brand_id": key.brand_id if key else None,
                "term_type": classify_term(result.term, model.brand_id),
                "estimate": result.estimate,
                "std_error": result.std_error,
                "t_value": result.t_value,
                "p_value": result.p_value,
                "r_squared": result.r_squared,
                "n_obs": model.n_obs,
                "status": model.status,
            })

    coefficients = pd.DataFrame(rows, columns=COEFFICIENT_COLUMNS)
    coefficients["term_brand_id"] = pd.to_numeric(coefficients["term_brand_id"]).astype("Int64")
    logger.info(f"Collected {len(coefficients)} coefficients from "
                f"{coefficients[BRAND_ID].nunique()} brand models")
    return coefficients


def model_fit_table(models: Iterable[BrandModel]) -> pd.DataFrame:
    """One row of fit statistics per brand model."""
    rows = [{
        BRAND_ID: int(m.brand_id),
        "status": m.status,
        "n_obs": m.n_obs,
        "n_terms": len(m.terms),
        "r_squared": m.r_squared,
        "adj_r_squared": m.adj_r_squared,
        "criterion": m.criterion,
        "criterion_value": m.criterion_value,
        "dropped_terms": ";".join(m.dropped_terms),
        "message": m.message,
    } for m in models]
    return pd.DataFrame(rows, columns=FIT_COLUMNS)


def summarize_brands(
    coefficients: pd.DataFrame,
    lookup: Optional[pd.DataFrame] = None,
    fits: Optional[pd.DataFrame] = None
) -> pd.DataFrame:
    """
    One summary row per brand.

    Parameters
    ----------
    coefficients : pd.DataFrame
        Output of ``collect_coefficients``.
    lookup : pd.DataFrame, optional
        Brand lookup (brand_id, brand). Every brand in it gets a row, whether
        or not its model produced any coefficient. Defaults to the brands in
        ``coefficients``.
    fits : pd.DataFrame, optional
        Output of ``model_fit_table``; supplies R², n_obs and status for
        brands without coefficients.

    Returns
    -------
    pd.DataFrame
        own_price_elasticity: first own-price term, else 0
        max_cross_price: largest cross-price coefficient, else 0
        max_abs_cross_promotion: largest absolute cross-promotion coefficient, else 0
    """
    if lookup is None:
        ids = sorted(int(b) for b in coefficients[BRAND_ID].unique())
        lookup = pd.DataFrame({BRAND_ID: ids, BRAND: [None] * len(ids)})

    fit_index = fits.set_index(BRAND_ID) if fits is not None else None

    rows = []
    for brand_id, brand in zip(lookup[BRAND_ID].astype(int), lookup[BRAND]):
        terms = coefficients[coefficients[BRAND_ID] == brand_id]
        own = terms.loc[terms["term_type"] == OWN_PRICE, "estimate"]
        cross = terms.loc[terms["term_type"] == CROSS_PRICE, "estimate"]
        promo = terms.loc[terms["term_type"] == CROSS_PROMOTION, "estimate"]

        if fit_index is not None and brand_id in fit_index.index:
            fit = fit_index.loc[brand_id]
            r_squared, n_obs, status = fit["r_squared"], fit["n_obs"], fit["status"]
        elif not terms.empty:
            first = terms.iloc[0]
            r_squared, n_obs, status = first["r_squared"], first["n_obs"], first["status"]
        else:
            r_squared, n_obs, status = np.nan, 0, None

        rows.append({
            BRAND_ID: brand_id,
            BRAND: brand,
            "own_price_elasticity": float(own.iloc[0]) if not own.empty else 0.0,
            "max_cross_price": float(cross.max()) if not cross.empty else 0.0,
            "max_abs_cross_promotion": float(promo.abs().max()) if not promo.empty else 0.0,
            "r_squared": float(r_squared),
            "n_obs": int(n_obs),
            "status": status,
        })

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
