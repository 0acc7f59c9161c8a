"""
Backward elimination for OLS models.

Starting from the full term set, every step refits the model once per
remaining term with that term removed and drops the term whose removal gives
the lowest information criterion, provided it improves on the current model.
The loop stops when no single removal helps. Protected terms (the intercept)
are never removed.
"""
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
import statsmodels.api as sm

from model.constants import INTERCEPT, SUPPORTED_CRITERIA
from model.exceptions import FittingError, StepwiseError
from utils.logging_utils import logger

# A removal must improve the criterion by more than this to be accepted
IMPROVEMENT_TOLERANCE = 1e-7


@dataclass
class StepwiseResult:
    """Outcome of a backward elimination run."""
    results: object
    terms: List[str]
    dropped: List[str] = field(default_factory=list)
    history: List[Tuple[str, float]] = field(default_factory=list)
    criterion_value: float = float("nan")


def fit_ols(y: pd.Series, X: pd.DataFrame):
    """
    Fit an OLS regression; X must already contain the intercept column.

    Raises:
        FittingError: If statsmodels cannot fit the design
    """
    try:
        return sm.OLS(y, X).fit()
    except (np.linalg.LinAlgError, ValueError) as e:
        raise FittingError("OLS fit failed", {"n_obs": len(y), "n_params": X.shape[1], "error": str(e)}) from e


def criterion_value(results, criterion: str = "aic") -> float:
    """Information criterion of a fitted statsmodels OLS result."""
    if criterion not in SUPPORTED_CRITERIA:
        raise ValueError(f"Unsupported criterion: {criterion}")
    return float(results.aic if criterion == "aic" else results.bic)


def _evaluate(y: pd.Series, X: pd.DataFrame, columns: Sequence[str], criterion: str):
    try:
        results = fit_ols(y, X[list(columns)])
    except FittingError as e:
        raise StepwiseError("OLS fit failed during backward elimination", str(e)) from e

    value = criterion_value(results, criterion)
    if not math.isfinite(value):
        raise StepwiseError(
            f"{criterion.upper()} is not finite, so backward elimination cannot proceed",
            {"n_obs": int(results.nobs), "n_params": len(columns)}
        )
    if results.df_resid <= 0:
        # no residual degrees of freedom, the criterion reflects rounding noise
        raise StepwiseError(
            "Saturated fit leaves no residual degrees of freedom, so backward elimination cannot proceed",
            {"n_obs": int(results.nobs), "n_params": len(columns)}
        )
    return results, value


def backward_eliminate(
    y: pd.Series,
    X: pd.DataFrame,
    criterion: str = "aic",
    protected: Sequence[str] = (INTERCEPT,)
) -> StepwiseResult:
    """
    Greedy backward elimination guided by an information criterion.

    Parameters
    ----------
    y : pd.Series
        Response.
    X : pd.DataFrame
        Full design matrix, including the protected columns.
    criterion : str
        "aic" or "bic".
    protected : sequence of str
        Columns that are never removed.

    Returns
    -------
    StepwiseResult
        The reduced fit, the surviving terms in design order and the removal
        history as (term, criterion after removal) pairs.

    Raises
    ------
    StepwiseError
        If any fit fails, the criterion is not finite, or the fit is saturated
        (no residual degrees of freedom).
    """
    kept = [c for c in protected if c in X.columns]
    terms = [c for c in X.columns if c not in kept]

    current, current_value = _evaluate(y, X, kept + terms, criterion)
    result = StepwiseResult(results=current, terms=list(terms), criterion_value=current_value)

    while terms:
        best_term = None
        best_value = math.inf
        best_results = None
        for term in terms:
            remaining = [t for t in terms if t != term]
            candidate, value = _evaluate(y, X, kept + remaining, criterion)
            # strict comparison keeps the earliest term on ties
            if value < best_value:
                best_term, best_value, best_results = term, value, candidate

        if best_value >= current_value - IMPROVEMENT_TOLERANCE:
            break

        terms.remove(best_term)
        current, current_value = best_results, best_value
        result.dropped.append(best_term)
        result.history.append((best_term, best_value))
        logger.debug(f"Dropped {best_term}: {criterion.upper()} -> {best_value:.4f}")

    result.results = current
    result.terms = list(terms)
    result.criterion_value = current_value
    return result
