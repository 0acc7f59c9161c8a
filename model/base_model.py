#!/usr/bin/env python3
"""
Base model module for the Brand Elasticity Analysis.

Defines the result containers shared by all brand demand models and the
abstract base class they implement.
"""
import math
import numpy as np
import pandas as pd
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from model.constants import INTERCEPT, LOGPRICE, STATUS_EMPTY, STATUS_FAILED
from model.exceptions import ResultsError
from model.predictors import column_name
from utils.logging_utils import logger


@dataclass(frozen=True)
class ModelResult:
    """One fitted coefficient for one term in one brand's model."""
    brand_id: int
    term: str
    estimate: float
    r_squared: float
    std_error: float = float("nan")
    t_value: float = float("nan")
    p_value: float = float("nan")


@dataclass
class BrandModel:
    """
    Result set of one brand's demand model.

    ``terms`` holds the surviving coefficients (intercept first). Empty and
    failed models carry no terms; their fit statistics are NaN.
    """
    brand_id: int
    terms: List[ModelResult] = field(default_factory=list)
    r_squared: float = float("nan")
    adj_r_squared: float = float("nan")
    n_obs: int = 0
    criterion: str = "aic"
    criterion_value: float = float("nan")
    status: str = STATUS_EMPTY
    dropped_terms: List[str] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def is_estimated(self) -> bool:
        return self.status not in (STATUS_EMPTY, STATUS_FAILED)

    def coefficient(self, term: str, default: float = 0.0) -> float:
        """Estimate for ``term``, or ``default`` when the model does not retain it."""
        for result in self.terms:
            if result.term == term:
                return result.estimate
        return default

    def has_term(self, term: str) -> bool:
        return any(result.term == term for result in self.terms)

    def to_frame(self) -> pd.DataFrame:
        """One row per surviving term."""
        columns = [f.name for f in ModelResult.__dataclass_fields__.values()]
        return pd.DataFrame([asdict(r) for r in self.terms], columns=columns)


class BaseDemandModel(ABC):
    """
    Abstract base class for per-brand demand models.

    Subclasses implement the three stages of a brand fit:
    1. ``prepare_data`` selects the fitting sample from the wide table
    2. ``build_model`` assembles the design matrix
    3. ``fit`` estimates the model and returns a BrandModel
    """

    def __init__(self, model_name: str = "base_model", model_config: Optional[Dict[str, Any]] = None):
        self.model_name = model_name
        self.model_config = model_config or {}
        self.fitted_models: Dict[int, BrandModel] = {}

    @abstractmethod
    def prepare_data(self, wide: pd.DataFrame, brand_id: int) -> pd.DataFrame:
        """
        Select the fitting sample for one brand.

        Parameters
        ----------
        wide : pandas.DataFrame
            Week x brand wide table.
        brand_id : int
            Target brand.

        Returns
        -------
        pandas.DataFrame
            Rows usable for fitting, with the response and all predictors.
        """
        pass

    @abstractmethod
    def build_model(self) -> Any:
        """
        Assemble the design matrix from the prepared sample.

        Raises
        ------
        ModelBuildError
            If no prepared sample is available.
        """
        pass

    @abstractmethod
    def fit(self, wide: pd.DataFrame, brand_id: int) -> BrandModel:
        """
        Fit one brand's model.

        Returns
        -------
        BrandModel
            Always returned, even for degenerate samples.
        """
        pass

    def summarize_results(self) -> Dict[str, Any]:
        """
        Summarize the brand models fitted so far.

        Returns
        -------
        dict
            Counts by status and own-price elasticity statistics.

        Raises
        ------
        ResultsError
            If no model has been fitted.
        """
        if not self.fitted_models:
            raise ResultsError("No brand models have been fitted")

        models = list(self.fitted_models.values())
        own = [m.coefficient(column_name(LOGPRICE, m.brand_id)) for m in models if m.is_estimated]
        r2 = [m.r_squared for m in models if m.is_estimated and not math.isnan(m.r_squared)]

        summary: Dict[str, Any] = {"n_brands": len(models)}
        for model in models:
            key = f"{model.status}_count"
            summary[key] = summary.get(key, 0) + 1

        if own:
            summary["mean_own_price_elasticity"] = float(np.mean(own))
            summary["median_own_price_elasticity"] = float(np.median(own))
        if r2:
            summary["mean_r_squared"] = float(np.mean(r2))

        summary["mean_terms_retained"] = float(np.mean(
            [len([t for t in m.terms if t.term != INTERCEPT]) for m in models]
        ))
        logger.debug(f"{self.model_name} summary: {summary}")
        return summary
