"""
Log-log demand regression for one brand.

For a target brand the model regresses log units on every brand's log price,
feature, display and TPR variables (own and competitors), then simplifies the
fit by backward elimination. The fitting sample is the set of weeks where the
target brand sold a positive number of units and every predictor is present.
"""

from typing import Any, Dict, List, Optional, Tuple
import numpy as np
import pandas as pd

from model.base_model import BaseDemandModel, BrandModel, ModelResult
from model.constants import (
    DEFAULT_CRITERION, INTERCEPT, STATUS_EMPTY, STATUS_FAILED, STATUS_FULL,
    STATUS_REDUCED, SUPPORTED_CRITERIA, UNITS
)
from model.exceptions import FittingError, ModelBuildError
from model.predictors import brands_in_columns, column_name, predictor_keys
from model.stepwise import backward_eliminate, criterion_value, fit_ols
from utils.logging_utils import get_logger

logger = get_logger()

RESPONSE = "log_units"


class LogLogDemandModel(BaseDemandModel):
    """
    Per-brand log-log OLS demand model with backward elimination.

    Degenerate samples never raise: a brand without usable weeks yields an
    ``empty`` BrandModel, an OLS failure yields a ``failed`` one, and a
    stepwise failure falls back to the full model.
    """

    def __init__(
        self,
        criterion: str = DEFAULT_CRITERION,
        stepwise: bool = True,
        model_name: str = "loglog_demand_model",
        model_config: Optional[Dict[str, Any]] = None
    ):
        super().__init__(model_name=model_name, model_config=model_config)

        if criterion not in SUPPORTED_CRITERIA:
            raise ModelBuildError(f"Unsupported criterion: {criterion}")

        self.criterion = criterion
        self.stepwise = stepwise

        self.brand_id: Optional[int] = None
        self.predictors: List[str] = []
        self.prepared_data: Optional[pd.DataFrame] = None
        self.constant_terms: List[str] = []

    def prepare_data(self, wide: pd.DataFrame, brand_id: int) -> pd.DataFrame:
        """
        Select the fitting sample for ``brand_id``.

        Weeks with missing or non-positive units for the target brand are
        excluded, then any week missing any predictor of any brand.

        Raises:
            ModelBuildError: If the wide table lacks a required predictor column
        """
        brand_id = int(brand_id)
        brand_ids = brands_in_columns(wide.columns)
        self.brand_id = brand_id
        self.predictors = [key.name for key in predictor_keys(brand_id, brand_ids)]

        missing = [c for c in self.predictors if c not in wide.columns]
        if missing:
            raise ModelBuildError(f"Wide table is missing predictor columns for brand {brand_id}", missing)

        units_col = column_name(UNITS, brand_id)
        if units_col not in wide.columns:
            raise ModelBuildError(f"Wide table has no {units_col} column")

        demand = wide[units_col]
        sample = wide[demand.notna() & (demand > 0)]

        prepared = sample[self.predictors].copy()
        prepared.insert(0, RESPONSE, np.log(sample[units_col].astype(float)))
        prepared = prepared.dropna(subset=self.predictors)

        logger.debug(f"Brand {brand_id}: {len(wide)} weeks, {len(sample)} with positive demand, "
                     f"{len(prepared)} complete cases")

        self.prepared_data = prepared
        return prepared

    def build_model(self) -> Tuple[pd.Series, pd.DataFrame]:
        """
        Assemble the response and design matrix from the prepared sample.

        Predictors that are constant over the sample cannot be separated from
        the intercept and are left out; they are recorded in ``constant_terms``.

        Returns:
            Tuple of (response, design matrix with a leading Intercept column)

        Raises:
            ModelBuildError: If prepare_data has not been called
        """
        if self.prepared_data is None:
            raise ModelBuildError("No prepared data available. Call prepare_data first.")

        X = self.prepared_data[self.predictors]
        varying = X.nunique(dropna=False) > 1
        self.constant_terms = [c for c in self.predictors if not varying[c]]
        if self.constant_terms:
            logger.debug(f"Brand {self.brand_id}: leaving out constant predictors {self.constant_terms}")

        X = X.loc[:, [c for c in self.predictors if varying[c]]].astype(float)
        X.insert(0, INTERCEPT, 1.0)
        y = self.prepared_data[RESPONSE]
        return y, X

    def fit(self, wide: pd.DataFrame, brand_id: int) -> BrandModel:
        """
        Fit the brand's model and reduce it by backward elimination.

        Returns:
            BrandModel with one ModelResult per surviving term
        """
        prepared = self.prepare_data(wide, brand_id)
        brand_id = int(brand_id)

        if prepared.empty:
            logger.warning(f"Brand {brand_id}: no weeks with positive demand and complete predictors")
            model = BrandModel(
                brand_id=brand_id, criterion=self.criterion, status=STATUS_EMPTY,
                message="no usable weeks"
            )
            self.fitted_models[brand_id] = model
            return model

        y, X = self.build_model()

        try:
            full = fit_ols(y, X)
        except FittingError as e:
            logger.error(f"Brand {brand_id}: OLS fit failed: {str(e)}")
            model = BrandModel(
                brand_id=brand_id, n_obs=len(prepared), criterion=self.criterion,
                status=STATUS_FAILED, message=str(e)
            )
            self.fitted_models[brand_id] = model
            return model

        results = full
        status = STATUS_FULL
        dropped = list(self.constant_terms)
        message = None
        value = criterion_value(full, self.criterion)

        if self.stepwise:
            try:
                step = backward_eliminate(y, X, self.criterion)
                results = step.results
                status = STATUS_REDUCED
                dropped.extend(step.dropped)
                value = step.criterion_value
            except Exception as e:
                # stepwise refinement must never abort the run
                logger.warning(f"Brand {brand_id}: stepwise refinement failed, using full model: {str(e)}")
                message = f"stepwise failed: {str(e)}"

        model = self._to_brand_model(brand_id, results, status, dropped, value, message)
        self.fitted_models[brand_id] = model

        logger.info(f"Brand {brand_id}: {status} model with {len(model.terms) - 1} terms, "
                    f"n={model.n_obs}, R2={model.r_squared:.3f}")
        return model

    def _to_brand_model(
        self,
        brand_id: int,
        results: Any,
        status: str,
        dropped: List[str],
        value: float,
        message: Optional[str]
    ) -> BrandModel:
        r_squared = float(results.rsquared)
        terms = [
            ModelResult(
                brand_id=brand_id,
                term=str(term),
                estimate=float(results.params[term]),
                r_squared=r_squared,
                std_error=float(results.bse[term]),
                t_value=float(results.tvalues[term]),
                p_value=float(results.pvalues[term]),
            )
            for term in results.params.index
        ]
        return BrandModel(
            brand_id=brand_id,
            terms=terms,
            r_squared=r_squared,
            adj_r_squared=float(results.rsquared_adj),
            n_obs=int(results.nobs),
            criterion=self.criterion,
            criterion_value=float(value),
            status=status,
            dropped_terms=dropped,
            message=message,
        )
