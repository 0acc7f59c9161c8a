#!/usr/bin/env python3
"""
Week x brand reshaping of the observation table.

The wide table has one row per week and one ``{METRIC}{brand_id}`` column per
brand for each of UNITS, LOGPRICE, FEATURE, DISPLAY and TPR.

Aggregation per (week, brand):
- units: sum
- price: geometric mean of the valid (positive) prices, then log
- feature / display / TPR: maximum (logical OR)

A (week, brand) cell with no valid price gets a missing LOGPRICE rather than
log(0); such weeks drop out of any model that uses that brand's price.
"""

import numpy as np
import pandas as pd
from typing import Iterable, Optional

from model.constants import (
    BRAND_ID, DISPLAY, FEATURE, LOGPRICE, OBS_DISPLAY, OBS_FEATURE, OBS_PRICE,
    OBS_TPR, OBS_UNITS, OBSERVATION_COLUMNS, TPR, UNITS, WEEK, WIDE_METRICS
)
from model.exceptions import DataValidationError
from model.predictors import column_name
from utils.data_utils import geometric_mean, missing_columns
from utils.decorators import log_errors
from utils.logging_utils import logger, log_step

_LOG_PRICE = "log_price"

# Wide metric -> aggregated observation column
_METRIC_SOURCES = {
    UNITS: OBS_UNITS,
    LOGPRICE: _LOG_PRICE,
    FEATURE: OBS_FEATURE,
    DISPLAY: OBS_DISPLAY,
    TPR: OBS_TPR,
}


def wide_columns(brand_ids: Iterable[int]):
    """Column names of the wide table, metric-major, brands in id order."""
    ids = sorted(int(b) for b in brand_ids)
    return [column_name(metric, b) for metric in WIDE_METRICS for b in ids]


def aggregate_observations(observations: pd.DataFrame) -> pd.DataFrame:
    """
    Aggregate observations to one row per (week, brand).

    Returns a frame indexed by (week, brand_id) with columns
    units, log_price, feature, display, tpr.
    """
    grouped = observations.groupby([WEEK, BRAND_ID], sort=True).agg(
        **{
            OBS_UNITS: (OBS_UNITS, "sum"),
            OBS_PRICE: (OBS_PRICE, geometric_mean),
            OBS_FEATURE: (OBS_FEATURE, "max"),
            OBS_DISPLAY: (OBS_DISPLAY, "max"),
            OBS_TPR: (OBS_TPR, "max"),
        }
    )

    no_price = grouped[OBS_PRICE].isna()
    if no_price.any():
        logger.warning(f"{int(no_price.sum())} brand-weeks have no valid price; "
                       f"their log price is left missing")

    grouped[_LOG_PRICE] = np.log(grouped[OBS_PRICE])
    return grouped.drop(columns=[OBS_PRICE])


@log_step("Reshaping observations to wide table")
@log_errors(DataValidationError, msg="Error reshaping observations")
def build_wide_table(observations: pd.DataFrame, brand_ids: Optional[Iterable[int]] = None) -> pd.DataFrame:
    """
    Pivot the observation table into one row per week.

    Parameters
    ----------
    observations : pd.DataFrame
        Observation table with brand_id, week, units, price and flag columns.
    brand_ids : iterable of int, optional
        Every brand that must get columns. Defaults to the brands present in
        the observations. Observations for brands outside this set are dropped.

    Returns
    -------
    pd.DataFrame
        Wide table indexed by week (sorted), with every ``{METRIC}{brand_id}``
        column present even when a brand has no observations.

    Raises
    ------
    DataValidationError
        If required observation columns are missing.
    """
    missing = missing_columns(observations, OBSERVATION_COLUMNS)
    if missing:
        raise DataValidationError(f"Missing observation columns: {missing}")

    if brand_ids is None:
        ids = sorted(int(b) for b in observations[BRAND_ID].dropna().unique())
    else:
        ids = sorted(int(b) for b in brand_ids)

    unknown = ~observations[BRAND_ID].isin(ids)
    if unknown.any():
        logger.warning(f"Dropping {int(unknown.sum())} observations for brands outside the lookup")
        observations = observations[~unknown]

    columns = wide_columns(ids)
    if observations.empty:
        wide = pd.DataFrame(columns=columns, dtype=float)
        wide.index.name = WEEK
        return wide

    grouped = aggregate_observations(observations)

    blocks = []
    for metric in WIDE_METRICS:
        block = grouped[_METRIC_SOURCES[metric]].unstack(BRAND_ID).reindex(columns=ids)
        block.columns = [column_name(metric, b) for b in ids]
        blocks.append(block)

    wide = pd.concat(blocks, axis=1).sort_index()
    wide = wide[columns].astype(float)
    wide.index.name = WEEK

    logger.info(f"Wide table: {len(wide)} weeks x {len(ids)} brands")
    return wide
