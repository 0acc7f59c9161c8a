#!/usr/bin/env python3
"""
Data utility functions for the Brand Elasticity package.

This module provides column validation and small numeric helpers shared by
the data and model packages.
"""

import numpy as np
import pandas as pd
from typing import List, Sequence


def missing_columns(df: pd.DataFrame, columns: Sequence[str]) -> List[str]:
    """Return the subset of ``columns`` absent from ``df``, in the given order."""
    return [col for col in columns if col not in df.columns]


def geometric_mean(values: pd.Series) -> float:
    """
    Geometric mean of the strictly positive values in a series.

    Returns NaN when the series holds no positive value.
    """
    positive = values[values > 0]
    if positive.empty:
        return np.nan
    return float(np.exp(np.log(positive.astype(float)).mean()))
