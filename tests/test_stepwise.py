#!/usr/bin/env python3
"""
Tests for backward elimination.
"""
import unittest
from unittest.mock import Mock, patch
import os
import sys

import numpy as np
import pandas as pd

sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

from model.constants import INTERCEPT
from model.exceptions import FittingError, StepwiseError
from model.stepwise import backward_eliminate, criterion_value, fit_ols


def _orthogonal_to(columns: np.ndarray, rng: np.random.Generator, n: int) -> np.ndarray:
    """Random vector with zero projection on every given column."""
    z = rng.normal(size=n)
    beta, *_ = np.linalg.lstsq(columns, z, rcond=None)
    return z - columns @ beta


class TestBackwardElimination(unittest.TestCase):
    """Tests for backward_eliminate."""

    def setUp(self):
        """Build a design where x1 drives y and x2 carries no information."""
        rng = np.random.default_rng(7)
        n = 60
        x1 = rng.normal(size=n)
        y = 1.0 + 2.0 * x1 + rng.normal(scale=0.1, size=n)
        x2 = _orthogonal_to(np.column_stack([np.ones(n), x1, y]), rng, n)

        self.y = pd.Series(y, name="y")
        self.X = pd.DataFrame({INTERCEPT: 1.0, "x1": x1, "x2": x2})

    def test_uninformative_term_dropped(self):
        """A term orthogonal to the response only adds the parameter penalty."""
        result = backward_eliminate(self.y, self.X)

        self.assertEqual(result.dropped, ["x2"])
        self.assertEqual(result.terms, ["x1"])
        self.assertEqual(list(result.results.params.index), [INTERCEPT, "x1"])
        self.assertAlmostEqual(result.results.params["x1"], 2.0, delta=0.1)

    def test_criterion_improves(self):
        """Each accepted removal lowers the criterion."""
        full = fit_ols(self.y, self.X)
        result = backward_eliminate(self.y, self.X)

        self.assertLess(result.criterion_value, criterion_value(full))
        self.assertEqual(len(result.history), len(result.dropped))
        self.assertAlmostEqual(result.history[-1][1], result.criterion_value)

    def test_intercept_is_protected(self):
        """The intercept survives even when it carries no information."""
        y = self.y - self.y.mean()
        X = self.X.copy()
        X["x1"] = X["x1"] - X["x1"].mean()
        result = backward_eliminate(y, X)
        self.assertIn(INTERCEPT, result.results.params.index)

    def test_bic(self):
        """BIC-guided elimination drops the uninformative term as well."""
        result = backward_eliminate(self.y, self.X, criterion="bic")
        self.assertNotIn("x2", result.terms)
        self.assertAlmostEqual(result.criterion_value, result.results.bic)

    def test_informative_terms_kept(self):
        """Nothing is removed when every term is needed."""
        X = self.X.drop(columns=["x2"])
        result = backward_eliminate(self.y, X)
        self.assertEqual(result.dropped, [])
        self.assertEqual(result.terms, ["x1"])

    @patch('model.stepwise.fit_ols')
    def test_non_finite_criterion_raises(self, mock_fit):
        """A saturated fit has no finite criterion."""
        mock_fit.return_value = Mock(aic=float("-inf"), nobs=3)
        with self.assertRaises(StepwiseError):
            backward_eliminate(self.y, self.X)

    def test_saturated_fit_raises(self):
        """A design with as many terms as observations cannot be reduced."""
        y = self.y.iloc[:3]
        X = self.X.iloc[:3].assign(x3=[0.5, -1.0, 2.0])
        with self.assertRaises(StepwiseError):
            backward_eliminate(y, X)

    @patch('model.stepwise.fit_ols')
    def test_fit_failure_raises(self, mock_fit):
        """Fit failures surface as StepwiseError."""
        mock_fit.side_effect = FittingError("singular")
        with self.assertRaises(StepwiseError):
            backward_eliminate(self.y, self.X)

    def test_unsupported_criterion(self):
        """criterion_value only knows AIC and BIC."""
        with self.assertRaises(ValueError):
            criterion_value(fit_ols(self.y, self.X), "hqic")


if __name__ == "__main__":
    unittest.main()
