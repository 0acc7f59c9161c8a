"""
Model package for Brand Elasticity Analysis.

This package provides the per-brand demand models, backward elimination,
result aggregation and effect matrices.
"""

# Import only modules that do not depend on config to avoid circular imports
from model.base_model import BaseDemandModel, BrandModel, ModelResult
from model.exceptions import ModelError, DataError, ModelBuildError, StepwiseError
from model.linear_model import LogLogDemandModel
from model.predictors import PredictorKey

# Re-export main classes for easier import by consumers
__all__ = [
    'BaseDemandModel', 'BrandModel', 'ModelResult', 'LogLogDemandModel',
    'PredictorKey', 'ModelError', 'DataError', 'ModelBuildError', 'StepwiseError',
]
