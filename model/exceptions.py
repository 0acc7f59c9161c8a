#!/usr/bin/env python3
"""
Custom exceptions for the Brand Elasticity Analysis.

This module provides a hierarchy of exception classes tailored to the error
scenarios that may occur while preparing data, fitting brand models and
exporting results.
"""


class ElasticityError(Exception):
    """Base exception class for all brand elasticity analysis errors."""
    def __init__(self, message, details=None):
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self):
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


# Data-related errors
class DataError(ElasticityError):
    """Error related to data loading, validation, or preparation."""
    pass


class DataFormatError(DataError):
    """Error related to data format or schema."""
    pass


class DataValidationError(DataError):
    """Error related to data validation."""
    pass


# Model-related errors
class ModelError(ElasticityError):
    """Base class for model-related errors."""
    pass


class ModelBuildError(ModelError):
    """Error related to assembling a design matrix."""
    pass


class FittingError(ModelError):
    """Error related to fitting a regression."""
    pass


class StepwiseError(ModelError):
    """Error raised when backward elimination cannot proceed."""
    pass


# Configuration-related errors
class ConfigurationError(ElasticityError):
    """Error related to configuration."""
    pass


# Execution-related errors
class ExecutionError(ElasticityError):
    """Error related to execution of the analysis."""
    pass


class RunnerError(ExecutionError):
    """Error related to the model runner."""
    pass


# Results-related errors
class ResultsError(ElasticityError):
    """Error related to results handling."""
    pass
