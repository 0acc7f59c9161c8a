"""
Brand Elasticity Analysis Module

This package estimates own- and cross-brand price and promotion effects from
weekly scanner data. The package includes components for:

- Data loading, preprocessing and reshaping
- Per-brand log-log demand models with backward elimination
- Result aggregation and brand x brand effect matrices
- Utility functions for managing the analysis process

Main components:
- model: Demand models, aggregation and effect matrices
- data: Data loading, preprocessing and simulation tools
- config: Configuration management
- utils: Utility functions for logging, timing, etc.
"""

__version__ = '0.1.0'

from model.model_runner import ModelRunner, ElasticityPipeline
from data.data_loader import DataLoader
from data.data_preprocessor import DataPreprocessor
from config.config_manager import ConfigManager

__all__ = [
    'ModelRunner',
    'ElasticityPipeline',
    'DataLoader',
    'DataPreprocessor',
    'ConfigManager',
]
