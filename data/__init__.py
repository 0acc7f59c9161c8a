"""
Data package for Brand Elasticity Analysis.

This package provides data loading, preprocessing, reshaping and simulation
functionality for the brand elasticity analysis project.
"""

from data.data_loader import DataLoader
from data.data_preprocessor import DataPreprocessor
from data.reshaper import build_wide_table

__all__ = ['DataLoader', 'DataPreprocessor', 'build_wide_table']
