"""
Configuration package for Brand Elasticity Analysis.

This package provides configuration management functionality for the
brand elasticity analysis project.
"""

from config.config_manager import AppConfig, ConfigManager

__all__ = ['AppConfig', 'ConfigManager']
