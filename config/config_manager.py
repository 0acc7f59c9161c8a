"""
Configuration manager for the Brand Elasticity Analysis.

This module provides a centralized configuration system built on a single
dataclass with prefixed attributes, JSON file loading and environment
variable overrides.
"""
import json
import os
from typing import Dict, Any, Optional, Union
from pathlib import Path
from dataclasses import dataclass, asdict, field, fields

from config.default_config import (
    DEFAULT_CATEGORY, DEFAULT_CATEGORY_COL, DEFAULT_COLUMNS, DEFAULT_LOG_FILE,
    DEFAULT_LOG_LEVEL, DEFAULT_PRODUCTS_PATH, DEFAULT_RESULTS_DIR,
    DEFAULT_TRANSACTIONS_PATH
)
from model.constants import DEFAULT_CRITERION, DEFAULT_STEPWISE, SUPPORTED_CRITERIA
from utils.logging_utils import get_logger

logger = get_logger()


@dataclass
class AppConfig:
    """Unified application configuration parameters with prefixed attributes"""
    # App settings
    results_dir: str = DEFAULT_RESULTS_DIR
    save_results: bool = True
    log_level: str = DEFAULT_LOG_LEVEL
    log_to_file: bool = False
    log_file: str = DEFAULT_LOG_FILE

    # Model settings (with model_ prefix)
    model_criterion: str = DEFAULT_CRITERION
    model_stepwise: bool = DEFAULT_STEPWISE

    # Data settings (with data_ prefix)
    data_transactions_path: str = DEFAULT_TRANSACTIONS_PATH
    data_products_path: str = DEFAULT_PRODUCTS_PATH
    data_category_col: str = DEFAULT_CATEGORY_COL
    data_category: str = DEFAULT_CATEGORY
    data_product_col: str = DEFAULT_COLUMNS["product_col"]
    data_week_col: str = DEFAULT_COLUMNS["week_col"]
    data_units_col: str = DEFAULT_COLUMNS["units_col"]
    data_spend_col: str = DEFAULT_COLUMNS["spend_col"]
    data_base_price_col: str = DEFAULT_COLUMNS["base_price_col"]
    data_feature_col: str = DEFAULT_COLUMNS["feature_col"]
    data_display_col: str = DEFAULT_COLUMNS["display_col"]
    data_tpr_col: str = DEFAULT_COLUMNS["tpr_col"]
    data_brand_col: str = DEFAULT_COLUMNS["brand_col"]
    data_column_mappings: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value with fallback to default.

        Unprefixed names resolve to their ``model_``/``data_`` field, so
        ``get("criterion")`` and ``get("model_criterion")`` are equivalent.

        Args:
            key: Configuration key to look up
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        try:
            return getattr(self, key)
        except AttributeError:
            return default

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if not name.startswith('_'):
            for prefix in ("model_", "data_"):
                prefixed = f"{prefix}{name}"
                if prefixed in self.__dataclass_fields__:
                    return object.__getattribute__(self, prefixed)
        raise AttributeError(f"'{self.__class__.__name__}' has no attribute '{name}'")

    def data_columns(self) -> Dict[str, str]:
        """Source column names keyed the way DataPreprocessor expects them."""
        return {key: getattr(self, f"data_{key}") for key in DEFAULT_COLUMNS}


class ConfigManager:
    """
    Unified configuration manager with a typed configuration object.
    """

    # Environment variable prefix for overrides
    ENV_PREFIX = "ELASTICITY_"

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to a JSON configuration file.
        """
        self.app_config = AppConfig()

        if config_path:
            self.load_config(config_path)

        self._apply_env_overrides()

        self.validate()

    @staticmethod
    def _field_names() -> Dict[str, Any]:
        return {f.name: f for f in fields(AppConfig)}

    def load_config(self, config_path: Union[str, Path]) -> None:
        """
        Load configuration from a JSON file.

        Keys may be given with or without their ``model_``/``data_`` prefix.

        Args:
            config_path: Path to a JSON configuration file.

        Raises:
            ConfigurationError: If the file exists but is not valid JSON
        """
        from model.exceptions import ConfigurationError

        config_path = Path(config_path)
        if not config_path.exists():
            logger.warning(f"Configuration file not found: {config_path}")
            return

        try:
            with open(config_path, 'r') as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid configuration file {config_path}", str(e)) from e

        app_fields = self._field_names()
        for key, value in config_dict.items():
            if key in app_fields:
                setattr(self.app_config, key, value)
                continue
            for prefix in ("model_", "data_"):
                if f"{prefix}{key}" in app_fields:
                    setattr(self.app_config, f"{prefix}{key}", value)
                    break
            else:
                logger.warning(f"Ignoring unknown configuration key: {key}")

        logger.info(f"Loaded configuration from {config_path}")

    def _apply_env_overrides(self) -> None:
        """Apply configuration overrides from environment variables."""
        for field_name in self._field_names():
            env_name = f"{self.ENV_PREFIX}{field_name.upper()}"
            if env_name not in os.environ:
                continue

            raw = os.environ[env_name]
            field_type = type(getattr(self.app_config, field_name))
            try:
                if field_type == bool:
                    value = raw.lower() in ('true', 'yes', '1')
                elif field_type == dict:
                    value = json.loads(raw)
                else:
                    value = field_type(raw)

                setattr(self.app_config, field_name, value)
                logger.debug(f"Applied env override for {field_name}: {value}")
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid env value for {field_name}: {str(e)}")

    def save_config(self, filepath: Union[str, Path]) -> None:
        """
        Save the current configuration to a JSON file.

        Args:
            filepath: Path to save the configuration to.
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, 'w') as f:
            json.dump(asdict(self.app_config), f, indent=4)

        logger.info(f"Saved configuration to {filepath}")

    def validate(self) -> bool:
        """
        Validate the current configuration and fix common issues.

        Returns:
            True once the configuration has been validated
        """
        config = self.app_config

        criterion = str(config.model_criterion).lower()
        if criterion not in SUPPORTED_CRITERIA:
            logger.warning(f"Unsupported criterion: {config.model_criterion}. Using default '{DEFAULT_CRITERION}'.")
            criterion = DEFAULT_CRITERION
        config.model_criterion = criterion

        if not config.results_dir:
            logger.warning(f"No results directory specified. Using default '{DEFAULT_RESULTS_DIR}'.")
            config.results_dir = DEFAULT_RESULTS_DIR

        if not config.data_category:
            logger.warning("No category specified; all products will be analysed together.")

        for path_field in ("data_transactions_path", "data_products_path"):
            path = getattr(config, path_field)
            if path and not Path(path).exists():
                # Warn only; the loader raises when the file is actually needed
                logger.debug(f"Data file not found: {path}")

        return True
