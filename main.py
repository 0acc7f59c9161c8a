#!/usr/bin/env python3
"""
Main entry point for the Brand Elasticity Analysis.

Fits one log-log demand model per brand in a product category, reduces each
by backward elimination, and writes coefficients, brand summaries and the
brand x brand price, feature, display and TPR effect matrices.

Usage:
    brand-elasticity --transactions data/transactions.csv --products data/products.csv
    brand-elasticity --simulate --results-dir results/simulated
    brand-elasticity --config config.json --criterion bic --no-stepwise
"""
import sys
import argparse

from config.config_manager import ConfigManager
from data.simulation import generate_synthetic_data
from model.constants import SUPPORTED_CRITERIA
from model.exceptions import ElasticityError
from model.model_runner import ModelRunner
from utils.logging_utils import get_logger, LoggingManager

# Get logger for this module
logger = get_logger()


def main(argv=None):
    """Main entry point for the Brand Elasticity Analysis."""
    args = parse_arguments(argv)

    try:
        config_manager = setup_config(args)
    except ElasticityError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(f"Invalid configuration: {str(e)}")
        return 1

    config = config_manager.app_config
    setup_logging(config.log_level, config.log_file if config.log_to_file else None)

    runner = ModelRunner(config_manager=config_manager)

    try:
        if args.simulate:
            logger.info("Running on simulated scanner data")
            transactions, products = generate_synthetic_data(category=config.data_category)
            results = runner.run(transactions, products)
        else:
            logger.info(f"Using transactions: {config.data_transactions_path}, products: {config.data_products_path}")
            results = runner.run()
    except ElasticityError as e:
        LoggingManager.log_error(logger, "Analysis failed", e)
        return 1
    except Exception as e:
        logger.error(f"Unexpected error during analysis: {str(e)}")
        logger.error("Analysis failed")
        return 1

    LoggingManager.log_dict(logger, "Run summary", results.metadata)
    logger.info("Analysis completed successfully")
    return 0


def setup_config(args):
    """
    Build the configuration from file, environment and command line.

    Command-line arguments take precedence over the environment, which takes
    precedence over the configuration file.

    Args:
        args: Command line arguments

    Returns:
        ConfigManager instance
    """
    config_manager = ConfigManager(args.config)
    config = config_manager.app_config

    if args.transactions:
        config.data_transactions_path = args.transactions
    if args.products:
        config.data_products_path = args.products
    if args.category is not None:
        config.data_category = args.category
    if args.category_col:
        config.data_category_col = args.category_col
    if args.criterion:
        config.model_criterion = args.criterion
    if args.no_stepwise:
        config.model_stepwise = False
    if args.results_dir:
        config.results_dir = args.results_dir
    if args.no_save:
        config.save_results = False
    if args.log_level:
        config.log_level = args.log_level

    config_manager.validate()
    return config_manager


def parse_arguments(argv=None):
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Brand Elasticity Analysis")

    # General options
    parser.add_argument("--config", type=str, help="Path to configuration file")
    parser.add_argument("--results-dir", type=str,
                        help="Directory to store results")
    parser.add_argument("--no-save", action="store_true",
                        help="Run the analysis without writing results")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level")

    # Data options
    parser.add_argument("--transactions", type=str,
                        help="Path to the transactions file (.csv or .parquet)")
    parser.add_argument("--products", type=str,
                        help="Path to the product lookup file (.csv or .parquet)")
    parser.add_argument("--category", type=str,
                        help="Category value to analyse; an empty string disables the filter")
    parser.add_argument("--category-col", type=str,
                        help="Product column holding the category")
    parser.add_argument("--simulate", action="store_true",
                        help="Run on simulated data with known elasticities")

    # Model options
    parser.add_argument("--criterion", choices=list(SUPPORTED_CRITERIA),
                        help="Information criterion for backward elimination")
    parser.add_argument("--no-stepwise", action="store_true",
                        help="Keep the full model for every brand")

    return parser.parse_args(argv)


def setup_logging(log_level, log_file=None):
    """
    Set up logging based on the specified log level.

    Args:
        log_level: Log level to set up
        log_file: Optional log file path
    """
    LoggingManager.setup_logging(
        log_level=str(log_level).upper(),
        log_file=log_file
    )


if __name__ == "__main__":
    sys.exit(main())
