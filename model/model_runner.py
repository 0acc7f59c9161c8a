#!/usr/bin/env python3
"""
Model Runner for Brand Elasticity Analysis.

This orchestration module runs the whole analysis, from source tables to
effect matrices, and optionally exports the results.

EXECUTION FLOW:
1. Join transactions to products and derive observations
2. Reshape observations into the week x brand wide table
3. Fit one log-log demand model per brand, sequentially
4. Collect coefficients and summarize each brand
5. Build the price, feature, display and TPR effect matrices
6. Optionally save every table to the results directory

ASSUMPTIONS:
- Input tables fit in memory
- Brand models are independent; none reads another's result

EDGE CASES:
- Brands without usable weeks produce empty result sets, not errors
- Stepwise failures fall back to the full model inside the brand model
- Export failures raise ResultsError after the analysis itself succeeded
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from config.config_manager import ConfigManager
from data.data_loader import DataLoader
from data.data_preprocessor import DataPreprocessor
from data.reshaper import build_wide_table
from model.base_model import BrandModel
from model.constants import BRAND, BRAND_ID, DEFAULT_CRITERION
from model.effect_matrix import build_effect_matrices, flatten_effect_matrices
from model.exceptions import ResultsError, RunnerError
from model.linear_model import LogLogDemandModel
from model.results_aggregator import collect_coefficients, model_fit_table, summarize_brands
from utils.decorators import log_errors, timed
from utils.file_utils import ensure_dir_exists, save_json
from utils.logging_utils import get_logger, log_step, LoggingManager
from utils.serialization import to_serializable

logger = get_logger()


@dataclass
class PipelineResults:
    """In-memory outputs of one analysis run."""
    brand_lookup: pd.DataFrame
    wide_table: pd.DataFrame
    brand_models: Dict[int, BrandModel]
    coefficients: pd.DataFrame
    model_fits: pd.DataFrame
    brand_summary: pd.DataFrame
    effect_matrices: Dict[str, pd.DataFrame]
    effect_long: pd.DataFrame
    metadata: Dict[str, Any] = field(default_factory=dict)


class ElasticityPipeline:
    """
    Forward-only pipeline from scanner data to effect matrices.

    Parameters
    ----------
    preprocessor : DataPreprocessor, optional
        Source-table handling; defaults to the Dunnhumby column layout with no
        category filter.
    criterion : str
        Information criterion for backward elimination ("aic" or "bic").
    stepwise : bool
        Whether to reduce each brand model by backward elimination.
    """

    def __init__(
        self,
        preprocessor: Optional[DataPreprocessor] = None,
        criterion: str = DEFAULT_CRITERION,
        stepwise: bool = True
    ):
        self.preprocessor = preprocessor or DataPreprocessor()
        self.criterion = criterion
        self.stepwise = stepwise

    @timed("Elasticity pipeline")
    def run(self, transactions: pd.DataFrame, products: pd.DataFrame) -> PipelineResults:
        """Run the full analysis on raw transactions and the product lookup."""
        observations, lookup = self.preprocessor.preprocess(transactions, products)
        wide = build_wide_table(observations, lookup[BRAND_ID])
        return self.run_wide(wide, lookup)

    def run_wide(self, wide: pd.DataFrame, lookup: pd.DataFrame) -> PipelineResults:
        """Run the modelling stages on an existing wide table."""
        models = self.fit_brand_models(wide, lookup)
        return self.assemble(wide, lookup, models)

    @log_step("Fitting brand models")
    def fit_brand_models(self, wide: pd.DataFrame, lookup: pd.DataFrame) -> Dict[int, BrandModel]:
        """Fit every brand in the lookup, in brand-id order."""
        model = LogLogDemandModel(criterion=self.criterion, stepwise=self.stepwise)
        models: Dict[int, BrandModel] = {}
        for brand_id, brand in zip(lookup[BRAND_ID].astype(int), lookup[BRAND]):
            logger.debug(f"Fitting brand {brand_id} ({brand})")
            models[brand_id] = model.fit(wide, brand_id)

        if models:
            LoggingManager.log_dict(logger, "Brand model summary", model.summarize_results())
        return models

    @log_step("Aggregating results")
    def assemble(self, wide: pd.DataFrame, lookup: pd.DataFrame, models: Dict[int, BrandModel]) -> PipelineResults:
        """Collect coefficients, summaries and effect matrices from fitted models."""
        ordered = [models[b] for b in sorted(models)]
        coefficients = collect_coefficients(ordered, lookup)
        fits = model_fit_table(ordered)
        summary = summarize_brands(coefficients, lookup, fits)
        matrices = build_effect_matrices(coefficients, lookup)
        effect_long = flatten_effect_matrices(matrices)

        metadata = {
            "n_brands": len(lookup),
            "n_weeks": len(wide),
            "criterion": self.criterion,
            "stepwise": self.stepwise,
            "status_counts": fits["status"].value_counts().to_dict(),
        }

        return PipelineResults(
            brand_lookup=lookup,
            wide_table=wide,
            brand_models=models,
            coefficients=coefficients,
            model_fits=fits,
            brand_summary=summary,
            effect_matrices=matrices,
            effect_long=effect_long,
            metadata=metadata,
        )


class ResultsManager:
    """Writes pipeline outputs to a results directory."""

    @log_step("Saving results")
    @log_errors(ResultsError, msg="Error saving results")
    def save_results(self, results: PipelineResults, results_dir: Union[str, Path]) -> List[Path]:
        """
        Save every output table as CSV plus a JSON run summary.

        Returns:
            Paths of the written files

        Raises:
            ResultsError: If a file cannot be written
        """
        results_dir = Path(results_dir)
        written: List[Path] = []
        try:
            ensure_dir_exists(results_dir)

            tables = {
                "brand_lookup.csv": (results.brand_lookup, False),
                "coefficients.csv": (results.coefficients, False),
                "model_fits.csv": (results.model_fits, False),
                "brand_summary.csv": (results.brand_summary, False),
                "effect_matrices_long.csv": (results.effect_long, False),
            }
            for family, matrix in results.effect_matrices.items():
                tables[f"effect_matrix_{family}.csv"] = (matrix, True)

            for filename, (table, keep_index) in tables.items():
                path = results_dir / filename
                table.to_csv(path, index=keep_index)
                written.append(path)

            summary_path = results_dir / "run_summary.json"
            save_json(to_serializable({
                "metadata": results.metadata,
                "brand_summary": results.brand_summary.to_dict(orient="records"),
            }), summary_path)
            written.append(summary_path)
        except (OSError, TypeError, ValueError) as e:
            raise ResultsError(f"Failed to save results to {results_dir}", str(e)) from e

        logger.info(f"Saved {len(written)} result files to {results_dir}")
        return written


class ModelRunner:
    """Main runner class: configuration -> data -> pipeline -> export."""

    def __init__(self, config_manager: Optional[ConfigManager] = None, results_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the model runner.

        Args:
            config_manager: Configuration manager; a default one is created if omitted
            results_dir: Overrides the configured results directory
        """
        self.config_manager = config_manager or ConfigManager()
        self.app_config = self.config_manager.app_config
        self.results_dir = Path(results_dir) if results_dir else Path(self.app_config.results_dir)

        self.preprocessor = DataPreprocessor.from_config(self.app_config)
        self.pipeline = ElasticityPipeline(
            preprocessor=self.preprocessor,
            criterion=self.app_config.model_criterion,
            stepwise=self.app_config.model_stepwise,
        )
        self.results_manager = ResultsManager()
        self.results: Optional[PipelineResults] = None

        logger.info(f"ModelRunner initialized with results directory: {self.results_dir}")

    @log_step("Loading data")
    def load_data(self):
        """Read the configured transaction and product files."""
        loader = DataLoader(
            self.app_config.data_transactions_path,
            self.app_config.data_products_path,
            column_mapping=self.app_config.data_column_mappings,
        )
        transactions = loader.load_transactions(self.preprocessor.transaction_columns)
        products = loader.load_products(self.preprocessor.product_columns)
        return transactions, products

    @timed("Model execution")
    @log_errors(RunnerError, msg="Error running model")
    def run(
        self,
        transactions: Optional[pd.DataFrame] = None,
        products: Optional[pd.DataFrame] = None,
        save: Optional[bool] = None
    ) -> PipelineResults:
        """
        Run the analysis.

        Args:
            transactions: Transactions table; read from the configured path if omitted
            products: Product lookup; read from the configured path if omitted
            save: Whether to export results; defaults to the configured setting

        Returns:
            PipelineResults

        Raises:
            RunnerError: If only one of transactions/products is given
        """
        if (transactions is None) != (products is None):
            raise RunnerError("Provide both transactions and products, or neither")

        if transactions is None:
            transactions, products = self.load_data()

        self.results = self.pipeline.run(transactions, products)

        if self.app_config.save_results if save is None else save:
            self.results_manager.save_results(self.results, self.results_dir)
            self.config_manager.save_config(self.results_dir / "config.json")

        logger.info(f"Analysis complete: {json.dumps(to_serializable(self.results.metadata))}")
        return self.results
