"""
Scanner Data Simulation Module for Validation and Testing.

This module generates synthetic store-week scanner data for a set of competing
brands with known own- and cross-price elasticities, so the brand demand models
can be checked against ground truth.

PURPOSE:
- Create controlled test data with known elasticities for model validation
- Produce tables in the same layout as the Dunnhumby transactions and products files
- Support unit testing with small, deterministic datasets

ASSUMPTIONS:
- Promotions (feature, display, TPR) run chain-wide for a brand-week
- TPR weeks carry a fixed percentage discount off the shelf price
- Log demand is linear in every brand's log price and the own promotion flags
- Units sold per store and product are Poisson around the expected demand

DATA GENERATION MODEL:
    log(units[b]) = base[b] + store + sum_a E[a, b] * log(price[a] / base_price[a])
                    + lifts * own promotion flags + noise
where E[a, b] is the effect of brand a's price on brand b's demand.

EDGE CASES:
- Low demand settings can produce zero-unit rows; the price then falls back to
  BASE_PRICE downstream
- With include_other_category a product outside the requested sub-category is
  added so category filtering has something to remove
"""

import os
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from config.default_config import DEFAULT_CATEGORY
from utils.file_utils import ensure_dir_exists, save_json
from utils.logging_utils import get_logger

logger = get_logger()

OTHER_CATEGORY = "MOUTHWASH/RINSES AND SPRAYS"
OTHER_BRAND = "RINSE BRAND 99"


def brand_names(n_brands: int):
    """Brand descriptions whose lexicographic order matches their position."""
    return [f"MOUTHWASH BRAND {i:02d}" for i in range(1, n_brands + 1)]


def generate_synthetic_data(
    n_brands: int = 4,
    n_products_per_brand: int = 2,
    n_stores: int = 5,
    n_weeks: int = 104,
    start_date: str = "2009-01-14",
    own_elasticity_mean: float = -2.0,
    own_elasticity_std: float = 0.3,
    cross_elasticity_mean: float = 0.3,
    feature_lift: float = 0.25,
    display_lift: float = 0.35,
    tpr_lift: float = 0.15,
    promo_frequency: float = 0.2,
    tpr_discount: float = 0.2,
    noise_level: float = 0.1,
    category: str = DEFAULT_CATEGORY,
    include_other_category: bool = True,
    seed: Optional[int] = 42,
    output_dir: Optional[str] = None
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Generate synthetic transactions and a product lookup with known elasticities.

    Args:
        n_brands: Number of competing brands in the category
        n_products_per_brand: UPCs per brand
        n_stores: Number of stores
        n_weeks: Number of weeks
        start_date: First week-ending date (YYYY-MM-DD)
        own_elasticity_mean: Mean of the own-price elasticity distribution
        own_elasticity_std: Standard deviation of the own-price elasticities
        cross_elasticity_mean: Typical cross-price elasticity (substitutes are positive)
        feature_lift: Log-demand lift when the brand is featured
        display_lift: Log-demand lift when the brand is on display
        tpr_lift: Log-demand lift from a temporary price reduction, on top of the price effect
        promo_frequency: Probability that a brand-week carries each promotion
        tpr_discount: Fractional discount during TPR weeks
        noise_level: Standard deviation of the log-demand noise
        category: SUB_CATEGORY value of the simulated brands
        include_other_category: Add one product from a different sub-category
        seed: Random seed; the same seed always produces the same tables
        output_dir: Optional directory to save the tables and the true elasticities

    Returns:
        Tuple of (transactions, products). The products table carries each
        brand's true own-price elasticity in TRUE_OWN_ELASTICITY.
    """
    if n_brands < 1 or n_products_per_brand < 1 or n_stores < 1 or n_weeks < 1:
        raise ValueError("n_brands, n_products_per_brand, n_stores and n_weeks must be positive")

    rng = np.random.default_rng(seed)
    brands = brand_names(n_brands)
    weeks = pd.date_range(start_date, periods=n_weeks, freq="7D")
    logger.info(f"Generating {n_weeks} weeks of scanner data for {n_brands} brands in {n_stores} stores")

    # Row = acting brand, column = responding brand
    elasticities = cross_elasticity_mean * rng.uniform(0.5, 1.5, size=(n_brands, n_brands))
    np.fill_diagonal(elasticities, rng.normal(own_elasticity_mean, own_elasticity_std, size=n_brands))

    base_price = rng.uniform(3.0, 7.0, size=n_brands)
    base_demand = rng.uniform(4.0, 5.0, size=n_brands)
    store_effect = rng.normal(0.0, 0.2, size=n_stores)

    feature = rng.random((n_weeks, n_brands)) < promo_frequency
    display = rng.random((n_weeks, n_brands)) < promo_frequency
    tpr = rng.random((n_weeks, n_brands)) < promo_frequency

    shelf_price = base_price * (1 + rng.normal(0.0, 0.03, size=(n_weeks, n_brands)))
    price = shelf_price * np.where(tpr, 1 - tpr_discount, 1.0)

    log_demand = (
        base_demand
        + np.log(price / base_price) @ elasticities
        + feature_lift * feature + display_lift * display + tpr_lift * tpr
    )

    shape = (n_weeks, n_stores, n_brands, n_products_per_brand)
    expected = np.exp(
        log_demand[:, None, :, None]
        + store_effect[None, :, None, None]
        + rng.normal(0.0, noise_level, size=shape)
    ) / n_products_per_brand
    units = rng.poisson(expected)

    w, s, b, k = np.indices(shape).reshape(4, -1)
    upc = 1000000000 + (b + 1) * 100 + k
    unit_price = np.round(price[w, b], 2)

    transactions = pd.DataFrame({
        "WEEK_END_DATE": weeks[w].strftime("%Y-%m-%d"),
        "STORE_NUM": s + 1,
        "UPC": upc,
        "UNITS": units.ravel(),
        "SPEND": np.round(units.ravel() * unit_price, 2),
        "PRICE": unit_price,
        "BASE_PRICE": np.round(shelf_price[w, b], 2),
        "FEATURE": feature[w, b].astype(int),
        "DISPLAY": display[w, b].astype(int),
        "TPR_ONLY": tpr[w, b].astype(int),
    })

    products = pd.DataFrame({
        "UPC": [1000000000 + (i + 1) * 100 + j for i in range(n_brands) for j in range(n_products_per_brand)],
        "DESCRIPTION": [brands[i] for i in range(n_brands) for _ in range(n_products_per_brand)],
        "MANUFACTURER": [f"MANUFACTURER {i + 1:02d}" for i in range(n_brands) for _ in range(n_products_per_brand)],
        "CATEGORY": "ORAL HYGIENE PRODUCTS",
        "SUB_CATEGORY": category,
        "PRODUCT_SIZE": [f"{500 + 250 * j} ML" for _ in range(n_brands) for j in range(n_products_per_brand)],
        "TRUE_OWN_ELASTICITY": [float(elasticities[i, i]) for i in range(n_brands) for _ in range(n_products_per_brand)],
    })

    if include_other_category:
        other_upc = 1000009900
        other_units = rng.poisson(30, size=(n_weeks, n_stores))
        ow, os_ = np.indices((n_weeks, n_stores)).reshape(2, -1)
        transactions = pd.concat([transactions, pd.DataFrame({
            "WEEK_END_DATE": weeks[ow].strftime("%Y-%m-%d"),
            "STORE_NUM": os_ + 1,
            "UPC": other_upc,
            "UNITS": other_units.ravel(),
            "SPEND": np.round(other_units.ravel() * 4.0, 2),
            "PRICE": 4.0,
            "BASE_PRICE": 4.0,
            "FEATURE": 0,
            "DISPLAY": 0,
            "TPR_ONLY": 0,
        })], ignore_index=True)
        products = pd.concat([products, pd.DataFrame({
            "UPC": [other_upc],
            "DESCRIPTION": [OTHER_BRAND],
            "MANUFACTURER": ["MANUFACTURER 99"],
            "CATEGORY": ["ORAL HYGIENE PRODUCTS"],
            "SUB_CATEGORY": [OTHER_CATEGORY],
            "PRODUCT_SIZE": ["250 ML"],
            "TRUE_OWN_ELASTICITY": [np.nan],
        })], ignore_index=True)

    logger.info(f"Generated {len(transactions)} transactions for {len(products)} products")

    if output_dir:
        ensure_dir_exists(output_dir)
        transactions.to_parquet(os.path.join(output_dir, "transactions.parquet"), index=False)
        products.to_csv(os.path.join(output_dir, "products.csv"), index=False)

        metadata = {
            "brands": brands,
            "true_elasticities": {
                acting: {responding: float(elasticities[i, j]) for j, responding in enumerate(brands)}
                for i, acting in enumerate(brands)
            },
            "data_generation_params": {
                "n_brands": n_brands,
                "n_products_per_brand": n_products_per_brand,
                "n_stores": n_stores,
                "n_weeks": n_weeks,
                "own_elasticity_mean": own_elasticity_mean,
                "own_elasticity_std": own_elasticity_std,
                "cross_elasticity_mean": cross_elasticity_mean,
                "feature_lift": feature_lift,
                "display_lift": display_lift,
                "tpr_lift": tpr_lift,
                "promo_frequency": promo_frequency,
                "tpr_discount": tpr_discount,
                "noise_level": noise_level,
                "seed": seed,
            },
        }
        save_json(metadata, os.path.join(output_dir, "simulation_metadata.json"))
        logger.info(f"Saved synthetic data and metadata to {output_dir}")

    return transactions, products


def generate_test_data_small(seed: Optional[int] = 0) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Generate a small dataset for unit testing."""
    return generate_synthetic_data(
        n_brands=3,
        n_products_per_brand=1,
        n_stores=2,
        n_weeks=52,
        noise_level=0.05,
        seed=seed
    )
