"""
Catalog Frames

Flattens catalog view snapshots into Polars DataFrames (one row per
variant) for tabular reports such as the low-stock list.
"""

from typing import Any, Dict, List

import polars as pl
import structlog

from catalog_admin.assembly.view_model import CatalogView

logger = structlog.get_logger(__name__)

VARIANT_FRAME_SCHEMA = {
    "product_id": pl.Int64,
    "product_sku": pl.Utf8,
    "product_name": pl.Utf8,
    "variant_id": pl.Int64,
    "variant_sku": pl.Utf8,
    "color": pl.Utf8,
    "size": pl.Utf8,
    "base_price": pl.Float64,
    "region": pl.Utf8,
    "region_price": pl.Float64,
    "discounted_price": pl.Float64,
    "stock_level": pl.Int64,
    "reorder_threshold": pl.Int64,
    "low_stock": pl.Boolean,
    "lifecycle_stage": pl.Utf8,
}


def catalog_view_to_frame(view: CatalogView) -> pl.DataFrame:
    """
    Flatten a catalog view into one row per variant.

    Products without variants produce no rows. Without an inventory row the
    stock level falls back to the variant's own counter and the threshold
    is null.
    """
    rows: List[Dict[str, Any]] = []
    for product_view in view.products:
        product = product_view.product
        for variant_view in product_view.variants:
            variant = variant_view.variant
            pricing = variant_view.pricing
            inventory = variant_view.inventory
            rows.append({
                "product_id": product.product_id,
                "product_sku": product.sku,
                "product_name": product.name,
                "variant_id": variant.variant_id,
                "variant_sku": variant.sku,
                "color": variant.color,
                "size": variant.size,
                "base_price": variant.price,
                "region": pricing.region if pricing else None,
                "region_price": pricing.pricing.price if pricing else None,
                "discounted_price": pricing.discounted_price if pricing else None,
                "stock_level": variant_view.stock_level,
                "reorder_threshold": inventory.reorder_threshold if inventory else None,
                "low_stock": variant_view.low_stock,
                "lifecycle_stage": variant_view.lifecycle.stage if variant_view.lifecycle else None,
            })

    return pl.DataFrame(rows, schema=VARIANT_FRAME_SCHEMA)


def low_stock_report(view: CatalogView) -> pl.DataFrame:
    """
    Variants below their reorder threshold, most urgent first.

    Adds ``shortfall`` (threshold minus stock).
    """
    df = catalog_view_to_frame(view)

    report = (
        df.filter(pl.col("low_stock"))
        .with_columns(
            (pl.col("reorder_threshold") - pl.col("stock_level")).alias("shortfall")
        )
        .sort(["shortfall", "variant_id"], descending=[True, False])
    )

    logger.info("Low stock report built", variants=len(df), low_stock=len(report))
    return report
