"""
Data Transformation Module
"""
from .frames import catalog_view_to_frame, low_stock_report

__all__ = [
    "catalog_view_to_frame",
    "low_stock_report",
]
