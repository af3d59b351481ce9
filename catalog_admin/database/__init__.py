"""
Database Module
"""
from .connection import init_database, create_schema, close_database, get_db, get_db_dependency
from .models import Base
from .fetcher import SqlEntityFetcher
from .procedures import DatabaseDiscountFunction
from .repository import CatalogRepository

__all__ = [
    "init_database",
    "create_schema",
    "close_database",
    "get_db",
    "get_db_dependency",
    "Base",
    "SqlEntityFetcher",
    "DatabaseDiscountFunction",
    "CatalogRepository",
]
