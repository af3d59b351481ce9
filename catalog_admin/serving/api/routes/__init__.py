"""
API Routes Module
"""
from .health import router as health_router
from .catalog import router as catalog_router
from .categories import router as categories_router
from .products import router as products_router
from .variants import router as variants_router

__all__ = [
    "health_router",
    "catalog_router",
    "categories_router",
    "products_router",
    "variants_router",
]
