"""
Catalog View Assembly Module
"""
from .assembler import CatalogViewAssembler
from .discounts import StrategyDiscountFunction, resolve_discounted_price, resolve_discounts
from .errors import CatalogError, DiscountComputationError, FetchError, NotFoundError
from .filters import FilterCriteria, apply_filters
from .joiner import JoinedProduct, JoinedVariant, build_joined_view, index_first
from .pricing import is_active_on, select_active_pricing
from .session import CatalogViewSession, RequestGate, ViewState
from .view_model import CatalogView, ProductView, VariantView, build_view_model, low_stock

__all__ = [
    "CatalogViewAssembler",
    "StrategyDiscountFunction",
    "resolve_discounted_price",
    "resolve_discounts",
    "CatalogError",
    "DiscountComputationError",
    "FetchError",
    "NotFoundError",
    "FilterCriteria",
    "apply_filters",
    "JoinedProduct",
    "JoinedVariant",
    "build_joined_view",
    "index_first",
    "is_active_on",
    "select_active_pricing",
    "CatalogViewSession",
    "RequestGate",
    "ViewState",
    "CatalogView",
    "ProductView",
    "VariantView",
    "build_view_model",
    "low_stock",
]
