"""
Catalog Errors

Only I/O-touching stages raise. ``FetchError`` aborts a view-build,
``NotFoundError`` marks a missing reference entity, and
``DiscountComputationError`` is always contained by the discount adapter.
"""

from typing import Any, Optional


class CatalogError(Exception):
    """Base class for catalog errors"""


class FetchError(CatalogError):
    """An upstream collection read failed"""

    def __init__(self, collection: str, cause: Optional[BaseException] = None):
        self.collection = collection
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to fetch {collection}{detail}")


class NotFoundError(CatalogError):
    """A reference entity id does not resolve to a row"""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class DiscountComputationError(CatalogError):
    """The discount function failed or returned no value"""

    def __init__(self, variant_id: Optional[int], reason: str):
        self.variant_id = variant_id
        self.reason = reason
        super().__init__(f"Discount computation failed for variant {variant_id}: {reason}")
