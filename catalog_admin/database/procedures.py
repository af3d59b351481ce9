"""
Stored Procedure Clients

Calls database-side functions that the catalog consumes as opaque
collaborators.
"""

from typing import Optional

import structlog
from sqlalchemy import func, select

from catalog_admin.database.connection import get_db
from catalog_admin.database.fetcher import SessionFactory

logger = structlog.get_logger(__name__)


class DatabaseDiscountFunction:
    """
    Discount function delegating to a stored procedure.

    Executes ``SELECT <procedure>(base_price, discount_type, discount_value)``.
    Errors propagate to the caller; the discount resolver decides on the
    fallback.
    """

    def __init__(
        self,
        procedure: str = "pm_calculate_discounted_price",
        session_factory: SessionFactory = get_db,
    ):
        self.procedure = procedure
        self._session_factory = session_factory

    async def __call__(
        self,
        base_price: float,
        discount_type: Optional[str],
        discount_value: Optional[float],
    ) -> Optional[float]:
        call = getattr(func, self.procedure)(base_price, discount_type, discount_value)

        async with self._session_factory() as db:
            result = await db.execute(select(call))
            value = result.scalar()

        logger.debug(
            "Discount procedure called",
            procedure=self.procedure,
            base_price=base_price,
            discount_type=discount_type,
            result=value,
        )
        return None if value is None else float(value)
