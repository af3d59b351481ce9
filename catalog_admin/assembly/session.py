"""
Catalog View Session

Owns the mutable UI state around the stateless assembler: loading and
error flags, the current selection and filters, and the last view. Each
view-build is tagged with a ticket for the selection it was issued for;
a result whose ticket is no longer the latest is discarded so a slow,
stale response can never overwrite the current one.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Awaitable, Callable, Hashable, Optional

import structlog

from .assembler import CatalogViewAssembler
from .errors import FetchError, NotFoundError
from .filters import FilterCriteria
from .view_model import CatalogView

logger = structlog.get_logger(__name__)


class ViewState(str, Enum):
    """View-build state"""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Ticket:
    key: Hashable
    serial: int


class RequestGate:
    """Issues tickets and tells whether a ticket is still the latest one"""

    def __init__(self):
        self._serial = 0
        self._current: Optional[Ticket] = None

    def issue(self, key: Hashable) -> Ticket:
        self._serial += 1
        self._current = Ticket(key=key, serial=self._serial)
        return self._current

    def is_current(self, ticket: Ticket) -> bool:
        return self._current == ticket

    @property
    def current_key(self) -> Optional[Hashable]:
        return self._current.key if self._current else None


class CatalogViewSession:
    """
    Stateful holder of one catalog page.

    Example:
        session = CatalogViewSession(assembler)
        await session.load_detail(42)
        if session.state is ViewState.READY:
            render(session.view)
    """

    def __init__(
        self,
        assembler: CatalogViewAssembler,
        clock: Callable[[], date] = date.today,
    ):
        self.assembler = assembler
        self.clock = clock
        self.gate = RequestGate()

        self.state = ViewState.IDLE
        self.view: Optional[CatalogView] = None
        self.error: Optional[str] = None
        self.selected_product_id: Optional[int] = None
        self.criteria = FilterCriteria()
        self.category_id: Optional[int] = None

    async def load_list(
        self,
        criteria: Optional[FilterCriteria] = None,
        category_id: Optional[int] = None,
    ) -> bool:
        """Load the product list for the given filters; returns whether the result was applied"""
        self.criteria = criteria or FilterCriteria()
        self.category_id = category_id
        self.selected_product_id = None
        reference_date = self.clock()

        return await self._run(
            ("list", self.criteria, category_id),
            lambda: self.assembler.build_list_view(self.criteria, reference_date, category_id),
        )

    async def load_detail(self, product_id: int) -> bool:
        """Load one product; returns whether the result was applied"""
        self.selected_product_id = product_id
        reference_date = self.clock()

        return await self._run(
            ("detail", product_id),
            lambda: self.assembler.build_detail_view(product_id, reference_date),
        )

    def remove_product(self, product_id: int) -> None:
        """Drop a deleted product from the held view without refetching"""
        if self.view is not None:
            self.view = self.view.without_product(product_id)

    def remove_variant(self, variant_id: int) -> None:
        """Drop a deleted variant from the held view without refetching"""
        if self.view is not None:
            self.view = self.view.without_variant(variant_id)

    async def _run(self, key: Hashable, build: Callable[[], Awaitable[CatalogView]]) -> bool:
        ticket = self.gate.issue(key)
        self.state = ViewState.LOADING
        self.error = None

        try:
            view = await build()
        except NotFoundError as e:
            if not self._accept(ticket):
                return False
            self.view = None
            self.state = ViewState.NOT_FOUND
            self.error = str(e)
            return True
        except FetchError as e:
            if not self._accept(ticket):
                return False
            self.view = None
            self.state = ViewState.ERROR
            self.error = str(e)
            return True

        if not self._accept(ticket):
            return False
        self.view = view
        self.state = ViewState.READY
        return True

    def _accept(self, ticket: Ticket) -> bool:
        if self.gate.is_current(ticket):
            return True
        logger.info(
            "Discarding stale view result",
            issued_for=str(ticket.key),
            current=str(self.gate.current_key),
        )
        return False
