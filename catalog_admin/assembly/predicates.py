"""
Fetch Predicates

Storage-neutral filter predicates passed to an entity fetcher. Fields are
named after record attributes. Each predicate can also evaluate itself
against a record, following SQL semantics for NULL (a comparison against a
missing value is false).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional, Protocol, Tuple

from .records import Collection


class Predicate(ABC):
    """Base predicate"""

    @abstractmethod
    def matches(self, record: Any) -> bool:
        """Evaluate against one record"""

    def __and__(self, other: "Predicate") -> "And":
        return And((self, other))

    def __or__(self, other: "Predicate") -> "Or":
        return Or((self, other))


@dataclass(frozen=True)
class Eq(Predicate):
    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        actual = getattr(record, self.field)
        return actual is not None and actual == self.value


@dataclass(frozen=True)
class Gte(Predicate):
    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        actual = getattr(record, self.field)
        return actual is not None and actual >= self.value


@dataclass(frozen=True)
class Lte(Predicate):
    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        actual = getattr(record, self.field)
        return actual is not None and actual <= self.value


@dataclass(frozen=True)
class In(Predicate):
    field: str
    values: Tuple[Any, ...]

    def matches(self, record: Any) -> bool:
        return getattr(record, self.field) in self.values


@dataclass(frozen=True)
class IsNull(Predicate):
    field: str

    def matches(self, record: Any) -> bool:
        return getattr(record, self.field) is None


@dataclass(frozen=True)
class And(Predicate):
    clauses: Tuple[Predicate, ...]

    def matches(self, record: Any) -> bool:
        return all(clause.matches(record) for clause in self.clauses)


@dataclass(frozen=True)
class Or(Predicate):
    clauses: Tuple[Predicate, ...]

    def matches(self, record: Any) -> bool:
        return any(clause.matches(record) for clause in self.clauses)


def in_(field: str, values) -> In:
    return In(field, tuple(values))


def window_contains(start_field: str, end_field: str, reference_date: date) -> And:
    """``(start is null OR start <= d) AND (end is null OR end >= d)``"""
    return And((
        Or((IsNull(start_field), Lte(start_field, reference_date))),
        Or((IsNull(end_field), Gte(end_field, reference_date))),
    ))


class EntityFetcher(Protocol):
    """Reads rows of one collection matching a predicate, in fetch order"""

    async def fetch(self, collection: Collection, predicate: Optional[Predicate] = None) -> List[Any]:
        ...
