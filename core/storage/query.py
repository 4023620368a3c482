"""
Backend-neutral query vocabulary.

Handlers describe what they want with Query, a sort spec and a Page.
The MongoDB backend translates these with to_mongo()/to_mongo_sort();
the in-memory backend evaluates them with matches()/sort_documents().
Both follow MongoDB semantics so the same query returns the same
records in the same order whichever backend is active:

- equality on a list field matches when the list contains the value
- range comparisons never match missing/None values
- None and missing values sort first ascending, last descending
- ties are broken by record id ascending
"""

import math
import re
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional


ASCENDING = 1
DESCENDING = -1

ID_FIELD = "id"
MONGO_ID_FIELD = "_id"

SortSpec = list[tuple[str, int]]


@dataclass(frozen=True)
class Range:
    """Comparison bounds for a single field. Unset bounds are ignored."""
    gt: Any = None
    gte: Any = None
    lt: Any = None
    lte: Any = None

    def bounds(self) -> dict[str, Any]:
        return {
            op: value
            for op, value in (
                ("gt", self.gt),
                ("gte", self.gte),
                ("lt", self.lt),
                ("lte", self.lte),
            )
            if value is not None
        }


@dataclass(frozen=True)
class Search:
    """Case-insensitive substring match against any of `fields`."""
    text: str
    fields: tuple[str, ...]


@dataclass
class Query:
    """
    Conjunction of filters.

    Attributes:
        equals: field -> value, all must match
        ranges: field -> Range, all must match
        search: optional substring search across several fields
        any_of: list of equality dicts, at least one must fully match
    """
    equals: dict[str, Any] = field(default_factory=dict)
    ranges: dict[str, Range] = field(default_factory=dict)
    search: Optional[Search] = None
    any_of: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def by_id(cls, record_id: str) -> "Query":
        return cls(equals={ID_FIELD: record_id})

    def where(self, **equals: Any) -> "Query":
        """Return a copy with additional equality filters."""
        return replace(self, equals={**self.equals, **equals})


@dataclass(frozen=True)
class Page:
    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class PageResult:
    items: list[dict[str, Any]]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_more(self) -> bool:
        return self.page * self.limit < self.total

    def pagination(self, total_key: str = "total") -> dict[str, Any]:
        return {
            "currentPage": self.page,
            "totalPages": self.total_pages,
            total_key: self.total,
            "hasMore": self.has_more,
        }


def normalize_sort(sort: Optional[SortSpec]) -> SortSpec:
    """Append the id tiebreaker unless the caller already sorts by id."""
    spec = list(sort or [])
    if not any(name == ID_FIELD for name, _ in spec):
        spec.append((ID_FIELD, ASCENDING))
    return spec


# ============================================
# MongoDB translation
# ============================================

def _mongo_field(name: str) -> str:
    return MONGO_ID_FIELD if name == ID_FIELD else name


def _mongo_equals(equals: dict[str, Any]) -> dict[str, Any]:
    return {_mongo_field(name): value for name, value in equals.items()}


def to_mongo(query: Optional[Query]) -> dict[str, Any]:
    """Translate a Query into a MongoDB filter document."""
    if query is None:
        return {}

    clauses: list[dict[str, Any]] = []

    if query.equals:
        clauses.append(_mongo_equals(query.equals))

    for name, bounds in query.ranges.items():
        ops = {f"${op}": value for op, value in bounds.bounds().items()}
        if ops:
            clauses.append({_mongo_field(name): ops})

    if query.search is not None and query.search.text:
        pattern = re.escape(query.search.text)
        clauses.append({
            "$or": [
                {_mongo_field(name): {"$regex": pattern, "$options": "i"}}
                for name in query.search.fields
            ]
        })

    if query.any_of:
        clauses.append({"$or": [_mongo_equals(option) for option in query.any_of]})

    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]

    # Merge plain field clauses; fall back to $and when keys collide
    merged: dict[str, Any] = {}
    for clause in clauses:
        if any(key in merged for key in clause):
            return {"$and": clauses}
        merged.update(clause)
    return merged


def to_mongo_sort(sort: Optional[SortSpec]) -> list[tuple[str, int]]:
    return [(_mongo_field(name), direction) for name, direction in normalize_sort(sort)]


# ============================================
# In-memory evaluation
# ============================================

def _value_equals(actual: Any, expected: Any) -> bool:
    if isinstance(actual, list) and not isinstance(expected, list):
        return expected in actual
    if isinstance(expected, bool) or isinstance(actual, bool):
        # BSON keeps booleans and numbers apart
        return type(actual) is type(expected) and actual == expected
    return actual == expected


def _equals_match(doc: dict[str, Any], equals: dict[str, Any]) -> bool:
    return all(_value_equals(doc.get(name), value) for name, value in equals.items())


def _range_match(value: Any, bounds: Range) -> bool:
    if value is None:
        return False
    try:
        for op, limit in bounds.bounds().items():
            if op == "gt" and not value > limit:
                return False
            if op == "gte" and not value >= limit:
                return False
            if op == "lt" and not value < limit:
                return False
            if op == "lte" and not value <= limit:
                return False
    except TypeError:
        return False
    return True


def _contains(value: Any, needle: str) -> bool:
    if isinstance(value, str):
        return needle in value.lower()
    if isinstance(value, list):
        return any(isinstance(item, str) and needle in item.lower() for item in value)
    return False


def matches(doc: dict[str, Any], query: Optional[Query]) -> bool:
    """Evaluate a Query against a stored document."""
    if query is None:
        return True

    if not _equals_match(doc, query.equals):
        return False

    for name, bounds in query.ranges.items():
        if bounds.bounds() and not _range_match(doc.get(name), bounds):
            return False

    if query.search is not None and query.search.text:
        needle = query.search.text.lower()
        if not any(_contains(doc.get(name), needle) for name in query.search.fields):
            return False

    if query.any_of and not any(_equals_match(doc, option) for option in query.any_of):
        return False

    return True


def _sort_key(name: str):
    def key(doc: dict[str, Any]) -> tuple[bool, Any]:
        value = doc.get(name)
        return (value is not None, value)
    return key


def sort_documents(
    docs: Iterable[dict[str, Any]],
    sort: Optional[SortSpec],
) -> list[dict[str, Any]]:
    """Sort documents the way MongoDB would for the same sort spec."""
    ordered = list(docs)
    # Stable sorts applied from the least significant key
    for name, direction in reversed(normalize_sort(sort)):
        ordered.sort(key=_sort_key(name), reverse=direction == DESCENDING)
    return ordered
