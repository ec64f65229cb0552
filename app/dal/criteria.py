"""
Search criteria

A Criteria describes one search: which rows (ids, filters), how they are
ordered and paged, which associations are eager-loaded and which aggregations
are computed alongside. Filters and associations only ever accumulate.
"""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Sequence


class TotalCountMode(IntEnum):
    """How the total of a search result is computed."""
    NONE = 0  # total = number of fetched rows
    EXACT = 1  # total = full match count
    NEXT_PAGES = 2  # total = offset + rows found within the next pages window


# =============================================================================
# Filters
# =============================================================================

class Filter:
    """Base class for all filter predicates."""


@dataclass
class EqualsFilter(Filter):
    field: str
    value: Any


@dataclass
class EqualsAnyFilter(Filter):
    field: str
    values: List[Any]


@dataclass
class ContainsFilter(Filter):
    field: str
    value: str


@dataclass
class PrefixFilter(Filter):
    field: str
    value: str


@dataclass
class SuffixFilter(Filter):
    field: str
    value: str


@dataclass
class RangeFilter(Filter):
    """Bounded comparison; parameters keys are gte, lte, gt and lt."""

    GTE = "gte"
    LTE = "lte"
    GT = "gt"
    LT = "lt"

    field: str
    parameters: Dict[str, Any]


@dataclass
class MultiFilter(Filter):
    """Combines nested filters with AND, OR or XOR."""

    CONNECTION_AND = "AND"
    CONNECTION_OR = "OR"
    CONNECTION_XOR = "XOR"

    operator: str = CONNECTION_AND
    queries: List[Filter] = field(default_factory=list)


@dataclass
class NotFilter(MultiFilter):
    """Negation of a MultiFilter."""


# =============================================================================
# Sorting & aggregations
# =============================================================================

@dataclass
class FieldSorting:
    ASCENDING = "ASC"
    DESCENDING = "DESC"

    field: str
    direction: str = ASCENDING


AGGREGATION_TYPES = ("count", "min", "max", "avg", "sum", "terms")


@dataclass
class Aggregation:
    name: str
    type: str
    field: str


# =============================================================================
# Criteria
# =============================================================================

class Criteria:
    """Mutable query descriptor passed to repository searches."""

    def __init__(self, ids: Optional[Sequence[str]] = None):
        self.ids: List[str] = list(ids or [])
        self.filters: List[Filter] = []
        self.post_filters: List[Filter] = []
        self.sortings: List[FieldSorting] = []
        self.aggregations: Dict[str, Aggregation] = {}
        self.associations: Dict[str, "Criteria"] = {}
        self.limit: Optional[int] = None
        self.offset: Optional[int] = None
        self.total_count_mode: TotalCountMode = TotalCountMode.NONE

    def add_filter(self, *filters: Filter) -> "Criteria":
        self.filters.extend(filters)
        return self

    def add_post_filter(self, *filters: Filter) -> "Criteria":
        self.post_filters.extend(filters)
        return self

    def add_sorting(self, *sortings: FieldSorting) -> "Criteria":
        self.sortings.extend(sortings)
        return self

    def add_aggregation(self, *aggregations: Aggregation) -> "Criteria":
        for aggregation in aggregations:
            self.aggregations[aggregation.name] = aggregation
        return self

    def add_association(self, path: str) -> "Criteria":
        """
        Eager-load an association. Dotted paths ("media.thumbnails") create
        the nested association criteria on the way down.
        """
        criteria = self
        for part in path.split("."):
            criteria = criteria.get_association(part)
        return self

    def get_association(self, name: str) -> "Criteria":
        """Return the nested criteria for an association, creating it if needed."""
        if name not in self.associations:
            self.associations[name] = Criteria()
        return self.associations[name]

    def set_limit(self, limit: Optional[int]) -> "Criteria":
        self.limit = limit
        return self

    def set_offset(self, offset: Optional[int]) -> "Criteria":
        self.offset = offset
        return self

    def set_total_count_mode(self, mode: TotalCountMode) -> "Criteria":
        self.total_count_mode = TotalCountMode(mode)
        return self

    def __repr__(self) -> str:
        return (
            f"Criteria(ids={self.ids!r}, filters={self.filters!r}, "
            f"associations={list(self.associations)!r}, limit={self.limit}, offset={self.offset})"
        )
