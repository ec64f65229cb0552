"""
Data abstraction layer

Criteria describe a search; repositories execute them and return an
EntitySearchResult.
"""
from app.dal.criteria import (
    Aggregation,
    ContainsFilter,
    Criteria,
    EqualsAnyFilter,
    EqualsFilter,
    FieldSorting,
    Filter,
    MultiFilter,
    NotFilter,
    PrefixFilter,
    RangeFilter,
    SuffixFilter,
    TotalCountMode,
)
from app.dal.criteria_builder import RequestCriteriaBuilder
from app.dal.search_result import EntityCollection, EntitySearchResult

__all__ = [
    "Aggregation",
    "ContainsFilter",
    "Criteria",
    "EqualsAnyFilter",
    "EqualsFilter",
    "FieldSorting",
    "Filter",
    "MultiFilter",
    "NotFilter",
    "PrefixFilter",
    "RangeFilter",
    "SuffixFilter",
    "TotalCountMode",
    "RequestCriteriaBuilder",
    "EntityCollection",
    "EntitySearchResult",
]
