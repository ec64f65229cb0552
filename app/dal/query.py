"""
Criteria → SQLAlchemy translation

A CriteriaQueryBuilder knows which criteria field names map to which columns
of one entity and which relationships may be eager-loaded. Anything not
declared is rejected with an InvalidCriteriaError.
"""
import functools
import logging
import operator
from typing import Any, Dict, List, Mapping, Sequence

from sqlalchemy import and_, case, false, func, not_, or_, select, true
from sqlalchemy.orm import selectinload

from app.core.exceptions import InvalidCriteriaError
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
)

logger = logging.getLogger(__name__)

RANGE_COMPARATORS = {
    RangeFilter.GTE: operator.ge,
    RangeFilter.LTE: operator.le,
    RangeFilter.GT: operator.gt,
    RangeFilter.LT: operator.lt,
}


class CriteriaQueryBuilder:
    """Translate Criteria parts into SQLAlchemy expressions for one entity."""

    def __init__(self, entity_name: str, fields: Mapping[str, Any], associations: Mapping[str, Any]):
        self.entity_name = entity_name
        self.fields = dict(fields)
        self.associations = dict(associations)

    def column(self, field_name: str):
        try:
            return self.fields[field_name]
        except KeyError:
            raise InvalidCriteriaError(
                f"Field {field_name!r} not found on {self.entity_name}",
                code="FRAMEWORK__FIELD_NOT_FOUND",
                details={"field": field_name},
            )

    # ---------------------------------------------------------------------
    # Filters
    # ---------------------------------------------------------------------

    def conditions(self, filters: Sequence[Filter]) -> List[Any]:
        return [self.condition(query) for query in filters]

    def condition(self, query: Filter):
        if isinstance(query, NotFilter):
            return not_(self._connect(query.operator, query.queries))

        if isinstance(query, MultiFilter):
            return self._connect(query.operator, query.queries)

        if isinstance(query, EqualsFilter):
            column = self.column(query.field)
            if query.value is None:
                return column.is_(None)
            return column == query.value

        if isinstance(query, EqualsAnyFilter):
            column = self.column(query.field)
            values = [value for value in query.values if value is not None]
            clause = column.in_(values) if values else false()
            if len(values) != len(query.values):
                clause = or_(clause, column.is_(None))
            return clause

        if isinstance(query, ContainsFilter):
            return self.column(query.field).contains(query.value, autoescape=True)

        if isinstance(query, PrefixFilter):
            return self.column(query.field).startswith(query.value, autoescape=True)

        if isinstance(query, SuffixFilter):
            return self.column(query.field).endswith(query.value, autoescape=True)

        if isinstance(query, RangeFilter):
            column = self.column(query.field)
            bounds = [RANGE_COMPARATORS[key](column, value) for key, value in query.parameters.items()]
            return and_(*bounds) if bounds else true()

        raise InvalidCriteriaError(f"Unsupported filter {type(query).__name__}")

    def _connect(self, connection: str, queries: Sequence[Filter]):
        clauses = self.conditions(queries)
        if not clauses:
            return true()
        if connection == MultiFilter.CONNECTION_OR:
            return or_(*clauses)
        if connection == MultiFilter.CONNECTION_XOR:
            matches = functools.reduce(operator.add, [case((clause, 1), else_=0) for clause in clauses])
            return matches == 1
        return and_(*clauses)

    # ---------------------------------------------------------------------
    # Sorting & loading
    # ---------------------------------------------------------------------

    def order_by(self, sortings: Sequence[FieldSorting]) -> List[Any]:
        clauses = []
        for sorting in sortings:
            column = self.column(sorting.field)
            clauses.append(column.desc() if sorting.direction == FieldSorting.DESCENDING else column.asc())
        return clauses

    def load_options(self, criteria: Criteria) -> List[Any]:
        options = []
        for name, nested in criteria.associations.items():
            if name not in self.associations:
                raise InvalidCriteriaError(
                    f"Association {name!r} not found on {self.entity_name}",
                    code="FRAMEWORK__ASSOCIATION_NOT_FOUND",
                    details={"association": name},
                )
            if nested.associations:
                # None of the loadable associations declare their own
                nested_name = next(iter(nested.associations))
                raise InvalidCriteriaError(
                    f"Association {nested_name!r} not found on {name}",
                    code="FRAMEWORK__ASSOCIATION_NOT_FOUND",
                    details={"association": f"{name}.{nested_name}"},
                )
            unsupported = self._nested_criteria_parts(nested)
            if unsupported:
                raise InvalidCriteriaError(
                    f"Association {name!r} does not accept {', '.join(unsupported)}",
                    code="FRAMEWORK__INVALID_ASSOCIATION_CRITERIA",
                    details={"association": name, "parameters": unsupported},
                )
            options.append(selectinload(self.associations[name]))
        return options

    @staticmethod
    def _nested_criteria_parts(nested: Criteria) -> List[str]:
        # Associations are loaded whole; only plain association names are supported
        parts = {
            "filter": nested.filters,
            "post-filter": nested.post_filters,
            "sort": nested.sortings,
            "aggregations": nested.aggregations,
            "ids": nested.ids,
            "limit": nested.limit is not None,
            "page": nested.offset is not None,
        }
        return [key for key, value in parts.items() if value]

    # ---------------------------------------------------------------------
    # Aggregations
    # ---------------------------------------------------------------------

    async def aggregate(self, db, aggregations: Mapping[str, Aggregation], from_entity, where: Sequence[Any]) -> Dict[str, Dict[str, Any]]:
        """Run every aggregation against the rows matching ``where``."""
        results: Dict[str, Dict[str, Any]] = {}

        for name, aggregation in aggregations.items():
            column = self.column(aggregation.field)

            if aggregation.type == "terms":
                stmt = (
                    select(column, func.count())
                    .select_from(from_entity)
                    .where(*where)
                    .group_by(column)
                    .order_by(column)
                )
                rows = (await db.execute(stmt)).all()
                results[name] = {"buckets": [{"key": key, "count": count} for key, count in rows]}
                continue

            function = {
                "count": func.count,
                "min": func.min,
                "max": func.max,
                "avg": func.avg,
                "sum": func.sum,
            }[aggregation.type]
            stmt = select(function(column)).select_from(from_entity).where(*where)
            value = (await db.execute(stmt)).scalar()
            if aggregation.type == "avg" and value is not None:
                value = float(value)
            results[name] = {aggregation.type: value}

        return results
