"""
Request Criteria Builder

Turns Store API request parameters into a Criteria.

Recognized parameters:
- ids: list, or string separated by "|" or ","
- limit / page: positive integers, offset = (page - 1) * limit
- filter / post-filter: list of {type, field, value, parameters, operator, queries}
- sort: list of {field, order} or "name,-position"
- associations: {name: {nested criteria}} or a list of names
- aggregations: list of {name, type, field}
- total-count-mode: 0/1/2 or none/exact/next-pages

Field names arrive camelCase and are stored snake_case.
"""
import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from app.core.exceptions import InvalidCriteriaError
from app.dal.criteria import (
    AGGREGATION_TYPES,
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

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")

TOTAL_COUNT_MODE_ALIASES = {
    "none": TotalCountMode.NONE,
    "exact": TotalCountMode.EXACT,
    "next-pages": TotalCountMode.NEXT_PAGES,
}

RANGE_OPERATORS = (RangeFilter.GTE, RangeFilter.LTE, RangeFilter.GT, RangeFilter.LT)


def to_snake_case(name: str) -> str:
    """availabilityRuleId -> availability_rule_id (dotted paths handled per part)."""
    return ".".join(_CAMEL_BOUNDARY.sub(r"_\1", part).lower() for part in name.split("."))


class RequestCriteriaBuilder:
    """Build Criteria objects from request parameters."""

    def __init__(self, max_limit: Optional[int] = None):
        self.max_limit = max_limit

    def handle_request(self, params: Mapping[str, Any], criteria: Optional[Criteria] = None) -> Criteria:
        criteria = criteria if criteria is not None else Criteria()
        return self._parse(params, criteria)

    def _parse(self, params: Mapping[str, Any], criteria: Criteria) -> Criteria:
        if params.get("ids") is not None:
            criteria.ids.extend(self._parse_ids(params["ids"]))

        if params.get("limit") is not None:
            criteria.set_limit(self._parse_limit(params["limit"]))

        if params.get("page") is not None:
            page = self._parse_page(params["page"])
            limit = criteria.limit if criteria.limit is not None else self.max_limit
            if limit is not None:
                criteria.set_offset((page - 1) * limit)
                criteria.set_limit(limit)
            elif page > 1:
                raise InvalidCriteriaError(
                    "Parameter page requires a limit",
                    parameter="page",
                    code="FRAMEWORK__INVALID_PAGE_QUERY",
                )

        if params.get("filter") is not None:
            criteria.add_filter(*self._parse_filters(params["filter"], "filter"))

        if params.get("post-filter") is not None:
            criteria.add_post_filter(*self._parse_filters(params["post-filter"], "post-filter"))

        if params.get("sort") is not None:
            criteria.add_sorting(*self._parse_sortings(params["sort"]))

        if params.get("associations") is not None:
            self._parse_associations(params["associations"], criteria)

        if params.get("aggregations") is not None:
            criteria.add_aggregation(*self._parse_aggregations(params["aggregations"]))

        if params.get("total-count-mode") is not None:
            criteria.set_total_count_mode(self._parse_total_count_mode(params["total-count-mode"]))

        return criteria

    # ---------------------------------------------------------------------
    # Scalars
    # ---------------------------------------------------------------------

    def _parse_ids(self, value: Any) -> List[str]:
        if isinstance(value, str):
            return [part.strip() for part in re.split(r"[|,]", value) if part.strip()]
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return value
        raise InvalidCriteriaError("Parameter ids must be a list of strings", parameter="ids")

    def _parse_limit(self, value: Any) -> int:
        limit = self._positive_int(value)
        if limit is None:
            raise InvalidCriteriaError(
                f"The limit parameter must be a positive integer, got {value!r}",
                parameter="limit",
                code="FRAMEWORK__INVALID_LIMIT_QUERY",
            )
        if self.max_limit is not None and limit > self.max_limit:
            logger.debug(f"Capping limit {limit} to configured maximum {self.max_limit}")
            return self.max_limit
        return limit

    def _parse_page(self, value: Any) -> int:
        page = self._positive_int(value)
        if page is None:
            raise InvalidCriteriaError(
                f"The page parameter must be a positive integer, got {value!r}",
                parameter="page",
                code="FRAMEWORK__INVALID_PAGE_QUERY",
            )
        return page

    def _parse_total_count_mode(self, value: Any) -> TotalCountMode:
        if isinstance(value, str) and value.strip().lower() in TOTAL_COUNT_MODE_ALIASES:
            return TOTAL_COUNT_MODE_ALIASES[value.strip().lower()]
        try:
            return TotalCountMode(int(value))
        except (TypeError, ValueError):
            raise InvalidCriteriaError(
                f"Unknown total count mode {value!r}",
                parameter="total-count-mode",
                code="FRAMEWORK__INVALID_TOTAL_COUNT_MODE",
            )

    @staticmethod
    def _positive_int(value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            number = value
        elif isinstance(value, str) and value.strip().isdigit():
            number = int(value.strip())
        else:
            return None
        return number if number > 0 else None

    # ---------------------------------------------------------------------
    # Filters
    # ---------------------------------------------------------------------

    def _parse_filters(self, value: Any, parameter: str) -> List[Filter]:
        if isinstance(value, dict):
            value = [value]
        if not isinstance(value, list):
            raise InvalidCriteriaError(
                f"Parameter {parameter} must be a list of filters",
                parameter=parameter,
                code="FRAMEWORK__INVALID_FILTER_QUERY",
            )
        return [self._parse_filter(item, parameter) for item in value]

    def _parse_filter(self, query: Any, parameter: str) -> Filter:
        if not isinstance(query, dict) or not query.get("type"):
            raise InvalidCriteriaError(
                "Each filter needs a type",
                parameter=parameter,
                code="FRAMEWORK__INVALID_FILTER_QUERY",
            )

        filter_type = str(query["type"])

        if filter_type in ("multi", "not"):
            operator = str(query.get("operator", MultiFilter.CONNECTION_AND)).upper()
            if operator not in (MultiFilter.CONNECTION_AND, MultiFilter.CONNECTION_OR, MultiFilter.CONNECTION_XOR):
                raise InvalidCriteriaError(
                    f"Unknown filter operator {operator!r}",
                    parameter=parameter,
                    code="FRAMEWORK__INVALID_FILTER_QUERY",
                )
            queries = self._parse_filters(query.get("queries", []), parameter)
            cls = NotFilter if filter_type == "not" else MultiFilter
            return cls(operator=operator, queries=queries)

        field_name = query.get("field")
        if not isinstance(field_name, str) or not field_name:
            raise InvalidCriteriaError(
                f"Filter of type {filter_type} needs a field",
                parameter=parameter,
                code="FRAMEWORK__INVALID_FILTER_QUERY",
            )
        field_name = to_snake_case(field_name)

        if filter_type == "equals":
            return EqualsFilter(field_name, query.get("value"))

        if filter_type == "equalsAny":
            values = query.get("value")
            if isinstance(values, str):
                values = [v for v in values.split("|") if v]
            if not isinstance(values, list):
                raise InvalidCriteriaError(
                    "equalsAny filter value must be a list",
                    parameter=parameter,
                    code="FRAMEWORK__INVALID_FILTER_QUERY",
                )
            return EqualsAnyFilter(field_name, values)

        if filter_type in ("contains", "prefix", "suffix"):
            value = query.get("value")
            if not isinstance(value, str):
                raise InvalidCriteriaError(
                    f"{filter_type} filter value must be a string",
                    parameter=parameter,
                    code="FRAMEWORK__INVALID_FILTER_QUERY",
                )
            cls = {"contains": ContainsFilter, "prefix": PrefixFilter, "suffix": SuffixFilter}[filter_type]
            return cls(field_name, value)

        if filter_type == "range":
            parameters = query.get("parameters")
            if not isinstance(parameters, dict) or not parameters:
                raise InvalidCriteriaError(
                    "range filter needs parameters",
                    parameter=parameter,
                    code="FRAMEWORK__INVALID_FILTER_QUERY",
                )
            unknown = [key for key in parameters if key not in RANGE_OPERATORS]
            if unknown:
                raise InvalidCriteriaError(
                    f"Unknown range operators: {', '.join(unknown)}",
                    parameter=parameter,
                    code="FRAMEWORK__INVALID_FILTER_QUERY",
                )
            return RangeFilter(field_name, dict(parameters))

        raise InvalidCriteriaError(
            f"Unsupported filter type {filter_type!r}",
            parameter=parameter,
            code="FRAMEWORK__INVALID_FILTER_QUERY",
        )

    # ---------------------------------------------------------------------
    # Sorting, associations, aggregations
    # ---------------------------------------------------------------------

    def _parse_sortings(self, value: Any) -> List[FieldSorting]:
        sortings: List[FieldSorting] = []

        if isinstance(value, str):
            for part in value.split(","):
                part = part.strip()
                if not part:
                    continue
                direction = FieldSorting.ASCENDING
                if part.startswith("-"):
                    direction = FieldSorting.DESCENDING
                    part = part[1:]
                sortings.append(FieldSorting(to_snake_case(part), direction))
            return sortings

        if not isinstance(value, list):
            raise InvalidCriteriaError("Parameter sort must be a list", parameter="sort", code="FRAMEWORK__INVALID_SORT_QUERY")

        for item in value:
            if not isinstance(item, dict) or not item.get("field"):
                raise InvalidCriteriaError("Each sorting needs a field", parameter="sort", code="FRAMEWORK__INVALID_SORT_QUERY")
            direction = str(item.get("order", FieldSorting.ASCENDING)).upper()
            if direction not in (FieldSorting.ASCENDING, FieldSorting.DESCENDING):
                raise InvalidCriteriaError(
                    f"Unknown sort direction {direction!r}",
                    parameter="sort",
                    code="FRAMEWORK__INVALID_SORT_QUERY",
                )
            sortings.append(FieldSorting(to_snake_case(str(item["field"])), direction))

        return sortings

    def _parse_associations(self, value: Any, criteria: Criteria) -> None:
        if isinstance(value, list):
            for name in value:
                criteria.add_association(to_snake_case(str(name)))
            return

        if not isinstance(value, dict):
            raise InvalidCriteriaError("Parameter associations must be an object", parameter="associations")

        for name, nested in value.items():
            association = criteria.get_association(to_snake_case(str(name)))
            if nested:
                if not isinstance(nested, dict):
                    raise InvalidCriteriaError(
                        f"Association {name} must be an object",
                        parameter="associations",
                    )
                self._parse(nested, association)

    def _parse_aggregations(self, value: Any) -> List[Aggregation]:
        if not isinstance(value, list):
            raise InvalidCriteriaError(
                "Parameter aggregations must be a list",
                parameter="aggregations",
                code="FRAMEWORK__INVALID_AGGREGATION_QUERY",
            )

        aggregations: List[Aggregation] = []
        for item in value:
            if not isinstance(item, dict) or not item.get("name") or not item.get("field"):
                raise InvalidCriteriaError(
                    "Each aggregation needs a name and a field",
                    parameter="aggregations",
                    code="FRAMEWORK__INVALID_AGGREGATION_QUERY",
                )
            aggregation_type = str(item.get("type", ""))
            if aggregation_type not in AGGREGATION_TYPES:
                raise InvalidCriteriaError(
                    f"Unsupported aggregation type {aggregation_type!r}",
                    parameter="aggregations",
                    code="FRAMEWORK__INVALID_AGGREGATION_QUERY",
                )
            aggregations.append(Aggregation(str(item["name"]), aggregation_type, to_snake_case(str(item["field"]))))

        return aggregations
