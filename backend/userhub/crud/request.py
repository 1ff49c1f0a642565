"""
Parsed query descriptors for generic CRUD reads.

Query strings follow the ``filter=<field>||<operator>||<value>`` and
``sort=<field>,<ASC|DESC>`` conventions.  The descriptor keeps the parsed
filters as a conjunctive ``$and`` clause list that services may extend before
handing the request to :class:`~userhub.crud.service.CrudService`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import InvalidQueryError

OPERATORS = frozenset({"$eq", "$ne", "$gt", "$lt", "$gte", "$lte", "$in", "$cont"})
SORT_DIRECTIONS = frozenset({"ASC", "DESC"})
DELIMITER = "||"


@dataclass
class QueryFilter:
    field: str
    operator: str
    value: Any


@dataclass
class ParsedRequestParams:
    param_filter: List[QueryFilter] = field(default_factory=list)
    search: Dict[str, List[Dict[str, Any]]] = field(default_factory=lambda: {"$and": []})
    sort: List[Tuple[str, str]] = field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None
    page: Optional[int] = None


@dataclass
class CrudRequest:
    parsed: ParsedRequestParams = field(default_factory=ParsedRequestParams)


def parse_filter(raw: str) -> QueryFilter:
    parts = raw.split(DELIMITER)
    if len(parts) != 3 or not parts[0]:
        raise InvalidQueryError(f"Invalid filter '{raw}', expected <field>||<operator>||<value>")
    field_name, operator, value = parts
    if operator not in OPERATORS:
        raise InvalidQueryError(f"Invalid filter operator '{operator}'")
    if operator == "$in":
        return QueryFilter(field_name, operator, [item for item in value.split(",") if item])
    return QueryFilter(field_name, operator, value)


def parse_sort(raw: str) -> Tuple[str, str]:
    field_name, _, direction = raw.partition(",")
    direction = direction.upper() or "ASC"
    if not field_name or direction not in SORT_DIRECTIONS:
        raise InvalidQueryError(f"Invalid sort '{raw}', expected <field>,<ASC|DESC>")
    return field_name, direction


def parse_crud_request(
    filters: Sequence[str] = (),
    sort: Sequence[str] = (),
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    page: Optional[int] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> CrudRequest:
    """Build a :class:`CrudRequest` from raw query and path parameters."""

    parsed = ParsedRequestParams(limit=limit, offset=offset, page=page)
    for name, value in (params or {}).items():
        parsed.param_filter.append(QueryFilter(name, "$eq", value))
    for raw in filters:
        query_filter = parse_filter(raw)
        parsed.search["$and"].append({query_filter.field: {query_filter.operator: query_filter.value}})
    parsed.sort = [parse_sort(raw) for raw in sort]
    return CrudRequest(parsed=parsed)


__all__ = [
    "CrudRequest",
    "OPERATORS",
    "ParsedRequestParams",
    "QueryFilter",
    "parse_crud_request",
    "parse_filter",
    "parse_sort",
]
