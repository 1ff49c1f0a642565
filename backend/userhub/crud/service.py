from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Iterable, List, Mapping, Type, TypeVar, Union

from sqlalchemy import ColumnElement, String, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.base import Base
from ..exceptions import InvalidQueryError
from .request import CrudRequest, ParsedRequestParams

ModelT = TypeVar("ModelT", bound=Base)


@dataclass
class GetManyResponse(Generic[ModelT]):
    data: List[ModelT]
    count: int
    total: int
    page: int
    page_count: int


def is_get_many(value: Any) -> bool:
    return isinstance(value, GetManyResponse)


class CrudService(Generic[ModelT]):
    """
    Generic read/write helper for a single ORM model.

    Only columns listed in ``allowed_fields`` may appear in filters or sorts,
    which keeps sensitive columns out of query strings.
    """

    def __init__(self, model: Type[ModelT], allowed_fields: Iterable[str] | None = None) -> None:
        self.model = model
        columns = model.__table__.columns
        self._allowed = set(allowed_fields) if allowed_fields is not None else set(columns.keys())

    def get_param_filters(self, parsed: ParsedRequestParams) -> dict[str, Any]:
        return {query_filter.field: query_filter.value for query_filter in parsed.param_filter}

    async def find_one(self, db: AsyncSession, *criteria: ColumnElement[bool]) -> ModelT | None:
        result = await db.execute(select(self.model).where(*criteria).limit(1))
        return result.scalars().first()

    async def save(self, db: AsyncSession, entity: ModelT) -> ModelT:
        db.add(entity)
        await db.commit()
        await db.refresh(entity)
        return entity

    async def get_one(self, db: AsyncSession, request: CrudRequest) -> ModelT | None:
        stmt = select(self.model)
        conditions = self._conditions(request.parsed)
        if conditions:
            stmt = stmt.where(*conditions)
        result = await db.execute(stmt.limit(1))
        return result.scalars().first()

    async def get_many(
        self, db: AsyncSession, request: CrudRequest
    ) -> Union[GetManyResponse[ModelT], List[ModelT]]:
        parsed = request.parsed
        conditions = self._conditions(parsed)

        stmt = select(self.model)
        if conditions:
            stmt = stmt.where(*conditions)
        for field_name, direction in parsed.sort:
            column = self._column(field_name)
            stmt = stmt.order_by(column.desc() if direction == "DESC" else column.asc())
        if not parsed.sort:
            stmt = stmt.order_by(*self.model.__table__.primary_key.columns)

        if parsed.page is not None and not parsed.limit:
            raise InvalidQueryError("The page parameter requires a limit")

        if not self._should_paginate(parsed):
            if parsed.offset:
                stmt = stmt.offset(parsed.offset)
            if parsed.limit:
                stmt = stmt.limit(parsed.limit)
            result = await db.execute(stmt)
            return list(result.scalars().all())

        take = parsed.limit
        if parsed.offset is not None:
            skip = parsed.offset
        else:
            skip = (parsed.page - 1) * take

        count_stmt = select(func.count()).select_from(self.model)
        if conditions:
            count_stmt = count_stmt.where(*conditions)
        total = await db.scalar(count_stmt) or 0

        result = await db.execute(stmt.offset(skip).limit(take))
        data = list(result.scalars().all())
        return GetManyResponse(
            data=data,
            count=len(data),
            total=total,
            page=skip // take + 1,
            page_count=math.ceil(total / take) if total else 1,
        )

    @staticmethod
    def _should_paginate(parsed: ParsedRequestParams) -> bool:
        return bool(parsed.limit) and (parsed.page is not None or parsed.offset is not None)

    def _conditions(self, parsed: ParsedRequestParams) -> list[ColumnElement[bool]]:
        conditions = [
            self._condition(query_filter.field, query_filter.operator, query_filter.value)
            for query_filter in parsed.param_filter
        ]
        for clause in parsed.search.get("$and", []):
            for field_name, spec in clause.items():
                if isinstance(spec, Mapping):
                    for operator, value in spec.items():
                        conditions.append(self._condition(field_name, operator, value))
                else:
                    conditions.append(self._condition(field_name, "$eq", spec))
        return conditions

    def _column(self, field_name: str):
        if field_name not in self._allowed:
            raise InvalidQueryError(f"Invalid field '{field_name}'")
        return getattr(self.model, field_name)

    def _condition(self, field_name: str, operator: str, value: Any) -> ColumnElement[bool]:
        column = self._column(field_name)
        if operator == "$in":
            values = value if isinstance(value, (list, tuple, set)) else [value]
            return column.in_([self._coerce(column, item) for item in values])
        if operator == "$cont":
            if not isinstance(column.type, String):
                raise InvalidQueryError(f"Operator '$cont' is not supported for field '{field_name}'")
            return column.contains(str(value))

        coerced = self._coerce(column, value)
        if operator == "$eq":
            return column == coerced
        if operator == "$ne":
            return column != coerced
        if operator == "$gt":
            return column > coerced
        if operator == "$lt":
            return column < coerced
        if operator == "$gte":
            return column >= coerced
        if operator == "$lte":
            return column <= coerced
        raise InvalidQueryError(f"Invalid filter operator '{operator}'")

    @staticmethod
    def _coerce(column: Any, value: Any) -> Any:
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return value
        if isinstance(value, python_type):
            return value
        try:
            if python_type is datetime:
                return datetime.fromisoformat(str(value))
            return python_type(value)
        except (TypeError, ValueError):
            raise InvalidQueryError(f"Invalid value '{value}' for field '{column.key}'") from None
