"""
Filtering, sorting and pagination for listings.

fetch_page runs a ListQuery as SQL. query_collection runs the same ListQuery
over an in-memory collection and is the reference the SQL path is tested
against: substring text filters, whitelisted sort fields, ties by id
ascending, 1-based pages.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from store_ratings.core.errors import ValidationError
from store_ratings.db.enums import SortOrder

T = TypeVar("T")

_LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class QueryFields:
    text: tuple[str, ...] = ()
    exact: tuple[str, ...] = ()
    sortable: tuple[str, ...] = ()
    default_sort: str = "id"
    key: str = "id"


@dataclass
class ListQuery:
    filters: dict[str, Any] = field(default_factory=dict)
    sort_by: str | None = None
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1
    limit: int = 10

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def active_filters(self) -> dict[str, Any]:
        return {name: value for name, value in self.filters.items() if value not in (None, "")}


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    def pagination(self) -> dict[str, int]:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": self.total_pages,
        }

    def map(self, fn) -> "Page":
        return Page(items=[fn(item) for item in self.items], total=self.total, page=self.page, limit=self.limit)


def validate_query(query: ListQuery, fields: QueryFields) -> str:
    if query.page < 1:
        raise ValidationError.for_field("page", "Page must be 1 or greater")
    if query.limit < 1:
        raise ValidationError.for_field("limit", "Limit must be 1 or greater")

    allowed_filters = set(fields.text) | set(fields.exact)
    for name in query.active_filters():
        if name not in allowed_filters:
            raise ValidationError.for_field(name, f"Filtering by '{name}' is not supported")

    sort_by = query.sort_by or fields.default_sort
    if sort_by != fields.key and sort_by not in fields.sortable:
        allowed = ", ".join(fields.sortable)
        raise ValidationError.for_field("sort_by", f"sort_by must be one of: {allowed}")
    return sort_by


def _like_pattern(term: str) -> str:
    escaped = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def filter_conditions(model, query: ListQuery, fields: QueryFields) -> list:
    conditions = []
    for name, value in query.active_filters().items():
        column = getattr(model, name)
        if name in fields.text:
            conditions.append(column.ilike(_like_pattern(str(value)), escape=_LIKE_ESCAPE))
        else:
            conditions.append(column == value)
    return conditions


def fetch_page(
    db: Session,
    model,
    query: ListQuery,
    fields: QueryFields,
    *,
    where: Sequence = (),
    options: Sequence = (),
) -> Page:
    sort_by = validate_query(query, fields)
    conditions = [*where, *filter_conditions(model, query, fields)]

    total = db.execute(
        select(func.count()).select_from(model).where(*conditions)
    ).scalar_one()

    sort_column = getattr(model, sort_by)
    ordering = sort_column.desc() if query.sort_order == SortOrder.DESC else sort_column.asc()
    key_column = getattr(model, fields.key)

    items = db.execute(
        select(model)
        .options(*options)
        .where(*conditions)
        .order_by(ordering, key_column.asc())
        .offset(query.skip)
        .limit(query.limit)
    ).scalars().all()

    return Page(items=list(items), total=total, page=query.page, limit=query.limit)


def _field_value(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _matches(item: Any, query: ListQuery, fields: QueryFields) -> bool:
    for name, expected in query.active_filters().items():
        actual = _field_value(item, name)
        if name in fields.text:
            if actual is None or str(expected).casefold() not in str(actual).casefold():
                return False
        elif actual != expected:
            return False
    return True


def query_collection(items: Iterable[T], query: ListQuery, fields: QueryFields) -> Page[T]:
    sort_by = validate_query(query, fields)

    matched = [item for item in items if _matches(item, query, fields)]
    # two stable passes: key ascending first, then the sort field
    matched.sort(key=lambda item: _field_value(item, fields.key))
    matched.sort(
        key=lambda item: _field_value(item, sort_by),
        reverse=query.sort_order == SortOrder.DESC,
    )

    page_items = matched[query.skip:query.skip + query.limit]
    return Page(items=page_items, total=len(matched), page=query.page, limit=query.limit)
