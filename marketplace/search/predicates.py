"""
Declarative search predicates.

A search is expressed as a flat list of ``Predicate`` objects combined with
logical AND. The same list drives the count request and the page request, and
every predicate knows how to render itself as a SQLAlchemy clause and how to
evaluate itself against an in-memory object. Predicates flagged
``remote=False`` depend on derived view-model fields and are only ever applied
after mapping.
"""
import enum
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, or_

from marketplace.catalog import SERVICES_AGGREGATE, SERVICES_AGGREGATE_TYPES
from marketplace.models import ServiceType
from marketplace.schemas.request import SearchFilters


class Op(str, enum.Enum):
    EQ = "eq"
    IN = "in"
    CONTAINS = "contains"
    SEARCH = "search"


@dataclass(frozen=True)
class Predicate:
    field: str | tuple[str, ...]
    op: Op
    value: Any
    remote: bool = True

    def to_clause(self, model):
        if self.op == Op.SEARCH:
            return or_(
                *(
                    getattr(model, name).icontains(self.value, autoescape=True)
                    for name in self.field
                )
            )

        column = getattr(model, self.field)
        if self.op == Op.EQ:
            return column == self.value
        if self.op == Op.IN:
            return column.in_(list(self.value))
        if self.op == Op.CONTAINS:
            return column.contains([self.value])
        raise ValueError(f"Unsupported operator: {self.op}")

    def matches(self, obj) -> bool:
        if self.op == Op.SEARCH:
            needle = str(self.value).lower()
            return any(
                needle in (getattr(obj, name) or "").lower() for name in self.field
            )

        actual = getattr(obj, self.field)
        if self.op == Op.EQ:
            return actual == self.value
        if self.op == Op.IN:
            return actual in self.value
        if self.op == Op.CONTAINS:
            return self.value in (actual or [])
        raise ValueError(f"Unsupported operator: {self.op}")


SEARCH_FIELDS = ("business_name", "description", "city")


def build_predicates(filters: SearchFilters, country: str | None) -> list[Predicate]:
    """Translate search filters into the ordered predicate list."""
    predicates = [Predicate("is_active", Op.EQ, True)]

    if country:
        predicates.append(Predicate("country", Op.EQ, country))

    if filters.q:
        predicates.append(Predicate(SEARCH_FIELDS, Op.SEARCH, filters.q))

    if filters.city:
        predicates.append(Predicate("city", Op.EQ, filters.city))

    if filters.category:
        predicates.append(Predicate("categories", Op.CONTAINS, filters.category))

    if filters.service_type:
        if filters.service_type == SERVICES_AGGREGATE:
            predicates.append(
                Predicate("service_type", Op.IN, tuple(SERVICES_AGGREGATE_TYPES))
            )
        else:
            predicates.append(
                Predicate("service_type", Op.EQ, ServiceType(filters.service_type))
            )

    if filters.community:
        predicates.append(Predicate("community", Op.EQ, filters.community))

    if filters.verified_only:
        predicates.append(Predicate("is_verified", Op.EQ, True))

    if filters.video_only:
        predicates.append(Predicate("has_video", Op.EQ, True, remote=False))

    return predicates


def split_predicates(
    predicates: list[Predicate],
) -> tuple[list[Predicate], list[Predicate]]:
    """Separate predicates the store can evaluate from those applied after mapping."""
    remote = [predicate for predicate in predicates if predicate.remote]
    local = [predicate for predicate in predicates if not predicate.remote]
    return remote, local


def apply_predicates(statement: Select, predicates: list[Predicate], model) -> Select:
    """Add every predicate to the statement as one AND-ed WHERE clause."""
    if predicates:
        statement = statement.where(
            *(predicate.to_clause(model) for predicate in predicates)
        )
    return statement


def matches_all(obj, predicates: list[Predicate]) -> bool:
    return all(predicate.matches(obj) for predicate in predicates)
