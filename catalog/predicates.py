"""
Filter predicates.

A Predicate is a small tree of conditions that a data source adapter
interprets (see catalog/data_source.py). Building one never touches storage,
so the translation from SearchFilters can be checked on its own.

    And([Or([Contains("carrera", "medicina"), ...]), Equals("modalidad", "Virtual")])

Public API:
    Equals, Contains, Or, And
    build_predicate(filters) → Predicate | None
"""

from dataclasses import dataclass
from typing import Union

from catalog.models import SearchFilters
from catalog.normalizer import normalize_terms

# Columns a free-text term is matched against
TEXT_COLUMNS = ("carrera", "institucion", "clasificacion")


@dataclass(frozen=True)
class Equals:
    """Exact, case-sensitive equality."""

    column: str
    value: object


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match (ILIKE '%value%')."""

    column: str
    value: str


@dataclass(frozen=True)
class Or:
    clauses: tuple["Predicate", ...]


@dataclass(frozen=True)
class And:
    clauses: tuple["Predicate", ...]


Predicate = Union[Equals, Contains, Or, And]


def text_clause(terms: list[str]) -> Or:
    """A row matches if any term is found in any of the text columns."""
    return Or(tuple(
        Contains(column, term)
        for term in terms
        for column in TEXT_COLUMNS
    ))


def build_predicate(filters: SearchFilters) -> Predicate | None:
    """
    Translate SearchFilters into one predicate.

    Conditions present are ANDed; the free-text clause counts as one of them.
    Returns None when there is nothing to filter on.
    """
    conditions: list[Predicate] = []

    if filters.q and filters.q.strip():
        terms = normalize_terms(filters.q.strip())
        if terms:
            conditions.append(text_clause(terms))

    if filters.modalidad:
        conditions.append(Equals("modalidad", filters.modalidad))
    if filters.institucion:
        conditions.append(Equals("institucion", filters.institucion))
    if filters.nivel:
        conditions.append(Contains("nivel_programa", filters.nivel))
    if filters.area:
        conditions.append(Contains("clasificacion", filters.area))

    if not conditions:
        return None
    return And(tuple(conditions))
