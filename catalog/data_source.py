"""
Data source collaborator.

The engine speaks to storage through one call:

    DataSource.execute(Query) → QueryResult(rows, total)

A Query carries a predicate (catalog/predicates.py), an optional column
projection, ordering, a row range and whether an exact count is wanted.
Implementations raise on failure; the engine wraps whatever they raise.

OfferingTable is the bundled implementation: an in-process table over the
rows in data/offerings.json (written by etl/pipeline.py). Substring matching
behaves like ILIKE over unaccent(): both sides are lower-cased and stripped
of accents, so the accent-free search terms still find "Ingeniería". NULLs
sort last in either direction.

Public API:
    Query, QueryResult, DataSource
    matches(predicate, row) → bool
    OfferingTable(rows)
    OfferingTable.load(path) / OfferingTable.save(path)
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from catalog.models import Row
from catalog.normalizer import normalize_text, sort_key
from catalog.predicates import And, Contains, Equals, Or, Predicate

DATA_DIR        = Path(__file__).parent.parent / "data"
OFFERINGS_FILE  = DATA_DIR / "offerings.json"


@dataclass(frozen=True)
class Query:
    predicate: Predicate | None = None
    columns: tuple[str, ...] | None = None   # None selects every column
    order_by: str | None = None
    ascending: bool = True
    offset: int = 0
    limit: int | None = None
    count: bool = False


@dataclass
class QueryResult:
    rows: list[Row] | None
    total: int | None = None


class DataSource(Protocol):
    def execute(self, query: Query) -> QueryResult: ...


# ---------------------------------------------------------------------------
# Predicate interpretation
# ---------------------------------------------------------------------------

def matches(predicate: Predicate | None, row: Row) -> bool:
    if predicate is None:
        return True
    if isinstance(predicate, Equals):
        return row.get(predicate.column) == predicate.value
    if isinstance(predicate, Contains):
        cell = row.get(predicate.column)
        if cell is None:
            return False
        return normalize_text(predicate.value) in normalize_text(str(cell))
    if isinstance(predicate, Or):
        return any(matches(p, row) for p in predicate.clauses)
    if isinstance(predicate, And):
        return all(matches(p, row) for p in predicate.clauses)
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def _order_key(value: Any) -> Any:
    return sort_key(value) if isinstance(value, str) else value


def _ordered(rows: list[Row], column: str, ascending: bool) -> list[Row]:
    present = [r for r in rows if r.get(column) is not None]
    missing = [r for r in rows if r.get(column) is None]
    present.sort(key=lambda r: _order_key(r[column]), reverse=not ascending)
    return present + missing


# ---------------------------------------------------------------------------
# In-process table
# ---------------------------------------------------------------------------

class OfferingTable:
    def __init__(self, rows: list[Row]):
        self.rows = rows

    def execute(self, query: Query) -> QueryResult:
        hits = [r for r in self.rows if matches(query.predicate, r)]
        total = len(hits) if query.count else None

        if query.order_by:
            hits = _ordered(hits, query.order_by, query.ascending)

        end = None if query.limit is None else query.offset + query.limit
        window = hits[query.offset:end]

        if query.columns is None:
            page = [dict(r) for r in window]
        else:
            page = [{c: r.get(c) for c in query.columns} for r in window]
        return QueryResult(rows=page, total=total)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, path: Path = OFFERINGS_FILE) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.rows, ensure_ascii=False, indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path = OFFERINGS_FILE) -> "OfferingTable":
        if not path.exists():
            raise FileNotFoundError(
                f"offerings.json not found at {path}. Run the ETL pipeline first."
            )
        rows = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(rows, list):
            raise ValueError(f"{path} must hold a JSON array of offerings")
        return cls(rows)
