"""
Filter facets and their time-bounded cache.

A facet is one filterable dimension (modality, institution, area, level) and
the distinct values observed for it. Computing them costs a storage round
trip, so the engine keeps the last result in a FacetCache:

    Empty ──get──▶ Fresh ──ttl elapses──▶ Stale ──get──▶ Fresh

A Stale cache keeps its value until a recomputation succeeds. If the loader
raises, the error propagates and the previous value and timestamp are kept.

Public API:
    FACET_COLUMNS
    unique_values(rows, column) → list[str]
    extract_facets(rows)        → FilterOptions
    FacetCache(loader, ttl, clock)
    FacetCache.get(now) / FacetCache.invalidate()
"""

import logging
import threading
import time
from collections.abc import Callable

from catalog.config import FACET_TTL_SECONDS
from catalog.models import FilterOptions, Row
from catalog.normalizer import sort_key

log = logging.getLogger(__name__)

# FilterOptions field → storage column
FACET_COLUMNS = {
    "modalidades":   "modalidad",
    "instituciones": "institucion",
    "areas":         "clasificacion",
    "niveles":       "nivel_programa",
}


def unique_values(rows: list[Row], column: str) -> list[str]:
    """Distinct non-blank strings in `column`, in locale-aware order."""
    values = {
        v for v in (r.get(column) for r in rows)
        if isinstance(v, str) and v.strip()
    }
    return sorted(values, key=sort_key)


def extract_facets(rows: list[Row]) -> FilterOptions:
    return FilterOptions(**{
        field: unique_values(rows, column)
        for field, column in FACET_COLUMNS.items()
    })


class FacetCache:
    def __init__(
        self,
        loader: Callable[[], FilterOptions],
        ttl: float = FACET_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.loader = loader
        self.ttl    = ttl
        self.clock  = clock

        # (value, computed_at), replaced as a whole so readers see one snapshot
        self._entry: tuple[FilterOptions, float] | None = None
        self._lock = threading.Lock()

    @property
    def value(self) -> FilterOptions | None:
        """Last computed facets, fresh or stale."""
        entry = self._entry
        return entry[0] if entry is not None else None

    @property
    def state(self) -> str:
        """'empty', 'fresh' or 'stale' as of the clock's current time."""
        entry = self._entry
        if entry is None:
            return "empty"
        return "fresh" if self._is_fresh(entry, self.clock()) else "stale"

    def _is_fresh(self, entry: tuple[FilterOptions, float] | None, now: float) -> bool:
        return entry is not None and now - entry[1] < self.ttl

    def get(self, now: float | None = None) -> FilterOptions:
        if now is None:
            now = self.clock()
        entry = self._entry
        if self._is_fresh(entry, now):
            return entry[0]

        # Single flight: callers that queued behind a recomputation reuse it
        with self._lock:
            entry = self._entry
            if self._is_fresh(entry, now):
                return entry[0]
            log.info("Recomputing filter facets (cache %s)…",
                     "stale" if entry is not None else "empty")
            value = self.loader()
            self._entry = (value, now)
            return value

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None
