"""
Catalog search engine.

Composes the normaliser, predicate builder, sort resolver, paginator and
facet cache over one DataSource:

    engine = SearchEngine(OfferingTable.load())
    page   = engine.search(SearchFilters(q="ingeniería", limit=10))
    facets = engine.get_filter_options()
    row    = engine.get_by_id("42")

`search` makes exactly one data source round trip; `get_filter_options`
makes at most one. Failures from the data source are re-raised as
DataSourceError with the original exception chained; nothing is retried.
"""

import logging
import time
from collections.abc import Callable

from catalog.config import FACET_TTL_SECONDS, MAX_LIMIT
from catalog.data_source import DataSource, Query, QueryResult
from catalog.errors import DataSourceError, NotFoundError
from catalog.facets import FACET_COLUMNS, FacetCache, extract_facets
from catalog.models import FilterOptions, ResultPage, Row, SearchFilters
from catalog.pagination import clamp_window, paginate
from catalog.predicates import Equals, Or, Predicate, build_predicate
from catalog.sorting import is_ascending, resolve_sort_column

log = logging.getLogger(__name__)

ID_COLUMN = "Id"


class SearchEngine:
    def __init__(
        self,
        source: DataSource,
        max_limit: int = MAX_LIMIT,
        facet_ttl: float = FACET_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.source    = source
        self.max_limit = max_limit
        self.facets    = FacetCache(self._load_facets, ttl=facet_ttl, clock=clock)

    # ------------------------------------------------------------------
    # Data source access
    # ------------------------------------------------------------------

    def _execute(self, query: Query, context: str) -> QueryResult:
        try:
            return self.source.execute(query)
        except Exception as exc:
            log.error("%s: data source error: %s", context, exc)
            raise DataSourceError(f"Database error: {exc}") from exc

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, filters: SearchFilters | None = None) -> ResultPage:
        filters = filters or SearchFilters()
        window = clamp_window(filters.page_number, filters.limit_number, self.max_limit)

        query = Query(
            predicate=build_predicate(filters),
            order_by=resolve_sort_column(filters.sortBy),
            ascending=is_ascending(filters.sortOrder),
            offset=window.offset,
            limit=window.limit,
            count=True,
        )
        result = self._execute(query, "SearchEngine.search")

        rows: list[Row] = result.rows or []
        info = paginate(window.page, window.limit, result.total or 0, self.max_limit)
        return ResultPage(
            data=rows,
            pagination=info.to_pagination(),
            filters=filters.echo(),
        )

    # ------------------------------------------------------------------
    # Facets
    # ------------------------------------------------------------------

    def _load_facets(self) -> FilterOptions:
        query = Query(columns=tuple(FACET_COLUMNS.values()), limit=self.max_limit)
        result = self._execute(query, "SearchEngine.get_filter_options")
        return extract_facets(result.rows or [])

    def get_filter_options(self, now: float | None = None) -> FilterOptions:
        return self.facets.get(now)

    # ------------------------------------------------------------------
    # Single offering
    # ------------------------------------------------------------------

    def get_by_id(self, offering_id: str | int) -> Row:
        predicate: Predicate = Equals(ID_COLUMN, offering_id)
        # Path parameters arrive as strings; stored ids may be numeric
        if isinstance(offering_id, str) and offering_id.strip().isdigit():
            predicate = Or((predicate, Equals(ID_COLUMN, int(offering_id))))

        result = self._execute(Query(predicate=predicate, limit=1), "SearchEngine.get_by_id")
        if not result.rows:
            raise NotFoundError("Offering not found")
        return result.rows[0]
