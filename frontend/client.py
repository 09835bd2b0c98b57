"""
Thin HTTP client for the catalog API, shared by the Streamlit UI.

Connection and HTTP errors propagate as requests exceptions; callers decide
how to show them.
"""

from typing import Any

import requests

API_URL = "http://localhost:8000"


class CatalogClient:
    def __init__(self, base_url: str = API_URL, timeout: float = 15,
                 session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout  = timeout
        self.session  = session or requests.Session()

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        resp = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def search(self, **filters: Any) -> dict[str, Any]:
        """GET /search; None and empty-string filters are left out of the URL."""
        params = {k: v for k, v in filters.items() if v not in (None, "")}
        return self._get("/search", params=params)

    def filter_options(self) -> dict[str, list[str]]:
        return self._get("/search/filters")["data"]

    def offering(self, offering_id: str | int) -> dict[str, Any]:
        return self._get(f"/offerings/{offering_id}")["data"]
