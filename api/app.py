"""
FastAPI application — HTTP surface over the catalog search engine.

Run as a script (builds data/offerings.json first if it is missing):
    python api/app.py

Or as a module if the data is already built:
    uvicorn api.app:app --reload

Endpoints:
    GET  /health
    GET  /search?q=&modalidad=&institucion=&nivel=&area=&page=&limit=&sortBy=&sortOrder=
         returns: {"success", "data", "pagination", "filters"}
    GET  /search/filters
         returns: {"success", "data": {"modalidades", "instituciones", "areas", "niveles"}}
    GET  /offerings/{id}
    POST /chatbot/message
         body:    {"message": "..."}
         returns: {"success", "data": {"response", "sources"}}

Engine errors map to status codes here and nowhere else:
InvalidFilterError → 400, NotFoundError → 404, DataSourceError → 500.

Logs each request and wall-clock response time to stdout and logs/api.log
(rotating, 5 MB max, 3 backups).
"""

import logging
import logging.handlers
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from openai import OpenAI, OpenAIError
from pydantic import BaseModel

# Ensure project root is on sys.path when running as a script (python api/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog.chat import ChatService
from catalog.data_source import OFFERINGS_FILE, OfferingTable
from catalog.engine import SearchEngine
from catalog.errors import CatalogError, DataSourceError, InvalidFilterError, NotFoundError
from catalog.models import FilterOptions, Pagination, Row, SearchFilters

load_dotenv()

LOG_DIR  = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "api.log"


def _setup_logging() -> None:
    LOG_DIR.mkdir(exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")

DATA_FILE  = Path(os.environ.get("CATALOG_DATA_FILE", str(OFFERINGS_FILE)))
CHAT_MODEL = os.environ.get("CHAT_MODEL", "gpt-4o-mini")


# ---------------------------------------------------------------------------
# Pipeline orchestration
# ---------------------------------------------------------------------------

def _ensure_data() -> None:
    """Build offerings.json from the raw export if it is missing."""
    if DATA_FILE.exists():
        log.info("%s exists — skipping ETL.", DATA_FILE.name)
        return
    log.info("%s missing — running ETL pipeline…", DATA_FILE.name)
    from etl.pipeline import run as run_pipeline
    rows = run_pipeline(output_path=DATA_FILE)
    log.info("  Wrote %d offerings → %s", len(rows), DATA_FILE.name)


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

_engine: SearchEngine | None = None
_chat: ChatService | None = None


@asynccontextmanager
async def lifespan(_: FastAPI):
    global _engine, _chat

    log.info("Loading offerings from %s…", DATA_FILE)
    table = OfferingTable.load(DATA_FILE)
    log.info("  %d offerings loaded.", len(table.rows))
    _engine = SearchEngine(table)

    if os.environ.get("OPENAI_API_KEY"):
        _chat = ChatService(_engine, OpenAI(), model=CHAT_MODEL)
        log.info("  OpenAI client ready (%s).", CHAT_MODEL)
    else:
        log.warning("  OPENAI_API_KEY not set — chatbot disabled.")

    yield  # server runs here


app = FastAPI(title="Academic Offerings Search", lifespan=lifespan)


def _error(status: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"success": False, "error": message, "code": code},
    )


@app.exception_handler(CatalogError)
def _catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    if isinstance(exc, InvalidFilterError):
        status = 400
    elif isinstance(exc, NotFoundError):
        status = 404
    else:
        status = 500
    log.warning("%s %s → %d %s: %s", request.method, request.url.path, status, exc.code, exc.message)
    return _error(status, exc.message, exc.code)


def _get_engine() -> SearchEngine:
    if _engine is None:
        raise DataSourceError("Catalog not loaded")
    return _engine


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class SearchResponse(BaseModel):
    success: bool = True
    data: list[Row]
    pagination: Pagination
    filters: dict[str, Any]


class FiltersResponse(BaseModel):
    success: bool = True
    data: FilterOptions


class OfferingResponse(BaseModel):
    success: bool = True
    data: Row


class ChatRequest(BaseModel):
    message: str


class ChatData(BaseModel):
    response: str
    sources: list[Any]


class ChatResponse(BaseModel):
    success: bool = True
    data: ChatData


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _parse_int(name: str, raw: str | None) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidFilterError(f"'{name}' must be an integer, got {raw!r}") from None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/search", response_model=SearchResponse)
def search(
    q: str | None = None,
    modalidad: str | None = None,
    institucion: str | None = None,
    nivel: str | None = None,
    area: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    sortBy: str | None = None,
    sortOrder: str | None = None,
) -> SearchResponse:
    filters = SearchFilters(
        q=q or None,
        modalidad=modalidad or None,
        institucion=institucion or None,
        nivel=nivel or None,
        area=area or None,
        page=_parse_int("page", page),
        limit=_parse_int("limit", limit),
        sortBy=sortBy or None,
        sortOrder=sortOrder or None,
    )

    t0 = time.perf_counter()
    result = _get_engine().search(filters)
    elapsed = time.perf_counter() - t0
    log.info("search filters=%s  hits=%d/%d  %.3fs",
             filters.echo(), len(result.data), result.pagination.total, elapsed)

    return SearchResponse(
        data=result.data,
        pagination=result.pagination,
        filters=result.filters,
    )


@app.get("/search/filters", response_model=FiltersResponse)
def search_filters() -> FiltersResponse:
    return FiltersResponse(data=_get_engine().get_filter_options())


@app.get("/offerings/{offering_id}", response_model=OfferingResponse)
def get_offering(offering_id: str) -> OfferingResponse:
    return OfferingResponse(data=_get_engine().get_by_id(offering_id))


@app.post("/chatbot/message", response_model=ChatResponse)
def chatbot_message(req: ChatRequest) -> ChatResponse | JSONResponse:
    if _chat is None:
        return _error(503, "Chatbot is not configured", "CHAT_UNAVAILABLE")

    t0 = time.perf_counter()
    try:
        answer = _chat.answer(req.message)
    except OpenAIError as exc:
        log.error("LLM call failed: %s", exc)
        return _error(502, "Language model unavailable", "LLM_ERROR")

    elapsed = time.perf_counter() - t0
    log.info("chat chars=%d  sources=%d  %.2fs", len(req.message), len(answer.sources), elapsed)
    return ChatResponse(data=ChatData(response=answer.response, sources=answer.sources))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    log.info("=== Academic Offerings Search — starting up ===")
    _ensure_data()
    log.info("=== Data ready — launching server on http://0.0.0.0:8000 ===")
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)
