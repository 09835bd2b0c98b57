"""
Catalog data model.

Rows travel through the engine as plain dicts keyed by storage column
(Row = dict[str, Any]); the pydantic models below describe the envelopes the
engine hands back and the shape of a stored offering.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

Row = dict[str, Any]


class Offering(BaseModel):
    """One academic program as stored in data/offerings.json."""

    model_config = ConfigDict(extra="allow")

    Id: str | int
    carrera: str
    institucion: str
    modalidad: str | None = None
    nivel_programa: str | None = None
    clasificacion: str | None = None
    duracion_semestres: int = 0
    valor_semestre: float = 0
    jornada: str | None = None
    enlace: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("duracion_semestres", mode="before")
    @classmethod
    def _whole_semesters(cls, v: Any) -> int:
        try:
            return max(0, int(float(v)))
        except (TypeError, ValueError):
            return 0

    @field_validator("valor_semestre", mode="before")
    @classmethod
    def _price(cls, v: Any) -> float:
        # 0 means "undisclosed"
        try:
            return max(0.0, float(v))
        except (TypeError, ValueError):
            return 0.0


def _lenient_int(v: Any) -> int | None:
    """Unparseable numbers count as absent so callers get the defaults."""
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


class SearchFilters(BaseModel):
    q: str | None = None
    modalidad: str | None = None
    institucion: str | None = None
    nivel: str | None = None
    area: str | None = None
    # Kept as supplied so the echo is verbatim; read through page_number/limit_number
    page: int | float | str | None = None
    limit: int | float | str | None = None
    sortBy: str | None = None
    sortOrder: str | None = None

    @property
    def page_number(self) -> int | None:
        return _lenient_int(self.page)

    @property
    def limit_number(self) -> int | None:
        return _lenient_int(self.limit)

    def echo(self) -> dict[str, Any]:
        """The filters exactly as the caller supplied them."""
        return self.model_dump(exclude_none=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


class ResultPage(BaseModel):
    data: list[Row]
    pagination: Pagination
    filters: dict[str, Any]


class FilterOptions(BaseModel):
    modalidades: list[str] = []
    instituciones: list[str] = []
    areas: list[str] = []
    niveles: list[str] = []
