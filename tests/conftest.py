import pytest

from catalog.data_source import OfferingTable, Query, QueryResult
from catalog.engine import SearchEngine


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingSource:
    """Wraps a data source and records every query it receives."""

    def __init__(self, inner):
        self.inner = inner
        self.queries: list[Query] = []

    def execute(self, query: Query) -> QueryResult:
        self.queries.append(query)
        return self.inner.execute(query)


class FailingSource:
    def __init__(self, message: str = "connection refused"):
        self.message = message
        self.calls = 0

    def execute(self, query: Query) -> QueryResult:
        self.calls += 1
        raise ConnectionError(self.message)


@pytest.fixture
def sample_offerings():
    """Five programs; sorted by name the ids run 5, 3, 1, 2, 4."""
    return [
        {
            "Id": "1",
            "carrera": "Ingeniería de Sistemas",
            "institucion": "Universidad Nacional",
            "modalidad": "Presencial",
            "nivel_programa": "Profesional",
            "clasificacion": "Ingeniería",
            "duracion_semestres": 10,
            "valor_semestre": 1500000,
            "jornada": "Diurna",
            "enlace": "https://unal.edu.co/sistemas",
        },
        {
            "Id": "2",
            "carrera": "Medicina",
            "institucion": "Universidad del Rosario",
            "modalidad": "Presencial",
            "nivel_programa": "Profesional",
            "clasificacion": "Ciencias de la Salud",
            "duracion_semestres": 12,
            "valor_semestre": 9000000,
            "jornada": "Diurna",
            "enlace": "https://urosario.edu.co/medicina",
        },
        {
            "Id": "3",
            "carrera": "Derecho",
            "institucion": "Medicina University",
            "modalidad": "Virtual",
            "nivel_programa": "Profesional",
            "clasificacion": "Ciencias Sociales",
            "duracion_semestres": 10,
            "valor_semestre": 0,
            "jornada": None,
            "enlace": None,
        },
        {
            "Id": "4",
            "carrera": "Tecnología en Desarrollo de Software",
            "institucion": "SENA",
            "modalidad": "Virtual",
            "nivel_programa": "Tecnólogo",
            "clasificacion": "Ingeniería",
            "duracion_semestres": 6,
            "valor_semestre": 0,
            "jornada": "Nocturna",
            "enlace": "https://sena.edu.co",
        },
        {
            "Id": "5",
            "carrera": "Administración de Empresas",
            "institucion": "Universidad Nacional",
            "modalidad": "Híbrida",
            "nivel_programa": "Profesional",
            "clasificacion": "Economía",
            "duracion_semestres": 9,
            "valor_semestre": 2000000,
            "jornada": None,
            "enlace": None,
        },
    ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def table(sample_offerings):
    return OfferingTable(sample_offerings)


@pytest.fixture
def source(table):
    return CountingSource(table)


@pytest.fixture
def engine(source, clock):
    return SearchEngine(source, clock=clock)
