"""
Public sort keys → storage columns.

Unknown keys fall back to the program name; resolving never fails.
"""

DEFAULT_SORT_COLUMN = "carrera"

SORT_COLUMNS = {
    "nombre":      "carrera",
    "carrera":     "carrera",
    "institucion": "institucion",
    "modalidad":   "modalidad",
    "duracion":    "duracion_semestres",
    "precio":      "valor_semestre",
    "nivel":       "nivel_programa",
}


def resolve_sort_column(key: str | None) -> str:
    return SORT_COLUMNS.get(key or "", DEFAULT_SORT_COLUMN)


def is_ascending(order: str | None) -> bool:
    # Only the exact string "desc" sorts descending
    return order != "desc"
