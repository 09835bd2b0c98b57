"""
Streamlit frontend for the academic offerings catalog.

Calls GET /search and GET /search/filters on http://localhost:8000 and
shows the matching programs as a paginated table.
"""

import sys
from pathlib import Path

import requests
import streamlit as st

# Ensure project root is on sys.path when launched with `streamlit run frontend/ui.py`
sys.path.insert(0, str(Path(__file__).parent.parent))

from frontend.client import CatalogClient

ALL = "Todos"
SORT_LABELS = {
    "Nombre": "nombre",
    "Institución": "institucion",
    "Modalidad": "modalidad",
    "Duración": "duracion",
    "Precio": "precio",
    "Nivel": "nivel",
}

client = CatalogClient()

st.set_page_config(page_title="Oferta académica", layout="wide")
st.title("Oferta académica")


@st.cache_data(ttl=300)
def _load_options() -> dict[str, list[str]]:
    return client.filter_options()


try:
    options = _load_options()
except requests.exceptions.RequestException as exc:
    st.error(f"Cannot reach the API ({exc}). Start it with: python api/app.py")
    st.stop()

query = st.text_input("Buscar", placeholder="e.g. ingeniería de sistemas")

col1, col2, col3, col4 = st.columns(4)
modalidad   = col1.selectbox("Modalidad", [ALL] + options.get("modalidades", []))
institucion = col2.selectbox("Institución", [ALL] + options.get("instituciones", []))
nivel       = col3.selectbox("Nivel", [ALL] + options.get("niveles", []))
area        = col4.selectbox("Área", [ALL] + options.get("areas", []))

col5, col6, col7 = st.columns(3)
sort_label = col5.selectbox("Ordenar por", list(SORT_LABELS))
descending = col6.checkbox("Descendente")
limit      = col7.selectbox("Por página", [10, 20, 50, 100], index=1)
page       = st.number_input("Página", min_value=1, value=1, step=1)

try:
    result = client.search(
        q=query,
        modalidad=None if modalidad == ALL else modalidad,
        institucion=None if institucion == ALL else institucion,
        nivel=None if nivel == ALL else nivel,
        area=None if area == ALL else area,
        page=int(page),
        limit=limit,
        sortBy=SORT_LABELS[sort_label],
        sortOrder="desc" if descending else "asc",
    )
except requests.exceptions.HTTPError as exc:
    st.error(f"API error: {exc}")
    st.stop()
except requests.exceptions.ConnectionError:
    st.error("Cannot reach the API. Start it with: python api/app.py")
    st.stop()

pagination = result["pagination"]
st.caption(
    f"{pagination['total']} programas — página {pagination['page']} "
    f"de {max(pagination['totalPages'], 1)}"
)

rows = [
    {
        "Carrera": o.get("carrera", ""),
        "Institución": o.get("institucion", ""),
        "Modalidad": o.get("modalidad", ""),
        "Nivel": o.get("nivel_programa", ""),
        "Semestres": o.get("duracion_semestres", 0),
        "Valor semestre": o.get("valor_semestre") or "No reportado",
        "Enlace": o.get("enlace", ""),
    }
    for o in result["data"]
]
if rows:
    st.dataframe(rows, use_container_width=True, hide_index=True)
else:
    st.info("No hay programas para estos filtros.")
