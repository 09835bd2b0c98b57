"""
ETL pipeline: loads the raw offerings export (JSON array or CSV), cleans it,
and writes data/offerings.json for catalog/data_source.py.

Cleaning rules:
  - string fields are trimmed; blank optional fields become null
  - duracion_semestres → whole semesters >= 0, valor_semestre → number >= 0
    (unparseable values become 0, which the catalog reads as "undisclosed")
  - rows without carrera or institucion are dropped
  - rows missing an Id get a sequential one
  - duplicates on (carrera, institucion, modalidad, jornada) keep the first row

Run with: python -m etl.pipeline
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from catalog.models import Offering, Row

DATA_DIR    = Path(__file__).parent.parent / "data"
RAW_JSON    = DATA_DIR / "raw_offerings.json"
RAW_CSV     = DATA_DIR / "raw_offerings.csv"
OUTPUT_FILE = DATA_DIR / "offerings.json"

DEDUP_FIELDS = ("carrera", "institucion", "modalidad", "jornada")

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def load(path: Path) -> list[Row]:
    """Load a JSON array or a CSV file; return [] if the file doesn't exist."""
    if not path.exists():
        return []
    if path.suffix.lower() == ".csv":
        with path.open(newline="", encoding="utf-8-sig") as fh:
            return list(csv.DictReader(fh))
    return json.loads(path.read_text(encoding="utf-8"))


def _strip(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _dedup_key(row: Row) -> tuple:
    return tuple((row.get(f) or "").casefold() for f in DEDUP_FIELDS)


# ---------------------------------------------------------------------------
# Core clean-up
# ---------------------------------------------------------------------------

def clean_offerings(raw: list[Row]) -> list[Row]:
    """Return validated, de-duplicated offering rows in input order."""
    cleaned: list[Row] = []
    seen: set[tuple] = set()
    taken_ids = {str(_strip(r.get("Id"))) for r in raw if _strip(r.get("Id")) is not None}
    next_id = 1

    for position, row in enumerate(raw, start=1):
        row = {k: _strip(v) for k, v in row.items()}
        if not row.get("carrera") or not row.get("institucion"):
            log.warning("Row %d dropped: missing carrera/institucion", position)
            continue

        if row.get("Id") is None:
            while str(next_id) in taken_ids:
                next_id += 1
            row["Id"] = str(next_id)
            taken_ids.add(row["Id"])

        try:
            offering = Offering.model_validate(row)
        except ValidationError as exc:
            log.warning("Row %d dropped: %s", position, exc.errors()[0]["msg"])
            continue

        clean = offering.model_dump()
        key = _dedup_key(clean)
        if key in seen:
            continue
        seen.add(key)
        cleaned.append(clean)

    return cleaned


# ---------------------------------------------------------------------------
# Entry point (importable, not a CLI)
# ---------------------------------------------------------------------------

def run(source: Path | None = None, output_path: Path = OUTPUT_FILE) -> list[Row]:
    """Load the raw export, clean it, save offerings.json, return the rows."""
    if source is None:
        source = RAW_JSON if RAW_JSON.exists() else RAW_CSV
    if not source.exists():
        raise FileNotFoundError(f"No raw offerings export found at {source}.")

    offerings = clean_offerings(load(source))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(offerings, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    return offerings


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")
    rows = run()
    print(f"Saved {len(rows)} offerings → {OUTPUT_FILE}")
