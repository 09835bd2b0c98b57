"""
Free-text normalisation for catalog queries.

    normalize_terms("Ingeniería de Sistemas") → ["ingenieria", "sistemas"]

Accented vowels (acute, grave, diaeresis, circumflex) and ñ fold to plain
ASCII. Tokens of two characters or fewer ("de", "la", "y") are dropped.

Public API:
    normalize_text(text)  → str
    normalize_terms(text) → list[str]
    sort_key(value)       → tuple used for locale-aware ordering of facets
"""

import unicodedata

MIN_TERM_LENGTH = 3

_ACCENTS = str.maketrans({
    **dict.fromkeys("áàäâ", "a"),
    **dict.fromkeys("éèëê", "e"),
    **dict.fromkeys("íìïî", "i"),
    **dict.fromkeys("óòöô", "o"),
    **dict.fromkeys("úùüû", "u"),
    "ñ": "n",
})


def normalize_text(text: str) -> str:
    # NFC first so "i" + U+0301 folds like the precomposed "í"
    return unicodedata.normalize("NFC", text).lower().translate(_ACCENTS)


def normalize_terms(text: str | None) -> list[str]:
    """Split a query into unique search terms; [] means no free-text filter."""
    if not text or not text.strip():
        return []
    terms: list[str] = []
    seen: set[str] = set()
    for token in normalize_text(text).split():
        if len(token) < MIN_TERM_LENGTH or token in seen:
            continue
        seen.add(token)
        terms.append(token)
    return terms


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def sort_key(value: str) -> tuple[str, str]:
    """
    Base-sensitivity collation: "Álgebra", "algebra" and "ALGEBRA" compare
    equal on the first element; the raw value keeps the order deterministic.
    """
    return _fold(value), value
