"""
Catalog chatbot.

Answers a visitor's question with a hosted LLM, using catalog rows found by
the search engine as the only context:

    1. validate the message (length, prompt-injection patterns)
    2. engine.search(q=message without punctuation) → up to CHAT_CONTEXT_LIMIT programs
       (first page of the whole catalog when the text matches nothing)
    3. render the rows into a numbered context block
    4. one chat completion call

The LLM client is anything shaped like openai.OpenAI.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from catalog.config import CHAT_CONTEXT_LIMIT
from catalog.engine import SearchEngine
from catalog.errors import InvalidFilterError
from catalog.models import Row, SearchFilters

log = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000

_PUNCTUATION = re.compile(r"[^\w\s]")

_INJECTION_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"ignore\s+previous\s+instructions",
        r"forget\s+everything",
        r"system\s*:",
        r"assistant\s*:",
        r"\[INST\]",
        r"\[/INST\]",
        r"<\|.*?\|>",
    )
]

SYSTEM_PROMPT = (
    "Eres un asesor académico que ayuda a elegir programas de educación superior. "
    "Responde ÚNICAMENTE con la información de los programas listados en el contexto. "
    "Si la pregunta menciona un programa o institución que no aparece en el contexto, "
    "dilo claramente. Si el precio o la jornada no están disponibles, indícalo. "
    "Sé conciso y responde en el idioma de la pregunta."
)


def validate_message(message: str) -> str:
    text = (message or "").strip()
    if not text:
        raise InvalidFilterError("Message cannot be empty")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise InvalidFilterError("Message too long")
    if any(p.search(text) for p in _INJECTION_PATTERNS):
        raise InvalidFilterError("Message contains invalid content")
    return text


def format_price(value: Any) -> str:
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        amount = 0.0
    if amount <= 0:
        return "No reportado"
    return f"${amount:,.0f} COP por semestre"


def format_program(row: Row, index: int) -> str:
    return (
        f"PROGRAMA {index}:\n"
        f"- Carrera: {row.get('carrera', '')}\n"
        f"- Institución: {row.get('institucion', '')}\n"
        f"- Modalidad: {row.get('modalidad') or 'No especificada'}\n"
        f"- Duración: {row.get('duracion_semestres', 0)} semestres\n"
        f"- Precio: {format_price(row.get('valor_semestre'))}\n"
        f"- Jornada: {row.get('jornada') or 'No especificada'}\n"
        f"- Clasificación: {row.get('clasificacion') or 'No especificada'}\n"
        f"- Nivel: {row.get('nivel_programa') or 'No especificado'}\n"
        f"- Enlace oficial: {row.get('enlace') or 'No disponible'}"
    )


def build_context(rows: list[Row]) -> str:
    if not rows:
        return "No hay programas disponibles en la base de datos."
    blocks = [format_program(r, i) for i, r in enumerate(rows, start=1)]
    return (
        f"PROGRAMAS ACADÉMICOS DISPONIBLES: {len(rows)}\n\n"
        + "\n---\n".join(blocks)
    )


@dataclass
class ChatAnswer:
    response: str
    sources: list[Any] = field(default_factory=list)


class ChatService:
    def __init__(
        self,
        engine: SearchEngine,
        client: Any,
        model: str = "gpt-4o-mini",
        context_limit: int = CHAT_CONTEXT_LIMIT,
    ):
        self.engine        = engine
        self.client        = client
        self.model         = model
        self.context_limit = context_limit

    def _context_rows(self, message: str) -> list[Row]:
        # Questions carry punctuation ("¿...medicina?") that would stick to terms
        text = _PUNCTUATION.sub(" ", message)
        page = self.engine.search(SearchFilters(q=text, limit=self.context_limit))
        if page.data:
            return page.data
        log.info("  No programs match the message text; using the catalog head.")
        return self.engine.search(SearchFilters(limit=self.context_limit)).data

    def answer(self, message: str) -> ChatAnswer:
        text = validate_message(message)
        rows = self._context_rows(text)
        log.info("  %d programs in chat context — calling LLM…", len(rows))

        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"Contexto:\n{build_context(rows)}\n\nPregunta: {text}"},
            ],
            max_tokens=800,
            temperature=0.2,
        )
        reply = (completion.choices[0].message.content or "").strip()
        return ChatAnswer(response=reply, sources=[r.get("Id") for r in rows])
