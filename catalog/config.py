"""
Engine-level constants.

These are plain module constants, not environment-parsed. The API process
owns environment handling (see api/app.py) and passes paths and clients in.
"""

DEFAULT_PAGE  = 1
DEFAULT_LIMIT = 20
MAX_LIMIT     = 100

FACET_TTL_SECONDS = 5 * 60

# Programs handed to the chatbot as context for one answer
CHAT_CONTEXT_LIMIT = 30
