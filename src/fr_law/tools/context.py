from __future__ import annotations
from pydantic import BaseModel

from fr_law.search.legislation import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT

MAX_PROVISIONS_PER_DOCUMENT = 200


class ToolContext(BaseModel):
    """Server-level facts the tools report or obey; built once at startup."""
    version: str = '0.1.0'
    fingerprint: str = 'unknown'
    db_built: str = 'unknown'
    max_provisions: int = MAX_PROVISIONS_PER_DOCUMENT
    default_search_limit: int = DEFAULT_SEARCH_LIMIT
    max_search_limit: int = MAX_SEARCH_LIMIT
