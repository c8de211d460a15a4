from __future__ import annotations
import sqlite3
from typing import Any, Dict, Optional

from fr_law.search import legislation
from fr_law.tools.metadata import tool_response


def search_legislation_tool(
    db: sqlite3.Connection,
    query: str,
    document_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: Optional[int] = None,
    default_limit: int = legislation.DEFAULT_SEARCH_LIMIT,
    max_limit: int = legislation.MAX_SEARCH_LIMIT,
) -> Dict[str, Any]:
    if limit is None:
        limit = default_limit
    limit = min(limit, max_limit)
    rows = legislation.search_legislation(db, query, document_id=document_id, status=status, limit=limit)
    return tool_response(db, rows)


def build_legal_stance_tool(
    db: sqlite3.Connection,
    query: str,
    document_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    return tool_response(db, legislation.build_legal_stance(db, query, document_id=document_id, limit=limit))


__all__ = ['search_legislation_tool', 'build_legal_stance_tool']
