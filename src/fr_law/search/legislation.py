"""Full-text search over statute provisions (SQLite FTS5, BM25 ranking)."""
from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from fr_law.retrieval.statute_resolver import resolve_existing_statute_id
from fr_law.search.fts_query import build_fts_query_variants, has_explicit_syntax, tokenize_query

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 50
DEFAULT_STANCE_LIMIT = 5
MAX_STANCE_LIMIT = 20

SNIPPET_TOKENS = 32

_SEARCH_SQL = """
    SELECT
      lp.document_id,
      ld.title AS document_title,
      lp.provision_ref,
      lp.chapter,
      lp.section,
      lp.title,
      snippet(provisions_fts, 0, '>>>', '<<<', '...', {tokens}) AS snippet,
      bm25(provisions_fts) AS relevance
    FROM provisions_fts
    JOIN legal_provisions lp ON lp.id = provisions_fts.rowid
    JOIN legal_documents ld ON ld.id = lp.document_id
    WHERE provisions_fts MATCH ?
"""


def clamp_limit(limit: Optional[int], default: int, maximum: int) -> int:
    if limit is None:
        return default
    return max(1, min(int(limit), maximum))


def _is_fts_syntax_error(err: sqlite3.OperationalError) -> bool:
    msg = str(err).lower()
    return msg.startswith('fts5:') or 'unterminated string' in msg or 'malformed match' in msg


def run_fts_query(
    db: sqlite3.Connection,
    fts_query: str,
    document_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> List[Dict[str, Any]]:
    """Execute one MATCH expression. An FTS5 grammar error yields no rows."""
    sql = _SEARCH_SQL.format(tokens=SNIPPET_TOKENS)
    params: List[Any] = [fts_query]
    if document_id:
        sql += " AND lp.document_id = ?"
        params.append(document_id)
    if status:
        sql += " AND ld.status = ?"
        params.append(status)
    sql += " ORDER BY relevance LIMIT ?"
    params.append(limit)

    try:
        rows = db.execute(sql, params).fetchall()
    except sqlite3.OperationalError as e:
        if not _is_fts_syntax_error(e):
            raise
        logger.warning(f"FTS query rejected ({e}): {fts_query!r}")
        return []
    return [dict(r) for r in rows]


def search_legislation(
    db: sqlite3.Connection,
    query: str,
    document_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: Optional[int] = DEFAULT_SEARCH_LIMIT,
) -> List[Dict[str, Any]]:
    if not query or not query.strip():
        return []

    safe_limit = clamp_limit(limit, DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT)

    resolved_id = None
    if document_id:
        resolved_id = resolve_existing_statute_id(db, document_id)
        if resolved_id is None:
            return []

    plan = build_fts_query_variants(query)
    results = run_fts_query(db, plan.primary, resolved_id, status, safe_limit)
    if not results and plan.fallback:
        logger.debug(f"No results for {plan.primary!r}; retrying with {plan.fallback!r}")
        results = run_fts_query(db, plan.fallback, resolved_id, status, safe_limit)
    return results


def stance_strategies(query: str) -> List[tuple]:
    """(name, fts expression) pairs, most precise first."""
    plan = build_fts_query_variants(query)
    if has_explicit_syntax(query.strip()):
        return [('explicit', plan.primary)]

    strategies = []
    tokens = tokenize_query(query)
    if len(tokens) > 1:
        strategies.append(('exact_phrase', '"' + ' '.join(tokens) + '"'))
    strategies.append(('all_terms', plan.primary))
    if plan.fallback:
        strategies.append(('any_term', plan.fallback))
    return strategies


def build_legal_stance(
    db: sqlite3.Connection,
    query: str,
    document_id: Optional[str] = None,
    limit: Optional[int] = DEFAULT_STANCE_LIMIT,
) -> Dict[str, Any]:
    """Aggregate citations for a legal question across several query strategies.

    Each strategy contributes at most ``limit`` rows; a provision found by
    several strategies appears once, in the position of its first hit, with
    every matching strategy listed.
    """
    stance: Dict[str, Any] = {'query': query, 'document_id': None, 'strategies': [], 'total_citations': 0, 'citations': []}
    if not query or not query.strip():
        return stance

    safe_limit = clamp_limit(limit, DEFAULT_STANCE_LIMIT, MAX_STANCE_LIMIT)
    resolved_id = None
    if document_id:
        resolved_id = resolve_existing_statute_id(db, document_id)
        if resolved_id is None:
            return stance
    stance['document_id'] = resolved_id

    merged: Dict[tuple, Dict[str, Any]] = {}
    for name, expr in stance_strategies(query):
        stance['strategies'].append(name)
        for row in run_fts_query(db, expr, resolved_id, None, safe_limit):
            key = (row['document_id'], row['provision_ref'])
            if key in merged:
                merged[key]['matched_by'].append(name)
            else:
                merged[key] = {**row, 'matched_by': [name]}

    stance['citations'] = list(merged.values())
    stance['total_citations'] = len(merged)
    return stance


__all__ = [
    'DEFAULT_SEARCH_LIMIT', 'MAX_SEARCH_LIMIT', 'DEFAULT_STANCE_LIMIT', 'MAX_STANCE_LIMIT',
    'build_legal_stance', 'clamp_limit', 'run_fts_query', 'search_legislation', 'stance_strategies',
]
