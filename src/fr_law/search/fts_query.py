"""FTS5 query building for legislation search.

User text is sanitized so it can never trip the FTS5 query grammar, while
deliberate syntax (quoted phrases, AND/OR/NOT, trailing prefix wildcard) is
passed through untouched apart from the dangerous characters.

Plain free text yields two variants:
  primary:  '"donnees"* "personnelles"*'   every token, prefix-matched
  fallback: 'donnees* OR personnelles*'    any token, tried only when primary is empty
"""
from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

EXPLICIT_FTS_SYNTAX = re.compile(r'["“”]|\bAND\b|\bOR\b|\bNOT\b|\*$')

# ( ) grouping, : and ^ column filters, { } NEAR column sets, + and . phrase/column syntax
FTS5_SPECIAL_CHARS = re.compile(r'[():{}^+.]')

_TOKEN_STRIP_RE = re.compile(r'[^\wÀ-ɏ-]')
_WHITESPACE_RE = re.compile(r'\s+')


class FtsQueryPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: str
    fallback: Optional[str] = None


def sanitize_fts_input(raw: str) -> str:
    """Strip characters with special meaning to FTS5 and collapse whitespace."""
    if not raw:
        return ''
    cleaned = FTS5_SPECIAL_CHARS.sub(' ', raw)
    return _WHITESPACE_RE.sub(' ', cleaned).strip()


def has_explicit_syntax(query: str) -> bool:
    return bool(EXPLICIT_FTS_SYNTAX.search(query))


def tokenize_query(query: str) -> List[str]:
    tokens = []
    for part in sanitize_fts_input(query).split():
        token = _TOKEN_STRIP_RE.sub('', part)
        if token:
            tokens.append(token)
    return tokens


def build_fts_query_variants(query: str) -> FtsQueryPlan:
    trimmed = (query or '').strip()

    if has_explicit_syntax(trimmed):
        # Keep the caller's operators and phrases; no tokenization, no fallback.
        return FtsQueryPlan(primary=sanitize_fts_input(trimmed) or trimmed)

    tokens = tokenize_query(trimmed)
    if not tokens:
        # Blank input keeps its raw form; search_legislation() returns [] for it.
        return FtsQueryPlan(primary=trimmed or (query or ''))

    primary = ' '.join(f'"{t}"*' for t in tokens)
    fallback = ' OR '.join(f'{t}*' for t in tokens)
    return FtsQueryPlan(primary=primary, fallback=fallback)


__all__ = [
    'EXPLICIT_FTS_SYNTAX',
    'FTS5_SPECIAL_CHARS',
    'FtsQueryPlan',
    'build_fts_query_variants',
    'has_explicit_syntax',
    'sanitize_fts_input',
    'tokenize_query',
]
