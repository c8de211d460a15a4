"""French article number normalization.

French codes number their articles with an optional class prefix followed by
hyphenated digit groups:
  - "L." legislative articles (partie législative)
  - "R." regulatory articles (décrets en Conseil d'Etat)
  - "D." simple decree articles
  - "A." arrêté articles

Upstream data writes the same article several ways ("L. 323-1", "L.323-1",
"L323-1", "R.* 2321-1"). normalize_article_num() collapses them into one
token ("L323-1") that is used for storage, lookup and display.
"""
from __future__ import annotations

import re
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

# Shared by article_display_title() and the citation formatter.
ARTICLE_PREFIX_NAMES = {
    'L': 'L.',
    'R': 'R.',
    'D': 'D.',
    'A': 'A.',
}

_PREFIX_RE = re.compile(r'^([LRDA])[\s.*]*(?=\d)', re.IGNORECASE)
_WHITESPACE_RE = re.compile(r'\s+')
_PREFIXED_TOKEN_RE = re.compile(r'^([LRDA])(\d.*)$')


def normalize_article_num(raw: Optional[str]) -> str:
    """Canonicalize a raw article number.

    "L. 323-1" -> "L323-1", "R* 2321-1" -> "R2321-1", "323-1" -> "323-1".
    Empty input gives an empty string.
    """
    if not raw:
        return ''
    value = raw.strip()
    value = _PREFIX_RE.sub(lambda m: m.group(1).upper(), value)
    return _WHITESPACE_RE.sub('', value)


def split_article_prefix(token: Optional[str]) -> Tuple[Optional[str], str]:
    """Return (prefix display label, remainder) for a normalized token.

    The label is None when the token carries no recognized class prefix.
    """
    normalized = normalize_article_num(token)
    m = _PREFIXED_TOKEN_RE.match(normalized)
    if m:
        return ARTICLE_PREFIX_NAMES[m.group(1)], m.group(2)
    return None, normalized


def article_display_title(token: Optional[str]) -> str:
    """Build a human-readable article title: "L323-1" -> "Article L. 323-1"."""
    label, rest = split_article_prefix(token)
    if label:
        return f"Article {label} {rest}"
    return f"Article {rest}"


class ArticleToken(BaseModel):
    """Structured view of a normalized article number."""

    model_config = ConfigDict(frozen=True)

    prefix: Optional[str] = None
    segments: Tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> Optional['ArticleToken']:
        normalized = normalize_article_num(raw)
        if not normalized:
            return None
        m = _PREFIXED_TOKEN_RE.match(normalized)
        prefix = None
        body = normalized
        if m:
            prefix, body = m.group(1), m.group(2)
        segments = tuple(s for s in body.split('-') if s)
        if not segments:
            return None
        return cls(prefix=prefix, segments=segments)

    @property
    def numeric_path(self) -> str:
        return '-'.join(self.segments)

    def __str__(self) -> str:
        return f"{self.prefix or ''}{self.numeric_path}"


__all__ = [
    'ARTICLE_PREFIX_NAMES',
    'ArticleToken',
    'article_display_title',
    'normalize_article_num',
    'split_article_prefix',
]
