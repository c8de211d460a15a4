"""French legal citation parsing.

Recognized word orders (tried in this order, first full match wins):
  - "Code de la défense, art. L. 2321-1"      title, comma, article
  - "Article L. 2321-1 du Code de la défense"  article, du/de, title
  - "Code pénal article 323-1"                 title, article (no comma)

The comma form is tried first so that a comma inside a title is never taken
as the title/article boundary by the looser patterns.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from fr_law.parsing.article_number import normalize_article_num
from fr_law.parsing.models import ParsedCitation

ARTICLE_TOKEN = r'(?:[A-Za-z]\s*\.?\s*)?\d+(?:-\d+)*(?:-[A-Za-z0-9]+)*'
_ARTICLE_KEYWORD = r'(?:article|art\.?)'

YEAR_RE = re.compile(r'\b(1[89]\d{2}|20\d{2})\b')
_QUOTES_RE = re.compile(r"[’`]")
_WHITESPACE_RE = re.compile(r'\s+')
_TRAILING_PUNCT_RE = re.compile(r'[.,;:]+$')


@dataclass(frozen=True)
class CitationPattern:
    name: str
    regex: re.Pattern
    title_group: int
    article_group: int

    def match(self, text: str) -> Optional[Tuple[str, str]]:
        m = self.regex.fullmatch(text)
        if not m:
            return None
        return m.group(self.title_group), m.group(self.article_group)


CITATION_PATTERNS: Tuple[CitationPattern, ...] = (
    CitationPattern(
        name='title_comma_article',
        regex=re.compile(rf'(.+?),\s*{_ARTICLE_KEYWORD}\s*({ARTICLE_TOKEN})\.?', re.IGNORECASE),
        title_group=1,
        article_group=2,
    ),
    CitationPattern(
        name='article_of_title',
        regex=re.compile(rf'{_ARTICLE_KEYWORD}\s*({ARTICLE_TOKEN})\s+d(?:e|u)\s+(.+)', re.IGNORECASE),
        title_group=2,
        article_group=1,
    ),
    CitationPattern(
        name='title_article',
        regex=re.compile(rf'(.+?)\s+{_ARTICLE_KEYWORD}\s*({ARTICLE_TOKEN})\.?', re.IGNORECASE),
        title_group=1,
        article_group=2,
    ),
)


def _normalize_input(value: str) -> str:
    value = _QUOTES_RE.sub("'", value)
    return _WHITESPACE_RE.sub(' ', value).strip()


def _normalize_title(value: str) -> str:
    value = _TRAILING_PUNCT_RE.sub('', value.strip())
    return _WHITESPACE_RE.sub(' ', value).strip()


def extract_year(title: Optional[str]) -> Optional[int]:
    """First plausible enactment year embedded in a title, e.g. "... du 6 janvier 1978"."""
    if not title:
        return None
    m = YEAR_RE.search(title)
    return int(m.group(1)) if m else None


def parse_citation(citation: Optional[str]) -> ParsedCitation:
    """Parse a French statute citation. Failures are reported, never raised."""
    raw = citation if isinstance(citation, str) else ''
    trimmed = raw.strip()
    if not trimmed:
        return ParsedCitation(valid=False, type='unknown', error='Empty citation')

    normalized = _normalize_input(trimmed)
    for pattern in CITATION_PATTERNS:
        matched = pattern.match(normalized)
        if matched is None:
            continue
        title_text, article_text = matched
        title = _normalize_title(title_text)
        return ParsedCitation(
            valid=True,
            type='statute',
            title=title or None,
            section=normalize_article_num(article_text) or None,
            year=extract_year(title),
        )

    return ParsedCitation(
        valid=False,
        type='unknown',
        error=f'Could not parse French citation: "{raw}"',
    )


__all__ = ['ARTICLE_TOKEN', 'CITATION_PATTERNS', 'CitationPattern', 'extract_year', 'parse_citation']
