"""French legal citation formatting.

Styles:
  full:     "Code de la défense, art. L. 2321-1"
  short:    "Code de la défense art. L. 2321-1"
  pinpoint: "art. L. 2321-1"
"""
from __future__ import annotations

from fr_law.parsing.article_number import split_article_prefix
from fr_law.parsing.models import ParsedCitation

CITATION_STYLES = ('full', 'short', 'pinpoint')


def build_article_ref(section: str) -> str:
    label, rest = split_article_prefix(section)
    if label:
        return f"{label} {rest}"
    return rest


def format_citation(parsed: ParsedCitation, style: str = 'full') -> str:
    if not parsed.valid or not parsed.section:
        return ''

    article = build_article_ref(parsed.section)

    if style == 'pinpoint':
        return f"art. {article}"
    if not parsed.title:
        return f"art. {article}"
    if style == 'short':
        return f"{parsed.title} art. {article}"
    # 'full' and anything unrecognized
    return f"{parsed.title}, art. {article}"


__all__ = ['CITATION_STYLES', 'build_article_ref', 'format_citation']
