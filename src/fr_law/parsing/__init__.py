"""Citation parsing, normalization and formatting for French statutes."""

from fr_law.parsing.article_number import (
    ARTICLE_PREFIX_NAMES,
    ArticleToken,
    article_display_title,
    normalize_article_num,
    split_article_prefix,
)
from fr_law.parsing.citation_formatter import CITATION_STYLES, format_citation
from fr_law.parsing.citation_parser import parse_citation
from fr_law.parsing.models import ParsedCitation

__all__ = [
    "ARTICLE_PREFIX_NAMES",
    "ArticleToken",
    "article_display_title",
    "normalize_article_num",
    "split_article_prefix",
    "CITATION_STYLES",
    "format_citation",
    "parse_citation",
    "ParsedCitation",
]
