"""Result types shared by the citation parser and formatter."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from fr_law.parsing.article_number import ArticleToken


class ParsedCitation(BaseModel):
    """Outcome of parsing one free-form citation string.

    ``title`` is the raw statute title as written by the caller (not yet
    resolved against the database) and ``section`` the normalized article
    token, e.g. "L2321-1".
    """

    model_config = ConfigDict(frozen=True)

    valid: bool
    type: Literal['statute', 'unknown'] = 'unknown'
    title: Optional[str] = None
    section: Optional[str] = None
    year: Optional[int] = None
    error: Optional[str] = None

    @property
    def article(self) -> Optional[ArticleToken]:
        return ArticleToken.from_raw(self.section)


__all__ = ['ParsedCitation']
