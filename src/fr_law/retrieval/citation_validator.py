"""Citation validation against the statute database.

Checks that the cited document and article actually exist before a citation
is relied upon. Every outcome is reported through the result flags and the
warnings list; a result may carry several findings at once (document found,
article missing, statute repealed).
"""
from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional

from pydantic import BaseModel, Field

from fr_law.parsing.citation_parser import parse_citation
from fr_law.parsing.models import ParsedCitation
from fr_law.retrieval.statute_resolver import provision_exists, resolve_document_for_citation

logger = logging.getLogger(__name__)

REPEALED_WARNING = 'This statute has been repealed'
MISSING_TITLE_WARNING = 'Citation does not include a recognizable statute title'


class ValidationResult(BaseModel):
    citation: ParsedCitation
    document_exists: bool = False
    provision_exists: bool = False
    document_id: Optional[str] = None
    document_title: Optional[str] = None
    status: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


def validate_citation(db: sqlite3.Connection, citation: str) -> ValidationResult:
    return validate_parsed_citation(db, parse_citation(citation))


def validate_parsed_citation(db: sqlite3.Connection, parsed: ParsedCitation) -> ValidationResult:
    """Check an already parsed citation against the database.

    A citation without an article token is a document-level citation; it
    only needs the document to exist.
    """
    if not parsed.valid:
        return ValidationResult(citation=parsed, warnings=[parsed.error or 'Invalid citation format'])

    if not parsed.title:
        return ValidationResult(citation=parsed, warnings=[MISSING_TITLE_WARNING])

    doc = resolve_document_for_citation(db, parsed.title)
    if doc is None:
        return ValidationResult(
            citation=parsed,
            warnings=[f'Document "{parsed.title}" not found in database'],
        )

    warnings: List[str] = []
    if doc["status"] == 'repealed':
        warnings.append(REPEALED_WARNING)

    found = True
    if parsed.section:
        found = provision_exists(db, doc["id"], parsed.section)
        if not found:
            warnings.append(f'Article {parsed.section} not found in {doc["title"]}')

    logger.debug(f"Validated {parsed.title!r} art. {parsed.section}: document={doc['id']} provision_exists={found}")
    return ValidationResult(
        citation=parsed,
        document_exists=True,
        provision_exists=found,
        document_id=doc["id"],
        document_title=doc["title"],
        status=doc["status"],
        warnings=warnings,
    )


__all__ = ['ValidationResult', 'validate_citation', 'validate_parsed_citation', 'REPEALED_WARNING', 'MISSING_TITLE_WARNING']
