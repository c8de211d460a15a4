from __future__ import annotations
import sqlite3
from typing import Any, Dict, Optional

from fr_law.parsing.citation_formatter import format_citation
from fr_law.parsing.citation_parser import parse_citation
from fr_law.retrieval.citation_validator import validate_citation
from fr_law.tools.metadata import tool_response


def validate_citation_tool(db: sqlite3.Connection, citation: str) -> Dict[str, Any]:
    result = validate_citation(db, citation)
    formatted = format_citation(result.citation, 'full') or None
    return tool_response(db, {
        'citation': citation,
        'valid': result.document_exists and result.provision_exists,
        'document_exists': result.document_exists,
        'provision_exists': result.provision_exists,
        'document_id': result.document_id,
        'document_title': result.document_title,
        'status': result.status,
        'parsed': result.citation.model_dump(),
        'formatted_citation': formatted,
        'warnings': result.warnings,
    })


def format_citation_tool(db: Optional[sqlite3.Connection], citation: str, style: str = 'full') -> Dict[str, Any]:
    """Parse then re-render a citation; needs no database beyond the envelope metadata."""
    parsed = parse_citation(citation)
    formatted = format_citation(parsed, style)
    return tool_response(db, {
        'input': citation,
        'format': style,
        'valid': parsed.valid,
        'formatted': formatted,
        'parsed': parsed.model_dump(),
        'error': parsed.error,
    })


__all__ = ['validate_citation_tool', 'format_citation_tool']
