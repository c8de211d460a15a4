"""Tool registry: descriptors for discovery and a single dispatch entry point.

Input schemas are generated from the pydantic argument models, so the
advertised schema and the validation applied in call_tool() never drift.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from fr_law.errors import UnknownToolError
from fr_law.tools import citations, inputs, lookup, search, sources
from fr_law.tools.context import ToolContext

logger = logging.getLogger(__name__)

COVERAGE_NOTE = (
    'COVERAGE NOTE: only selected French codes and statutes from Legifrance open data are indexed. '
    'This is NOT a complete corpus of French legislation; verify against legifrance.gouv.fr for legal certainty.'
)

Handler = Callable[[Optional[sqlite3.Connection], Any, ToolContext], Dict[str, Any]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[inputs.ToolInput]
    handler: Handler
    needs_db: bool = True

    def descriptor(self) -> Dict[str, Any]:
        schema = self.input_model.model_json_schema()
        schema.pop('title', None)
        schema.pop('description', None)
        schema.setdefault('properties', {})
        return {'name': self.name, 'description': self.description, 'inputSchema': schema}


TOOLS: List[ToolSpec] = [
    ToolSpec(
        name='search_legislation',
        description=(
            'Search French statutes by keyword. Returns matched provisions with BM25-ranked snippets. '
            'Supports FTS5 boolean syntax (AND, OR, NOT) and phrase search ("exact phrase"). ' + COVERAGE_NOTE +
            '\n\nOutput: array of {document_id, document_title, provision_ref, chapter, section, title, snippet, relevance}.'
        ),
        input_model=inputs.SearchLegislationInput,
        handler=lambda db, a, ctx: search.search_legislation_tool(
            db, a.query, document_id=a.document_id, status=a.status, limit=a.limit,
            default_limit=ctx.default_search_limit, max_limit=ctx.max_search_limit,
        ),
    ),
    ToolSpec(
        name='get_provision',
        description=(
            'Retrieve the full text of one article of a French statute, with chapter, section and document metadata. '
            'With only document_id, lists up to 200 provisions (truncated flag and hint when more exist). '
            'Article references use the "art" prefix: "art323-1", "artL2321-1". ' + COVERAGE_NOTE
        ),
        input_model=inputs.GetProvisionInput,
        handler=lambda db, a, ctx: lookup.get_provision(
            db, a.document_id, section=a.section, provision_ref=a.provision_ref, max_provisions=ctx.max_provisions,
        ),
    ),
    ToolSpec(
        name='list_sources',
        description=(
            'Provenance metadata for the indexed data: jurisdiction, authority, license, coverage counts and limitations. '
            'Call this before searching to understand what is available.'
        ),
        input_model=inputs.ListSourcesInput,
        handler=lambda db, a, ctx: sources.list_sources(db),
    ),
    ToolSpec(
        name='validate_citation',
        description=(
            'Validate a French legal citation against the database: does the cited statute exist, does the article exist, '
            'is the statute still in force. Supported forms: "Code de la défense, art. L. 2321-1", '
            '"Article 323-1 du Code pénal", "Code pénal article 323-1".'
        ),
        input_model=inputs.ValidateCitationInput,
        handler=lambda db, a, ctx: citations.validate_citation_tool(db, a.citation),
    ),
    ToolSpec(
        name='build_legal_stance',
        description=(
            'Collect citations for a legal question by running several search strategies '
            '(exact phrase, all terms, any term) and merging the results. ' + COVERAGE_NOTE
        ),
        input_model=inputs.BuildLegalStanceInput,
        handler=lambda db, a, ctx: search.build_legal_stance_tool(db, a.query, document_id=a.document_id, limit=a.limit),
    ),
    ToolSpec(
        name='format_citation',
        description=(
            'Format a French legal citation. Styles: full ("Code pénal, art. 323-1"), '
            'short ("Code pénal art. 323-1"), pinpoint ("art. 323-1").'
        ),
        input_model=inputs.FormatCitationInput,
        handler=lambda db, a, ctx: citations.format_citation_tool(db, a.citation, a.format),
        needs_db=False,
    ),
    ToolSpec(
        name='check_currency',
        description=(
            'Check whether a French statute, and optionally one of its provisions, is currently in force. '
            'Returns status (in_force, amended, repealed, not_yet_in_force) and validity dates.'
        ),
        input_model=inputs.CheckCurrencyInput,
        handler=lambda db, a, ctx: lookup.check_currency(db, a.document_id, provision_ref=a.provision_ref),
    ),
    ToolSpec(
        name='about',
        description=(
            'Server metadata, dataset statistics, freshness and provenance. '
            'Call this first to verify coverage and currency before relying on results.'
        ),
        input_model=inputs.AboutInput,
        handler=lambda db, a, ctx: sources.about(db, ctx),
    ),
]

_BY_NAME: Dict[str, ToolSpec] = {t.name: t for t in TOOLS}


def get_tool(name: str) -> ToolSpec:
    spec = _BY_NAME.get(name)
    if spec is None:
        raise UnknownToolError(name)
    return spec


def list_tools() -> List[Dict[str, Any]]:
    return [t.descriptor() for t in TOOLS]


def call_tool(
    db: Optional[sqlite3.Connection],
    name: str,
    arguments: Optional[Dict[str, Any]] = None,
    context: Optional[ToolContext] = None,
) -> Dict[str, Any]:
    """Validate ``arguments`` against the tool's model and run it.

    Raises UnknownToolError for unregistered names and pydantic
    ValidationError for bad arguments; storage errors propagate.
    """
    spec = get_tool(name)
    args = spec.input_model(**(arguments or {}))
    logger.debug(f"Calling tool {name} with {args.model_dump(exclude_none=True)}")
    return spec.handler(db, args, context or ToolContext())


__all__ = ['COVERAGE_NOTE', 'TOOLS', 'ToolSpec', 'call_tool', 'get_tool', 'list_tools']
