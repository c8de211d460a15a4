"""Provenance tools: list_sources and about."""
from __future__ import annotations

import sqlite3
from typing import Any, Dict

from fr_law.storage.database import read_metadata, safe_count
from fr_law.tools.context import ToolContext
from fr_law.tools.metadata import JURISDICTION, tool_response

SERVER_NAME = 'French Law API'
PACKAGE_NAME = 'french-law-api'

SOURCE_NAME = 'Legifrance'
SOURCE_AUTHORITY = "DILA (Direction de l'information légale et administrative)"
SOURCE_URL = 'https://www.legifrance.gouv.fr'
SOURCE_LICENSE = 'Licence Ouverte v2.0 (French government open data)'

COVERAGE_SCOPE = (
    'Major French codes (Code pénal, Code civil, Code de commerce, Code du travail, '
    'Code de la défense, Code de la sécurité intérieure, Code des postes et des '
    'communications électroniques) and key data protection / cybersecurity statutes '
    '(Loi Informatique et Libertés, LPM 2024-2030 cyber provisions, NIS2 transposition).'
)
COVERAGE_LIMITATIONS = (
    'Covers selected codes and statutes only; it is NOT a complete corpus of French '
    'legislation. Always verify against legifrance.gouv.fr for legal certainty.'
)

DOCUMENT_COUNT_SQL = 'SELECT COUNT(*) AS count FROM legal_documents'
PROVISION_COUNT_SQL = 'SELECT COUNT(*) AS count FROM legal_provisions'


def list_sources(db: sqlite3.Connection) -> Dict[str, Any]:
    built_at = read_metadata(db, 'built_at')
    return tool_response(db, {
        'jurisdiction': read_metadata(db, 'jurisdiction', JURISDICTION),
        'tier': read_metadata(db, 'tier'),
        'schema_version': read_metadata(db, 'schema_version'),
        'built_at': built_at,
        'sources': [
            {
                'name': SOURCE_NAME,
                'authority': SOURCE_AUTHORITY,
                'url': SOURCE_URL,
                'language': 'fr',
                'license': SOURCE_LICENSE,
                'last_ingested': built_at,
                'coverage': {
                    'codes': safe_count(db, DOCUMENT_COUNT_SQL),
                    'provisions': safe_count(db, PROVISION_COUNT_SQL),
                    'scope': COVERAGE_SCOPE,
                    'limitations': COVERAGE_LIMITATIONS,
                },
            }
        ],
    })


def about(db: sqlite3.Connection, context: ToolContext) -> Dict[str, Any]:
    return tool_response(db, {
        'server': {
            'name': SERVER_NAME,
            'package': PACKAGE_NAME,
            'version': context.version,
        },
        'dataset': {
            'fingerprint': context.fingerprint,
            'built': context.db_built,
            'jurisdiction': 'France (FR)',
            'content_basis': (
                'French statute text from Legifrance open data (LEGI archive). ' + COVERAGE_SCOPE
            ),
            'counts': {
                'legal_documents': safe_count(db, DOCUMENT_COUNT_SQL),
                'legal_provisions': safe_count(db, PROVISION_COUNT_SQL),
            },
        },
        'provenance': {
            'sources': ['Legifrance (statutes, statutory instruments)'],
            'license': 'Legal source texts under Licence Ouverte v2.0.',
            'authenticity_note': (
                'Statute text is derived from Legifrance open data. '
                'Verify against official publications when legal certainty is required.'
            ),
        },
        'security': {
            'access_model': 'read-only',
            'network_access': False,
            'filesystem_access': False,
            'arbitrary_code': False,
        },
    })


__all__ = ['list_sources', 'about']
