"""Direct lookups: provision text and statute currency."""
from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Any, Dict, List, Optional

from fr_law.retrieval.citation_validator import REPEALED_WARNING
from fr_law.retrieval.statute_resolver import find_provision, resolve_existing_statute_id
from fr_law.tools.context import MAX_PROVISIONS_PER_DOCUMENT
from fr_law.tools.metadata import tool_response

logger = logging.getLogger(__name__)

CURRENT_STATUSES = ('in_force', 'amended')
NOT_YET_IN_FORCE_WARNING = 'This statute is not yet in force'


def _document(db: sqlite3.Connection, document_id: str) -> Optional[sqlite3.Row]:
    resolved = resolve_existing_statute_id(db, document_id)
    if resolved is None:
        return None
    return db.execute(
        "SELECT id, title, short_name, status, issued_date, in_force_date, url FROM legal_documents WHERE id = ?",
        (resolved,),
    ).fetchone()


def _provision_payload(doc: sqlite3.Row, row: sqlite3.Row) -> Dict[str, Any]:
    return {
        'found': True,
        'document_id': doc['id'],
        'document_title': doc['title'],
        'document_status': doc['status'],
        'url': doc['url'],
        'provision_ref': row['provision_ref'],
        'chapter': row['chapter'],
        'section': row['section'],
        'title': row['title'],
        'content': row['content'],
        'valid_from': row['valid_from'],
        'valid_to': row['valid_to'],
    }


def get_provision(
    db: sqlite3.Connection,
    document_id: str,
    section: Optional[str] = None,
    provision_ref: Optional[str] = None,
    max_provisions: int = MAX_PROVISIONS_PER_DOCUMENT,
) -> Dict[str, Any]:
    doc = _document(db, document_id)
    if doc is None:
        return tool_response(db, {
            'found': False,
            'document_id': document_id,
            'message': f'Document "{document_id}" not found in database',
        })

    wanted = (provision_ref or '').strip() or (section or '').strip()
    if wanted:
        row = find_provision(db, doc['id'], wanted)
        if row is None:
            logger.debug(f"Provision {wanted!r} missing from {doc['id']}")
            return tool_response(db, {
                'found': False,
                'document_id': doc['id'],
                'document_title': doc['title'],
                'provision_ref': wanted,
                'message': f'Provision "{wanted}" not found in {doc["title"]}',
            })
        return tool_response(db, _provision_payload(doc, row))

    rows = db.execute(
        "SELECT * FROM legal_provisions WHERE document_id = ? ORDER BY order_index LIMIT ?",
        (doc['id'], max_provisions + 1),
    ).fetchall()
    truncated = len(rows) > max_provisions
    rows = rows[:max_provisions]
    results: Dict[str, Any] = {
        'found': True,
        'document_id': doc['id'],
        'document_title': doc['title'],
        'document_status': doc['status'],
        'count': len(rows),
        'truncated': truncated,
        'provisions': [_provision_payload(doc, r) for r in rows],
    }
    if truncated:
        results['hint'] = (
            f'Only the first {max_provisions} provisions are listed. '
            'Pass section or provision_ref, or use search_legislation to narrow down.'
        )
    return tool_response(db, results)


def _in_window(valid_from: Optional[str], valid_to: Optional[str], today: str) -> bool:
    # ISO dates compare correctly as strings.
    if valid_from and valid_from[:10] > today:
        return False
    if valid_to and valid_to[:10] < today:
        return False
    return True


def check_currency(
    db: sqlite3.Connection,
    document_id: str,
    provision_ref: Optional[str] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    doc = _document(db, document_id)
    if doc is None:
        return tool_response(db, {
            'document_id': document_id,
            'found': False,
            'status': 'not_found',
            'is_current': False,
            'warnings': [f'Document "{document_id}" not found in database'],
        })

    warnings: List[str] = []
    status = doc['status']
    if status == 'repealed':
        warnings.append(REPEALED_WARNING)
    elif status == 'not_yet_in_force':
        warnings.append(NOT_YET_IN_FORCE_WARNING)

    results: Dict[str, Any] = {
        'document_id': doc['id'],
        'found': True,
        'title': doc['title'],
        'status': status,
        'issued_date': doc['issued_date'],
        'in_force_date': doc['in_force_date'],
        'is_current': status in CURRENT_STATUSES,
        'warnings': warnings,
    }

    if provision_ref and provision_ref.strip():
        ref = provision_ref.strip()
        row = find_provision(db, doc['id'], ref)
        if row is None:
            warnings.append(f'Provision {ref} not found in {doc["title"]}')
            results['provision'] = {'provision_ref': ref, 'found': False, 'is_current': False}
        else:
            iso_today = (today or date.today()).isoformat()
            current = results['is_current'] and _in_window(row['valid_from'], row['valid_to'], iso_today)
            if row['valid_to'] and row['valid_to'][:10] < iso_today:
                warnings.append(f'Provision {row["provision_ref"]} ceased to apply on {row["valid_to"][:10]}')
            elif row['valid_from'] and row['valid_from'][:10] > iso_today:
                warnings.append(f'Provision {row["provision_ref"]} applies from {row["valid_from"][:10]}')
            results['provision'] = {
                'provision_ref': row['provision_ref'],
                'found': True,
                'valid_from': row['valid_from'],
                'valid_to': row['valid_to'],
                'is_current': current,
            }
    return tool_response(db, results)


__all__ = ['get_provision', 'check_currency', 'CURRENT_STATUSES', 'NOT_YET_IN_FORCE_WARNING']
