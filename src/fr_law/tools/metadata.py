"""Response envelope shared by every tool: ``{"results": ..., "_metadata": {...}}``."""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional

from fr_law.storage.database import read_metadata

DISCLAIMER = (
    'This data is provided for informational purposes only and does not constitute legal advice. '
    'Statute text is derived from Legifrance open data and may lag behind official publication. '
    'Always verify against legifrance.gouv.fr before relying on it.'
)
SOURCE_AUTHORITY = "Legifrance (DILA - Direction de l'information legale et administrative)"
JURISDICTION = 'FR'


def generate_response_metadata(db: Optional[sqlite3.Connection]) -> Dict[str, Any]:
    freshness = read_metadata(db, 'built_at') if db is not None else 'unknown'
    return {
        'data_freshness': freshness,
        'disclaimer': DISCLAIMER,
        'source_authority': SOURCE_AUTHORITY,
        'jurisdiction': JURISDICTION,
    }


def tool_response(db: Optional[sqlite3.Connection], results: Any) -> Dict[str, Any]:
    return {'results': results, '_metadata': generate_response_metadata(db)}


__all__ = ['DISCLAIMER', 'SOURCE_AUTHORITY', 'JURISDICTION', 'generate_response_metadata', 'tool_response']
