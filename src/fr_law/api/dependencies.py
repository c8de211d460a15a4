import os
import hashlib
import logging
import sqlite3
from typing import Optional
from flask import request, jsonify

from fr_law.api import config, state
from fr_law.errors import DatabaseNotFoundError
from fr_law.storage.database import open_database, read_metadata
from fr_law.tools.context import ToolContext

logger = logging.getLogger("api")


def database_fingerprint(path: str) -> str:
    """Short content hash of the database file, reported by the about tool."""
    h = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(1 << 20), b''):
            h.update(chunk)
    return h.hexdigest()[:12]


def build_tool_context(db: Optional[sqlite3.Connection], path: Optional[str]) -> ToolContext:
    fingerprint = 'unknown'
    if path and os.path.exists(path):
        fingerprint = database_fingerprint(path)
    return ToolContext(
        version=config.APP_VERSION,
        fingerprint=fingerprint,
        db_built=read_metadata(db, 'built_at') if db is not None else 'unknown',
        max_provisions=config.MAX_PROVISIONS_PER_DOCUMENT,
        default_search_limit=config.DEFAULT_SEARCH_LIMIT,
        max_search_limit=config.MAX_SEARCH_LIMIT,
    )


def load_database(path: Optional[str] = None) -> Optional[sqlite3.Connection]:
    db_path = path or config.FR_LAW_DB_PATH
    state.db_path = db_path
    try:
        state.db = open_database(db_path)
    except DatabaseNotFoundError as e:
        # Start anyway; tool routes answer 503 until a database is built.
        logger.warning(f"[api] {e}. Run scripts/build_db.py to create it.")
        state.db = None
        state.db_error = str(e)
    except sqlite3.DatabaseError as e:
        logger.error(f"[api] Failed to open database {db_path}: {e}")
        state.db = None
        state.db_error = str(e)
    else:
        state.db_error = None
        logger.info(f"[api] Loaded statute database from {db_path}")
    state.tool_context = build_tool_context(state.db, db_path if state.db is not None else None)
    return state.db


def require_api_key():
    if config.API_KEY:
        key = request.headers.get("X-API-Key", "")
        if key != config.API_KEY:
            return jsonify({"error": "Unauthorized"}), 401
    return None


def require_database():
    if state.db is None:
        return jsonify({
            "error": "database_unavailable",
            "detail": state.db_error or "No statute database loaded. Build it with scripts/build_db.py.",
        }), 503
    return None
