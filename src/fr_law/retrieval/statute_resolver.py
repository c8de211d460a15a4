"""Statute and provision resolution.

Document ids are either a human slug ("code-penal") or a lowercased LEGI
identifier ("legitext000006070721"); callers may pass either, with any
casing, or the natural-language title. Two strategies are provided:

 - resolve_existing_statute_id(): identifier precedence, then a title
   substring match. Cheap; used by every lookup tool.
 - resolve_document_for_citation(): scores every stored document against an
   accent- and punctuation-insensitive title. Used by citation validation,
   where callers write titles freely ("Code de la defense").
"""
from __future__ import annotations

import logging
import re
import sqlite3
import unicodedata
from typing import List, Optional

logger = logging.getLogger(__name__)

SCORE_EXACT = 4
SCORE_STORED_CONTAINS_INPUT = 3
SCORE_INPUT_CONTAINS_STORED = 2

_NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')
_SECTION_PREFIX_RE = re.compile(r'^([LRDA])(\d.*)$')


def is_valid_statute_id(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def statute_id_candidates(value: str) -> List[str]:
    trimmed = value.strip()
    lowered = trimmed.lower()
    candidates = [lowered, trimmed]
    if ' ' in lowered:
        candidates.append(re.sub(r'\s+', '-', lowered))
    if '-' in lowered:
        candidates.append(lowered.replace('-', ' '))
    return list(dict.fromkeys(candidates))


def _escape_like(value: str) -> str:
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def resolve_existing_statute_id(db: sqlite3.Connection, value: Optional[str]) -> Optional[str]:
    if not is_valid_statute_id(value):
        return None

    row = db.execute("SELECT id FROM legal_documents WHERE id = ? LIMIT 1", (value,)).fetchone()
    if row:
        return row["id"]

    # Lowercased first (LEGITEXT000006070721 -> legitext000006070721), then slug/space variants.
    for candidate in statute_id_candidates(value):
        if candidate == value:
            continue
        row = db.execute("SELECT id FROM legal_documents WHERE id = ? LIMIT 1", (candidate,)).fetchone()
        if row:
            return row["id"]

    row = db.execute(
        "SELECT id FROM legal_documents WHERE title LIKE ? ESCAPE '\\' LIMIT 1",
        (f"%{_escape_like(value.strip())}%",),
    ).fetchone()
    if row:
        return row["id"]

    logger.debug(f"No document matches identifier {value!r}")
    return None


def normalize_lookup(value: Optional[str]) -> str:
    """Accent-, case- and punctuation-insensitive form used for title scoring."""
    if not value:
        return ''
    decomposed = unicodedata.normalize('NFD', value)
    stripped = ''.join(ch for ch in decomposed if not unicodedata.category(ch).startswith('M'))
    return _NON_ALNUM_RE.sub(' ', stripped.lower()).strip()


def score_document(target: str, fields: List[Optional[str]]) -> int:
    score = 0
    for field in fields:
        normalized = normalize_lookup(field)
        if not normalized:
            continue
        if normalized == target:
            score = max(score, SCORE_EXACT)
        elif target in normalized:
            score = max(score, SCORE_STORED_CONTAINS_INPUT)
        elif normalized in target:
            score = max(score, SCORE_INPUT_CONTAINS_STORED)
    return score


def resolve_document_for_citation(db: sqlite3.Connection, title: Optional[str]) -> Optional[sqlite3.Row]:
    target = normalize_lookup(title)
    if not target:
        return None

    best: Optional[sqlite3.Row] = None
    best_score = 0
    for doc in db.execute("SELECT id, title, short_name, status FROM legal_documents"):
        score = score_document(target, [doc["title"], doc["short_name"], doc["id"]])
        if score > best_score:
            best, best_score = doc, score

    if best is None:
        logger.debug(f"No document scored against citation title {title!r}")
    return best


def build_section_candidates(section: str) -> List[str]:
    normalized = re.sub(r'\s+', '', section).replace('.', '').upper()
    without_art = re.sub(r'^ART', '', normalized)
    candidates = [normalized, without_art]
    m = _SECTION_PREFIX_RE.match(without_art)
    if m:
        candidates.append(f"{m.group(1)}{m.group(2)}")
    return [c for c in dict.fromkeys(candidates) if c]


def build_provision_ref_candidates(section_candidates: List[str]) -> List[str]:
    refs = [c.lower() if c.startswith('ART') else f"art{c}".lower() for c in section_candidates]
    return list(dict.fromkeys(refs))


def find_provision(db: sqlite3.Connection, document_id: str, section: str) -> Optional[sqlite3.Row]:
    """Look up a provision by any spelling of its article number.

    Upstream data is inconsistent about keeping the L/R/D/A prefix in
    ``section``, so every candidate is checked against both ``section`` and
    ``provision_ref``.
    """
    section_candidates = build_section_candidates(section)
    if not section_candidates:
        return None
    ref_candidates = build_provision_ref_candidates(section_candidates)

    section_marks = ', '.join('?' for _ in section_candidates)
    ref_marks = ', '.join('?' for _ in ref_candidates)
    sql = f"""
        SELECT *
        FROM legal_provisions
        WHERE document_id = ?
          AND (
            upper(replace(section, '.', '')) IN ({section_marks})
            OR lower(provision_ref) IN ({ref_marks})
          )
        ORDER BY order_index
        LIMIT 1
    """
    return db.execute(sql, (document_id, *section_candidates, *ref_candidates)).fetchone()


def provision_exists(db: sqlite3.Connection, document_id: str, section: str) -> bool:
    return find_provision(db, document_id, section) is not None


__all__ = [
    'build_provision_ref_candidates',
    'build_section_candidates',
    'find_provision',
    'is_valid_statute_id',
    'normalize_lookup',
    'provision_exists',
    'resolve_document_for_citation',
    'resolve_existing_statute_id',
    'score_document',
    'statute_id_candidates',
]
