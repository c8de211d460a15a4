"""Build the SQLite statute database from JSON seed files.

Steps:
 1. Validate each seed file in the seed directory against DocumentSeed and
    reject document ids used by more than one seed.
 2. Create the schema (documents, provisions, FTS5 index kept in sync by
    triggers, build metadata) in a temporary file next to the target.
 3. Clean provisions (HTML to text, derived refs and titles, dedupe).
 4. Insert everything in a single transaction, write db_metadata, then move
    the temporary file over the previous database.
"""
from __future__ import annotations
import os, re, json, sqlite3, logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
from bs4 import BeautifulSoup
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
from pydantic import BaseModel, ValidationError

from fr_law.errors import SeedValidationError
from fr_law.ingest.schemas import DocumentSeed, ProvisionSeed
from fr_law.parsing.article_number import article_display_title, normalize_article_num

logger = logging.getLogger(__name__)

SEED_DIR = os.path.join('data', 'seed')
DB_PATH = os.path.join('data', 'database.db')

SCHEMA_VERSION = '1.0'
TIER = 'free'
JURISDICTION = 'FR'
BUILDER = 'fr_law.ingest.build_db'

SCHEMA = """
CREATE TABLE legal_documents (
  id TEXT PRIMARY KEY,
  type TEXT NOT NULL DEFAULT 'statute',
  title TEXT NOT NULL,
  title_en TEXT,
  short_name TEXT,
  status TEXT NOT NULL DEFAULT 'in_force'
    CHECK(status IN ('in_force', 'amended', 'repealed', 'not_yet_in_force')),
  issued_date TEXT,
  in_force_date TEXT,
  url TEXT,
  description TEXT,
  last_updated TEXT DEFAULT (datetime('now'))
);

CREATE TABLE legal_provisions (
  id INTEGER PRIMARY KEY,
  document_id TEXT NOT NULL REFERENCES legal_documents(id),
  provision_ref TEXT NOT NULL,
  chapter TEXT,
  section TEXT NOT NULL,
  title TEXT,
  content TEXT NOT NULL,
  order_index INTEGER,
  valid_from TEXT,
  valid_to TEXT,
  UNIQUE(document_id, provision_ref)
);

CREATE INDEX idx_provisions_doc ON legal_provisions(document_id);
CREATE INDEX idx_provisions_chapter ON legal_provisions(document_id, chapter);

CREATE VIRTUAL TABLE provisions_fts USING fts5(
  content, title,
  content='legal_provisions',
  content_rowid='id',
  tokenize='unicode61'
);

CREATE TRIGGER provisions_ai AFTER INSERT ON legal_provisions BEGIN
  INSERT INTO provisions_fts(rowid, content, title)
  VALUES (new.id, new.content, new.title);
END;

CREATE TRIGGER provisions_ad AFTER DELETE ON legal_provisions BEGIN
  INSERT INTO provisions_fts(provisions_fts, rowid, content, title)
  VALUES ('delete', old.id, old.content, old.title);
END;

CREATE TRIGGER provisions_au AFTER UPDATE ON legal_provisions BEGIN
  INSERT INTO provisions_fts(provisions_fts, rowid, content, title)
  VALUES ('delete', old.id, old.content, old.title);
  INSERT INTO provisions_fts(rowid, content, title)
  VALUES (new.id, new.content, new.title);
END;

CREATE TABLE db_metadata (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL
);
"""

BLOCK_TAGS = {"p", "div", "section", "article", "li", "blockquote", "tr", "td", "th"}
BREAK_TAGS = {"br"}
SKIPPED_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


class BuildSummary(BaseModel):
    db_path: str
    documents: int = 0
    provisions: int = 0
    duplicates_dropped: int = 0
    seed_files: List[str] = []


def _flush(buf: List[str], lines: List[str]) -> None:
    txt = re.sub(r"\s+", " ", "".join(buf)).strip()
    if txt:
        lines.append(txt)
    buf.clear()


def _collect_lines(node: Tag, buf: List[str], lines: List[str]) -> None:
    for child in node.children:
        if isinstance(child, Tag):
            if child.name in BREAK_TAGS:
                _flush(buf, lines)
            elif child.name in BLOCK_TAGS:
                _flush(buf, lines)
                _collect_lines(child, buf, lines)
                _flush(buf, lines)
            else:
                _collect_lines(child, buf, lines)
        elif isinstance(child, NavigableString) and not isinstance(child, SKIPPED_STRINGS):
            buf.append(str(child))


def html_to_text(html: Optional[str]) -> str:
    """Reduce LEGI article HTML to plain text, one line per block element.

    Text sitting directly in a block that also holds child blocks gets its
    own line, in document order.
    """
    if not html:
        return ""
    if '<' not in html:
        return html.strip()
    soup = BeautifulSoup(html, 'html.parser')
    for bad in soup(["script", "style", "noscript"]):
        bad.decompose()
    lines: List[str] = []
    buf: List[str] = []
    _collect_lines(soup, buf, lines)
    _flush(buf, lines)
    return "\n".join(lines)


def _normalize_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def prepare_provision(prov: ProvisionSeed) -> ProvisionSeed:
    section = prov.section.strip()
    token = normalize_article_num(section)
    ref = (prov.provision_ref or '').strip() or f"art{token}"
    title = prov.title.strip() if prov.title and prov.title.strip() else article_display_title(token)
    return prov.model_copy(update={
        'provision_ref': ref,
        'section': section,
        'title': title,
        'content': html_to_text(prov.content),
    })


def dedupe_provisions(provisions: List[ProvisionSeed]) -> List[ProvisionSeed]:
    """Keep one provision per provision_ref, preferring the longest content.

    The surviving entry takes the position of the first occurrence.
    """
    by_ref: Dict[str, ProvisionSeed] = {}
    for prov in provisions:
        ref = (prov.provision_ref or '').strip()
        existing = by_ref.get(ref)
        if existing is None or len(_normalize_whitespace(prov.content)) > len(_normalize_whitespace(existing.content)):
            by_ref[ref] = prov
    return list(by_ref.values())


def list_seed_files(seed_dir: str) -> List[str]:
    if not os.path.isdir(seed_dir):
        return []
    return sorted(
        f for f in os.listdir(seed_dir)
        if f.endswith('.json') and not f.startswith('.') and not f.startswith('_')
    )


def load_seed(path: str) -> DocumentSeed:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SeedValidationError(path, f"invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise SeedValidationError(path, "top-level value must be an object")
    try:
        return DocumentSeed(**data)
    except ValidationError as ve:
        raise SeedValidationError(path, str(ve)) from ve


def write_metadata(conn: sqlite3.Connection) -> None:
    rows = [
        ('tier', TIER),
        ('schema_version', SCHEMA_VERSION),
        ('jurisdiction', JURISDICTION),
        ('built_at', datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")),
        ('builder', BUILDER),
    ]
    with conn:
        conn.executemany("INSERT OR REPLACE INTO db_metadata (key, value) VALUES (?, ?)", rows)


def _insert_document(conn: sqlite3.Connection, seed: DocumentSeed, provisions: List[ProvisionSeed]) -> None:
    conn.execute(
        """INSERT INTO legal_documents
           (id, type, title, title_en, short_name, status, issued_date, in_force_date, url, description)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (seed.id, seed.type, seed.title, seed.title_en, seed.short_name, seed.status,
         seed.issued_date, seed.in_force_date, seed.url, seed.description),
    )
    conn.executemany(
        """INSERT INTO legal_provisions
           (document_id, provision_ref, chapter, section, title, content, order_index, valid_from, valid_to)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        [
            (seed.id, p.provision_ref, p.chapter, p.section, p.title, p.content, i + 1, p.valid_from, p.valid_to)
            for i, p in enumerate(provisions)
        ],
    )


def check_unique_ids(seeds: List[Tuple[str, DocumentSeed]]) -> None:
    seen: Dict[str, str] = {}
    for fname, seed in seeds:
        if seed.id in seen:
            raise SeedValidationError(fname, f'document id "{seed.id}" already used by {seen[seed.id]}')
        seen[seed.id] = fname


def build_database(seed_dir: str = SEED_DIR, db_path: str = DB_PATH) -> BuildSummary:
    files = list_seed_files(seed_dir)
    seeds = [(f, load_seed(os.path.join(seed_dir, f))) for f in files]
    check_unique_ids(seeds)
    summary = BuildSummary(db_path=db_path, seed_files=files)

    out_dir = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(out_dir, exist_ok=True)
    # The previous database is only replaced once the new one is complete.
    tmp_path = f"{db_path}.tmp"
    if os.path.exists(tmp_path):
        os.remove(tmp_path)

    conn = sqlite3.connect(tmp_path)
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("PRAGMA journal_mode = DELETE")
        conn.executescript(SCHEMA)

        if not seeds:
            logger.info(f"No seed files found in {seed_dir}; database created with empty schema")

        with conn:
            for fname, seed in seeds:
                prepared = [prepare_provision(p) for p in seed.provisions]
                provisions = dedupe_provisions(prepared)
                _insert_document(conn, seed, provisions)
                summary.documents += 1
                summary.provisions += len(provisions)
                summary.duplicates_dropped += len(prepared) - len(provisions)
                logger.info(f"Loaded {fname}: {seed.id} ({len(provisions)} provisions)")

        write_metadata(conn)
        conn.execute("ANALYZE")
        conn.execute("VACUUM")
    except Exception:
        conn.close()
        os.remove(tmp_path)
        raise
    conn.close()
    os.replace(tmp_path, db_path)

    logger.info(
        f"Build complete: {summary.documents} documents, {summary.provisions} provisions "
        f"({summary.duplicates_dropped} duplicates dropped) -> {db_path}"
    )
    return summary


__all__ = [
    'BuildSummary', 'SCHEMA', 'build_database', 'check_unique_ids', 'dedupe_provisions', 'html_to_text',
    'list_seed_files', 'load_seed', 'prepare_provision', 'write_metadata',
]
