import pytest

from fr_law.search.legislation import (
    MAX_SEARCH_LIMIT,
    build_legal_stance,
    clamp_limit,
    run_fts_query,
    search_legislation,
    stance_strategies,
)


def test_plain_text_search(db):
    rows = search_legislation(db, "traitement automatisé")
    refs = {r["provision_ref"] for r in rows}
    assert {"art323-1", "art323-2"} <= refs
    first = rows[0]
    for key in ["document_id", "document_title", "provision_ref", "chapter", "section", "title", "snippet", "relevance"]:
        assert key in first
    assert ">>>" in first["snippet"] and "<<<" in first["snippet"]


def test_results_ordered_by_bm25(db):
    rows = search_legislation(db, "système")
    scores = [r["relevance"] for r in rows]
    assert scores == sorted(scores)


def test_prefix_matching(db):
    rows = search_legislation(db, "informat")
    assert rows


def test_fallback_used_when_all_terms_miss(db):
    # No provision contains both words; the OR fallback still finds each one.
    rows = search_legislation(db, "réparer emprisonnement")
    docs = {r["document_id"] for r in rows}
    assert "legitext000006070721" in docs
    assert "code-penal" in docs


def test_document_filter_accepts_any_identifier_form(db):
    for ident in ["code-penal", "CODE-PENAL", "Code pénal"]:
        rows = search_legislation(db, "système", document_id=ident)
        assert rows
        assert {r["document_id"] for r in rows} == {"code-penal"}


def test_unknown_document_filter_returns_nothing(db):
    assert search_legislation(db, "système", document_id="code-imaginaire") == []


def test_status_filter(db):
    rows = search_legislation(db, "frauduleusement", status="repealed")
    assert [r["document_id"] for r in rows] == ["loi-fraude-informatique"]


def test_explicit_syntax_and_phrase(db):
    rows = search_legislation(db, '"traitement automatisé" AND emprisonnement')
    assert {r["document_id"] for r in rows} <= {"code-penal", "loi-fraude-informatique"}
    assert rows


@pytest.mark.parametrize("query", ['"unterminated', "AND", "NOT", "a OR"])
def test_fts_syntax_errors_are_empty_results(db, query):
    assert search_legislation(db, query) == []


def test_blank_query(db):
    assert search_legislation(db, "") == []
    assert search_legislation(db, "   ") == []


def test_limit_clamped(db):
    assert len(search_legislation(db, "système", limit=1)) == 1
    assert len(search_legislation(db, "système", limit=0)) == 1
    assert clamp_limit(500, 10, MAX_SEARCH_LIMIT) == MAX_SEARCH_LIMIT
    assert clamp_limit(None, 10, MAX_SEARCH_LIMIT) == 10
    assert clamp_limit(-3, 10, MAX_SEARCH_LIMIT) == 1


def test_non_syntax_storage_errors_propagate(tmp_path):
    import sqlite3
    conn = sqlite3.connect(str(tmp_path / "bare.db"))
    conn.row_factory = sqlite3.Row
    with pytest.raises(sqlite3.OperationalError):
        run_fts_query(conn, '"x"*')
    conn.close()


def test_stance_strategies():
    names = [n for n, _ in stance_strategies("données personnelles")]
    assert names == ["exact_phrase", "all_terms", "any_term"]
    assert [n for n, _ in stance_strategies("cyber*")] == ["explicit"]
    assert [n for n, _ in stance_strategies("données")] == ["all_terms", "any_term"]


def test_build_legal_stance_merges_strategies(db):
    stance = build_legal_stance(db, "traitement automatisé")
    assert stance["total_citations"] == len(stance["citations"])
    keys = [(c["document_id"], c["provision_ref"]) for c in stance["citations"]]
    assert len(keys) == len(set(keys))
    first = stance["citations"][0]
    assert first["matched_by"][0] == "exact_phrase"
    assert "all_terms" in first["matched_by"]


def test_build_legal_stance_scoped_and_limited(db):
    stance = build_legal_stance(db, "système informatique", document_id="Code de la défense", limit=1)
    assert stance["document_id"] == "code-defense"
    assert all(c["document_id"] == "code-defense" for c in stance["citations"])
    assert stance["total_citations"] <= len(stance["strategies"])


def test_build_legal_stance_blank_or_unknown(db):
    assert build_legal_stance(db, "  ")["citations"] == []
    assert build_legal_stance(db, "système", document_id="nope")["citations"] == []
