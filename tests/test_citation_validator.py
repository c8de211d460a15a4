from fr_law.retrieval.citation_validator import (
    MISSING_TITLE_WARNING,
    REPEALED_WARNING,
    validate_citation,
    validate_parsed_citation,
)
from fr_law.parsing.models import ParsedCitation


def test_known_citation(db):
    r = validate_citation(db, "Code de la défense, art. L. 2321-1")
    assert r.document_exists and r.provision_exists
    assert r.document_id == "code-defense"
    assert r.document_title == "Code de la défense"
    assert r.status == "in_force"
    assert r.warnings == []


def test_article_first_word_order(db):
    r = validate_citation(db, "Article 323-1 du Code pénal")
    assert r.document_exists and r.provision_exists
    assert r.citation.section == "323-1"


def test_accent_tolerant_title(db):
    r = validate_citation(db, "Code de la defense, art. L2321-2")
    assert r.document_id == "code-defense"
    assert r.provision_exists


def test_missing_article_in_known_code(db):
    r = validate_citation(db, "Code pénal, art. 999-999")
    assert r.document_exists is True
    assert r.provision_exists is False
    assert any("not found" in w for w in r.warnings)
    assert r.warnings == ["Article 999-999 not found in Code pénal"]


def test_unknown_document(db):
    r = validate_citation(db, "Code imaginaire, art. 1")
    assert r.document_exists is False
    assert r.provision_exists is False
    assert r.warnings == ['Document "Code imaginaire" not found in database']


def test_repealed_statute_is_flagged_but_resolved(db):
    r = validate_citation(db, "Loi Godfrain, art. 462-2")
    assert r.document_exists and r.provision_exists
    assert r.status == "repealed"
    assert r.warnings == [REPEALED_WARNING]


def test_warnings_accumulate_in_order(db):
    r = validate_citation(db, "Loi Godfrain, art. 1")
    assert r.provision_exists is False
    assert r.warnings[0] == REPEALED_WARNING
    assert r.warnings[1].startswith("Article 1 not found in Loi n° 88-19")


def test_unparseable_citation(db):
    r = validate_citation(db, "this is not a legal citation")
    assert not r.document_exists and not r.provision_exists
    assert r.citation.valid is False
    assert r.warnings == [r.citation.error]


def test_citation_without_usable_title(db):
    r = validate_citation(db, "Article 5 du .")
    assert r.citation.valid is True
    assert r.citation.title is None
    assert not r.document_exists
    assert r.warnings == [MISSING_TITLE_WARNING]


def test_legi_identifier_as_title(db):
    r = validate_citation(db, "LEGITEXT000006070721, art. 1240")
    assert r.document_id == "legitext000006070721"
    assert r.provision_exists


def test_result_is_serialisable(db):
    data = validate_citation(db, "Code civil, art. 9").model_dump()
    assert data["citation"]["title"] == "Code civil"
    assert data["provision_exists"] is True


def test_document_level_citation(db):
    parsed = ParsedCitation(valid=True, type="statute", title="Code pénal", section=None)
    r = validate_parsed_citation(db, parsed)
    assert r.document_exists is True
    assert r.provision_exists is True
    assert r.document_id == "code-penal"
    assert r.warnings == []


def test_document_level_citation_to_repealed_law(db):
    r = validate_parsed_citation(db, ParsedCitation(valid=True, type="statute", title="Loi Godfrain"))
    assert r.provision_exists is True
    assert r.warnings == [REPEALED_WARNING]


def test_parsed_and_raw_entry_points_agree(db):
    raw = validate_citation(db, "Code pénal, art. 323-1")
    assert validate_parsed_citation(db, raw.citation) == raw
