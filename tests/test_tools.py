"""Tests for the tool registry and individual tool handlers."""

from datetime import date

import pytest
from pydantic import ValidationError

from fr_law.errors import UnknownToolError
from fr_law.tools import registry
from fr_law.tools.context import ToolContext
from fr_law.tools.lookup import check_currency, get_provision

EXPECTED_TOOLS = {
    "search_legislation", "get_provision", "list_sources", "validate_citation",
    "build_legal_stance", "format_citation", "check_currency", "about",
}


def _assert_envelope(resp):
    assert set(resp) == {"results", "_metadata"}
    meta = resp["_metadata"]
    for key in ["data_freshness", "disclaimer", "source_authority", "jurisdiction"]:
        assert key in meta


class TestRegistry:

    def test_all_tools_listed_with_schemas(self):
        tools = registry.list_tools()
        assert {t["name"] for t in tools} == EXPECTED_TOOLS
        for t in tools:
            assert t["description"]
            assert t["inputSchema"]["type"] == "object"
            assert "properties" in t["inputSchema"]

    def test_required_fields_in_schema(self):
        by_name = {t["name"]: t["inputSchema"] for t in registry.list_tools()}
        assert by_name["search_legislation"]["required"] == ["query"]
        assert by_name["get_provision"]["required"] == ["document_id"]
        assert "required" not in by_name["list_sources"]

    def test_unknown_tool(self, db):
        with pytest.raises(UnknownToolError):
            registry.call_tool(db, "get_eu_basis", {})

    def test_bad_arguments(self, db):
        with pytest.raises(ValidationError):
            registry.call_tool(db, "search_legislation", {})
        with pytest.raises(ValidationError):
            registry.call_tool(db, "format_citation", {"citation": "Code pénal, art. 1", "format": "oscola"})

    @pytest.mark.parametrize("name,args", [
        ("search_legislation", {"query": "système"}),
        ("get_provision", {"document_id": "code-defense", "provision_ref": "artL2321-1"}),
        ("list_sources", {}),
        ("validate_citation", {"citation": "Code pénal, art. 323-1"}),
        ("build_legal_stance", {"query": "traitement automatisé"}),
        ("format_citation", {"citation": "Code pénal, art. 323-1", "format": "short"}),
        ("check_currency", {"document_id": "code-penal"}),
        ("about", {}),
    ])
    def test_every_tool_returns_envelope(self, db, name, args):
        _assert_envelope(registry.call_tool(db, name, args, ToolContext(fingerprint="test-fingerprint")))


class TestGetProvision:

    def test_by_provision_ref(self, db):
        res = registry.call_tool(db, "get_provision", {"document_id": "code-defense", "provision_ref": "artL2321-1"})["results"]
        assert res["found"] is True
        assert res["section"] == "L2321-1"
        assert res["document_title"] == "Code de la défense"
        assert "Premier ministre" in res["content"]

    def test_provision_ref_takes_precedence(self, db):
        res = get_provision(db, "code-penal", section="323-2", provision_ref="art323-1")["results"]
        assert res["provision_ref"] == "art323-1"

    def test_by_section_and_title(self, db):
        res = get_provision(db, "Code pénal", section="323-3-1")["results"]
        assert res["document_id"] == "code-penal"
        assert res["found"] is True

    def test_missing_provision(self, db):
        res = get_provision(db, "code-penal", section="999")["results"]
        assert res["found"] is False
        assert "999" in res["message"]

    def test_missing_document(self, db):
        res = get_provision(db, "code-imaginaire")["results"]
        assert res["found"] is False
        assert "code-imaginaire" in res["message"]

    def test_listing_with_truncation(self, db):
        res = get_provision(db, "code-penal", max_provisions=2)["results"]
        assert res["count"] == 2
        assert res["truncated"] is True
        assert "hint" in res
        full = get_provision(db, "code-penal")["results"]
        assert full["truncated"] is False
        assert [p["provision_ref"] for p in full["provisions"]] == ["art323-1", "art323-2", "art323-3-1"]


class TestCitationTools:

    def test_validate_known_citation(self, db):
        res = registry.call_tool(db, "validate_citation", {"citation": "Code de la défense, art. L. 2321-1"})["results"]
        assert res["valid"] is True
        assert res["document_exists"] and res["provision_exists"]
        assert "L. 2321-1" in res["formatted_citation"]

    def test_validate_garbage(self, db):
        res = registry.call_tool(db, "validate_citation", {"citation": "this is not a legal citation"})["results"]
        assert res["valid"] is False
        assert res["document_exists"] is False
        assert res["formatted_citation"] is None

    def test_format_short(self, db):
        res = registry.call_tool(db, "format_citation", {"citation": "Code pénal, art. 323-1", "format": "short"})["results"]
        assert res["formatted"] == "Code pénal art. 323-1"
        assert res["valid"] is True

    def test_format_without_database(self):
        resp = registry.call_tool(None, "format_citation", {"citation": "Article L. 2321-1 du Code de la défense", "format": "pinpoint"})
        assert resp["results"]["formatted"] == "art. L. 2321-1"
        assert resp["_metadata"]["data_freshness"] == "unknown"


class TestCheckCurrency:

    def test_in_force_code(self, db):
        res = check_currency(db, "code-penal")["results"]
        assert res["status"] == "in_force"
        assert res["is_current"] is True
        assert res["warnings"] == []
        assert res["in_force_date"] == "1994-03-01"

    def test_repealed_law(self, db):
        res = check_currency(db, "Loi n° 88-19")["results"]
        assert res["status"] == "repealed"
        assert res["is_current"] is False
        assert "This statute has been repealed" in res["warnings"]

    def test_expired_provision(self, db):
        res = check_currency(db, "code-defense", provision_ref="artL1332-6-2", today=date(2024, 1, 1))["results"]
        prov = res["provision"]
        assert prov["found"] is True
        assert prov["valid_to"] == "2018-02-26"
        assert prov["is_current"] is False
        assert any("ceased to apply" in w for w in res["warnings"])

    def test_current_provision(self, db):
        res = check_currency(db, "code-defense", provision_ref="L2321-1", today=date(2024, 1, 1))["results"]
        assert res["provision"]["is_current"] is True

    def test_missing_provision_and_document(self, db):
        res = check_currency(db, "code-penal", provision_ref="art999")["results"]
        assert res["provision"]["found"] is False
        missing = check_currency(db, "code-imaginaire")["results"]
        assert missing["found"] is False
        assert missing["status"] == "not_found"


class TestSourceTools:

    def test_list_sources_counts(self, db):
        res = registry.call_tool(db, "list_sources", {})["results"]
        assert res["jurisdiction"] == "FR"
        assert res["schema_version"] == "1.0"
        coverage = res["sources"][0]["coverage"]
        assert coverage["codes"] == 4
        assert coverage["provisions"] == 9

    def test_about_reports_context(self, db):
        ctx = ToolContext(version="9.9.9", fingerprint="abc123", db_built="2026-01-01")
        res = registry.call_tool(db, "about", {}, ctx)["results"]
        assert res["server"]["version"] == "9.9.9"
        assert res["dataset"]["fingerprint"] == "abc123"
        assert res["dataset"]["counts"]["legal_provisions"] == 9
        assert res["security"]["access_model"] == "read-only"


class TestSearchLimits:

    def test_context_default_limit_applies_when_limit_omitted(self, db):
        ctx = ToolContext(default_search_limit=1)
        res = registry.call_tool(db, "search_legislation", {"query": "traitement automatisé"}, ctx)["results"]
        assert len(res) == 1

    def test_explicit_limit_overrides_context_default(self, db):
        ctx = ToolContext(default_search_limit=1)
        res = registry.call_tool(db, "search_legislation", {"query": "traitement automatisé", "limit": 5}, ctx)["results"]
        assert len(res) >= 2

    def test_context_maximum_caps_limit(self, db):
        ctx = ToolContext(max_search_limit=1)
        res = registry.call_tool(db, "search_legislation", {"query": "traitement automatisé", "limit": 5}, ctx)["results"]
        assert len(res) == 1
