import logging
from typing import Any, Dict
from flask import Blueprint, request, jsonify
from flasgger import swag_from
from werkzeug.exceptions import BadRequest
from pydantic import ValidationError

from fr_law.api import state, dependencies, models
from fr_law.api.extensions import limiter
from fr_law.errors import UnknownToolError
from fr_law.tools import registry

logger = logging.getLogger(__name__)
tools_bp = Blueprint('tools', __name__)


def _json_body() -> Dict[str, Any]:
    raw = request.get_json(silent=True)
    if raw is None:
        if request.get_data(cache=True).strip():
            raise BadRequest("Body must be valid JSON")
        return {}
    if not isinstance(raw, dict):
        raise BadRequest("Body must be a JSON object")
    return raw


def _run_tool(name: str, arguments: Dict[str, Any]):
    try:
        spec = registry.get_tool(name)
    except UnknownToolError as e:
        return jsonify({"error": "unknown_tool", "detail": str(e)}), 404
    if spec.needs_db:
        unavailable = dependencies.require_database()
        if unavailable:
            return unavailable
    try:
        result = registry.call_tool(state.db, name, arguments, state.tool_context)
    except ValidationError as ve:
        return jsonify({"error": "validation_failed", "details": ve.errors(include_url=False, include_context=False)}), 400
    except Exception as e:
        logger.exception(f"Tool {name} failed")
        state.record_tool_call(name, ok=False)
        return jsonify({"error": "tool_failed", "detail": str(e)}), 500
    state.record_tool_call(name)
    return jsonify(result)


@tools_bp.route("/api/tools", methods=["GET"])
@swag_from({
    'tags': ['tools'],
    'responses': {200: {'description': 'Tool descriptors (name, description, inputSchema)'}}
})
def list_tools():
    auth = dependencies.require_api_key()
    if auth:
        return auth
    return jsonify({"tools": registry.list_tools()})


@tools_bp.route("/api/tools/<name>", methods=["POST"])
@limiter.limit("120/minute")
@swag_from({
    'tags': ['tools'],
    'consumes': ['application/json'],
    'parameters': [
        {'name': 'name', 'in': 'path', 'type': 'string', 'required': True},
        {'name': 'body', 'in': 'body', 'required': False, 'schema': {'type': 'object'}},
    ],
    'responses': {
        200: {'description': '{"results": ..., "_metadata": {...}}'},
        400: {'description': 'Invalid arguments'},
        404: {'description': 'Unknown tool'},
        503: {'description': 'No statute database loaded'},
    }
})
def call_tool(name: str):
    auth = dependencies.require_api_key()
    if auth:
        return auth
    return _run_tool(name, _json_body())


@tools_bp.route("/api/search", methods=["POST"])
@limiter.limit("60/minute")
@swag_from({
    'tags': ['search'],
    'consumes': ['application/json'],
    'parameters': [{
        'name': 'body', 'in': 'body', 'required': True,
        'schema': {'type': 'object', 'properties': {
            'query': {'type': 'string'}, 'document_id': {'type': 'string'},
            'status': {'type': 'string'}, 'limit': {'type': 'integer'},
        }}
    }],
    'responses': {200: {'description': 'OK'}}
})
def search():
    auth = dependencies.require_api_key()
    if auth:
        return auth
    raw = _json_body()
    try:
        parsed = models.SearchRequest(**raw)
    except ValidationError as ve:
        return jsonify({"error": "validation_failed", "details": ve.errors(include_url=False, include_context=False)}), 400
    return _run_tool('search_legislation', parsed.model_dump(exclude_none=True))


@tools_bp.route("/api/citations/validate", methods=["POST"])
@limiter.limit("60/minute")
@swag_from({
    'tags': ['citations'],
    'consumes': ['application/json'],
    'parameters': [{
        'name': 'body', 'in': 'body', 'required': True,
        'schema': {'type': 'object', 'properties': {'citation': {'type': 'string'}}}
    }],
    'responses': {200: {'description': 'OK'}}
})
def validate_citation():
    auth = dependencies.require_api_key()
    if auth:
        return auth
    try:
        parsed = models.CitationRequest(**_json_body())
    except ValidationError as ve:
        return jsonify({"error": "validation_failed", "details": ve.errors(include_url=False, include_context=False)}), 400
    return _run_tool('validate_citation', parsed.model_dump())


@tools_bp.route("/api/citations/format", methods=["POST"])
@limiter.limit("60/minute")
@swag_from({
    'tags': ['citations'],
    'consumes': ['application/json'],
    'parameters': [{
        'name': 'body', 'in': 'body', 'required': True,
        'schema': {'type': 'object', 'properties': {
            'citation': {'type': 'string'},
            'format': {'type': 'string', 'enum': ['full', 'short', 'pinpoint']},
        }}
    }],
    'responses': {200: {'description': 'OK'}}
})
def format_citation():
    auth = dependencies.require_api_key()
    if auth:
        return auth
    try:
        parsed = models.FormatRequest(**_json_body())
    except ValidationError as ve:
        return jsonify({"error": "validation_failed", "details": ve.errors(include_url=False, include_context=False)}), 400
    return _run_tool('format_citation', parsed.model_dump())


@tools_bp.route("/api/documents/<document_id>/currency", methods=["GET"])
@swag_from({
    'tags': ['documents'],
    'parameters': [
        {'name': 'document_id', 'in': 'path', 'type': 'string', 'required': True},
        {'name': 'provision_ref', 'in': 'query', 'type': 'string', 'required': False},
    ],
    'responses': {200: {'description': 'OK'}}
})
def document_currency(document_id: str):
    auth = dependencies.require_api_key()
    if auth:
        return auth
    try:
        query = models.CurrencyQuery(**request.args.to_dict())
    except ValidationError as ve:
        return jsonify({"error": "validation_failed", "details": ve.errors(include_url=False, include_context=False)}), 400
    args = {'document_id': document_id}
    if query.provision_ref:
        args['provision_ref'] = query.provision_ref
    return _run_tool('check_currency', args)
