import json


def _post(client, path, payload):
    return client.post(path, data=json.dumps(payload), content_type='application/json')


def test_list_tools(client):
    r = client.get('/api/tools')
    assert r.status_code == 200
    names = [t['name'] for t in r.get_json()['tools']]
    assert 'validate_citation' in names
    assert 'about' in names


def test_call_tool_validate_citation(client):
    r = _post(client, '/api/tools/validate_citation', {"citation": "Code de la défense, art. L. 2321-1"})
    assert r.status_code == 200
    j = r.get_json()
    assert j['results']['valid'] is True
    assert 'disclaimer' in j['_metadata']
    assert r.headers.get('X-Request-ID')


def test_call_tool_get_provision(client):
    r = _post(client, '/api/tools/get_provision', {"document_id": "code-defense", "provision_ref": "artL2321-1"})
    assert r.status_code == 200
    assert r.get_json()['results']['provision_ref'] == 'artL2321-1'


def test_call_tool_without_body(client):
    r = client.post('/api/tools/list_sources')
    assert r.status_code == 200
    assert r.get_json()['results']['jurisdiction'] == 'FR'


def test_unknown_tool(client):
    r = _post(client, '/api/tools/get_eu_basis', {})
    assert r.status_code == 404
    assert r.get_json()['error'] == 'unknown_tool'


def test_validation_failure(client):
    r = _post(client, '/api/tools/search_legislation', {"limit": 3})
    assert r.status_code == 400
    j = r.get_json()
    assert j['error'] == 'validation_failed'
    assert j['details']


def test_non_object_body(client):
    r = client.post('/api/tools/search_legislation', data=json.dumps(["query"]), content_type='application/json')
    assert r.status_code == 400


def test_database_unavailable(client, monkeypatch):
    from fr_law.api import state
    monkeypatch.setattr(state, 'db', None)
    r = _post(client, '/api/tools/search_legislation', {"query": "système"})
    assert r.status_code == 503
    # format_citation works without a database
    r = _post(client, '/api/tools/format_citation', {"citation": "Code pénal, art. 323-1"})
    assert r.status_code == 200
    assert r.get_json()['results']['formatted'] == 'Code pénal, art. 323-1'


def test_api_key_required_when_configured(client, monkeypatch):
    from fr_law.api import config
    monkeypatch.setattr(config, 'API_KEY', 'secret')
    r = _post(client, '/api/tools/list_sources', {})
    assert r.status_code == 401
    r = client.post('/api/tools/list_sources', data='{}', content_type='application/json', headers={'X-API-Key': 'secret'})
    assert r.status_code == 200


def test_tool_failure_is_reported(client, monkeypatch):
    from fr_law.tools import lookup

    def boom(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(lookup, 'check_currency', boom)
    r = _post(client, '/api/tools/check_currency', {"document_id": "code-penal"})
    assert r.status_code == 500
    assert r.get_json() == {"error": "tool_failed", "detail": "disk on fire"}


def test_search_route(client):
    r = _post(client, '/api/search', {"query": "traitement automatisé", "limit": 2})
    assert r.status_code == 200
    results = r.get_json()['results']
    assert 0 < len(results) <= 2
    assert 'snippet' in results[0]


def test_search_route_validation(client):
    r = _post(client, '/api/search', {})
    assert r.status_code == 400
    assert r.get_json()['error'] == 'validation_failed'


def test_citation_routes(client):
    r = _post(client, '/api/citations/validate', {"citation": "Code pénal, art. 999-999"})
    assert r.status_code == 200
    res = r.get_json()['results']
    assert res['document_exists'] is True
    assert res['provision_exists'] is False

    r = _post(client, '/api/citations/format', {"citation": "Article 323-1 du Code pénal", "format": "pinpoint"})
    assert r.status_code == 200
    assert r.get_json()['results']['formatted'] == 'art. 323-1'

    r = _post(client, '/api/citations/format', {"citation": "Code pénal, art. 1", "format": "oscola"})
    assert r.status_code == 400


def test_currency_route(client):
    r = client.get('/api/documents/loi-fraude-informatique/currency')
    assert r.status_code == 200
    res = r.get_json()['results']
    assert res['status'] == 'repealed'
    assert res['is_current'] is False

    r = client.get('/api/documents/code-defense/currency?provision_ref=artL2321-1')
    assert r.get_json()['results']['provision']['found'] is True
