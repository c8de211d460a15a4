import os
import sys
import pytest

# Ensure the `src/` directory is on sys.path so we can import `fr_law` package
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(PROJECT_ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

FIXTURE_SEED_DIR = os.path.join(os.path.dirname(__file__), "fixtures", "seed")


@pytest.fixture(scope="session")
def seed_dir():
    return FIXTURE_SEED_DIR


@pytest.fixture(scope="session")
def db_path(tmp_path_factory, seed_dir):
    from fr_law.ingest.build_db import build_database
    path = str(tmp_path_factory.mktemp("fr_law") / "database.db")
    build_database(seed_dir, path)
    return path


@pytest.fixture()
def db(db_path):
    from fr_law.storage.database import open_database
    conn = open_database(db_path)
    yield conn
    conn.close()


@pytest.fixture()
def client(db, db_path, monkeypatch):
    """Flask test client serving the fixture database."""
    from fr_law.api.server import app
    from fr_law.api import config, state, dependencies
    from fr_law.api.extensions import limiter

    monkeypatch.setattr(state, "db", db)
    monkeypatch.setattr(state, "db_path", db_path)
    monkeypatch.setattr(state, "tool_context", dependencies.build_tool_context(db, db_path))
    monkeypatch.setattr(config, "API_KEY", "")
    limiter.enabled = False
    with app.test_client() as c:
        yield c
    limiter.enabled = True
