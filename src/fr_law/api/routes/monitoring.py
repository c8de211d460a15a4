import os
import platform
import sqlite3
from flask import Blueprint, jsonify, Response

from fr_law.api import config, state
from fr_law.storage.database import read_metadata, safe_count

monitoring_bp = Blueprint('monitoring', __name__)


def _dataset_info():
    if state.db is None:
        return None
    return {
        "path": state.db_path,
        "fingerprint": state.tool_context.fingerprint,
        "built_at": read_metadata(state.db, 'built_at'),
        "schema_version": read_metadata(state.db, 'schema_version'),
        "documents": safe_count(state.db, 'SELECT COUNT(*) FROM legal_documents'),
        "provisions": safe_count(state.db, 'SELECT COUNT(*) FROM legal_provisions'),
    }


@monitoring_bp.route("/metrics", methods=["GET"])
def metrics():
    from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)


@monitoring_bp.route("/version", methods=["GET"])
def version():
    return jsonify({
        "version": config.APP_VERSION,
        "env": config.APP_ENV,
        "commit": os.getenv("GIT_COMMIT"),
        "python": platform.python_version(),
        "sqlite": sqlite3.sqlite_version,
        "dataset": _dataset_info(),
    })


@monitoring_bp.route("/api/version", methods=["GET"])
def api_version():
    return version()


@monitoring_bp.route("/api/health", methods=["GET"])
def health():
    if state.db is None:
        return jsonify({"status": "error", "detail": state.db_error or "database not loaded"}), 503
    try:
        state.db.execute("SELECT 1 FROM legal_documents LIMIT 1").fetchall()
        return jsonify({"status": "ok"}), 200
    except sqlite3.Error as e:
        return jsonify({"status": "error", "detail": str(e)}), 500


@monitoring_bp.route("/api/health/ready", methods=["GET"])
def health_ready():
    """Readiness probe - checks the statute database is loaded and indexed."""
    checks = {
        'database_loaded': state.db is not None,
        'fts_index_ready': state.db is not None and safe_count(state.db, 'SELECT COUNT(*) FROM provisions_fts') > 0,
    }
    all_ready = all(checks.values())
    return jsonify({
        "ready": all_ready,
        "checks": checks
    }), 200 if all_ready else 503


@monitoring_bp.route("/api/health/live", methods=["GET"])
def health_live():
    """Liveness probe - minimal check that service is running."""
    return jsonify({"alive": True}), 200


@monitoring_bp.route("/api/stats/tools", methods=["GET"])
def tool_stats():
    """Return tool call statistics for monitoring."""
    with state.tool_stats_lock:
        stats = dict(state.tool_stats)
        stats['by_tool'] = dict(state.tool_stats.get('by_tool') or {})
    return jsonify(stats)
