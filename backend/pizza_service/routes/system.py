# backend/pizza_service/routes/system.py
"""
System endpoints: welcome banner, API docs, health and version.
"""

import sys
import time
from flask import Blueprint, current_app, jsonify
from ..extensions import db
from ..models import User, Franchise, AuthToken
from ..time_utils import utcnow, to_utc_z
from . import auth, franchise, orders, users

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        user_count = db.session.query(User).count()
        franchise_count = db.session.query(Franchise).count()
        active_tokens = db.session.query(AuthToken).filter(AuthToken.expires_at >= utcnow()).count()

        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "users": user_count,
                "franchises": franchise_count,
                "active_tokens": active_tokens,
            }
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/")
def welcome():
    return jsonify({
        "message": "welcome to JWT Pizza",
        "version": current_app.config["API_VERSION"],
    }), 200


@system_bp.get("/api/docs")
def docs():
    """Endpoint catalogue assembled from each blueprint's DOCS list."""
    return jsonify({
        "version": current_app.config["API_VERSION"],
        "endpoints": [*auth.DOCS, *users.DOCS, *orders.DOCS, *franchise.DOCS],
        "config": {"factory": current_app.config["FACTORY_URL"]},
    }), 200


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: database reachable
    - 503: database unhealthy
    """
    database_health = check_database_health()
    http_status = 200 if database_health["status"] == "healthy" else 503

    return {
        "status": database_health["status"],
        "timestamp": to_utc_z(utcnow()),
        "checks": {"database": database_health},
    }, http_status


@system_bp.get("/version")
def version():
    """
    Version endpoint for deployment debugging.

    Does NOT expose secret keys, database credentials or internal paths.
    """
    env = "production" if not current_app.debug else "development"

    return {
        "api_version": current_app.config["API_VERSION"],
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": to_utc_z(utcnow()),
    }
