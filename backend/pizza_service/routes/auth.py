# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- POST   /api/auth  register a diner, returns {user, token}
- PUT    /api/auth  login, returns {user, token}
- DELETE /api/auth  logout (revokes the presented token)
"""

from flask import Blueprint, g, jsonify, request

from ..decorators import require_auth
from ..errors import Unauthorized
from ..request_utils import json_body
from ..services import audit_service, auth_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

DOCS = [
    {
        "method": "POST",
        "path": "/api/auth",
        "description": "Register a new user",
        "example": """curl -X POST localhost:5000/api/auth -d '{"name":"pizza diner", "email":"d@jwt.com", "password":"diner"}' -H 'Content-Type: application/json'""",
        "response": {"user": {"id": 2, "name": "pizza diner", "email": "d@jwt.com", "roles": [{"role": "diner"}]}, "token": "tttttt"},
    },
    {
        "method": "PUT",
        "path": "/api/auth",
        "description": "Login existing user",
        "example": """curl -X PUT localhost:5000/api/auth -d '{"email":"a@jwt.com", "password":"admin"}' -H 'Content-Type: application/json'""",
        "response": {"user": {"id": 1, "name": "pizza admin", "email": "a@jwt.com", "roles": [{"role": "admin"}]}, "token": "tttttt"},
    },
    {
        "method": "DELETE",
        "path": "/api/auth",
        "requiresAuth": True,
        "description": "Logout a user",
        "example": "curl -X DELETE localhost:5000/api/auth -H 'Authorization: Bearer tttttt'",
        "response": {"message": "logout successful"},
    },
]


@auth_bp.post("")
def register_route():
    data = json_body()
    user, token = auth_service.register(
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
    )
    return jsonify({"user": user.to_dict(), "token": token}), 200


@auth_bp.put("")
def login_route():
    """
    Authenticate and issue a token.

    Unknown email and wrong password produce the same 401 body.
    """
    data = json_body()
    email = data.get("email")
    try:
        user, token = auth_service.login(email, data.get("password"))
    except Unauthorized:
        audit_service.log_security_event(
            user_id=None,
            event_type="LOGIN_FAILED",
            success=False,
            resource=request.path,
            action=request.method,
            reason=f"Invalid credentials for {email!r}",
            ip_address=request.remote_addr,
            user_agent=request.headers.get("User-Agent"),
        )
        raise

    return jsonify({"user": user.to_dict(), "token": token}), 200


@auth_bp.delete("")
@require_auth
def logout_route():
    auth_service.logout(g.token)
    audit_service.log_security_event(
        user_id=g.identity.id,
        event_type="LOGOUT",
        success=True,
        resource=request.path,
        action=request.method,
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    return jsonify({"message": "logout successful"}), 200
