# Overview: Flask API routes for user profiles.

from flask import Blueprint, g, jsonify, request

from ..decorators import require_auth, require_admin
from ..request_utils import json_body, query_int
from ..services import auth_service


user_bp = Blueprint("users", __name__, url_prefix="/api/user")

DOCS = [
    {
        "method": "GET",
        "path": "/api/user/me",
        "requiresAuth": True,
        "description": "Get authenticated user",
        "example": "curl -X GET localhost:5000/api/user/me -H 'Authorization: Bearer tttttt'",
        "response": {"id": 1, "name": "pizza admin", "email": "a@jwt.com", "roles": [{"role": "admin"}]},
    },
    {
        "method": "GET",
        "path": "/api/user?page=0&limit=10&name=*",
        "requiresAuth": True,
        "description": "List users (admin only)",
        "example": "curl -X GET 'localhost:5000/api/user?page=0&limit=10&name=*' -H 'Authorization: Bearer tttttt'",
        "response": {"users": [{"id": 1, "name": "pizza admin", "email": "a@jwt.com", "roles": [{"role": "admin"}]}], "more": False},
    },
    {
        "method": "PUT",
        "path": "/api/user/:userId",
        "requiresAuth": True,
        "description": "Update user",
        "example": """curl -X PUT localhost:5000/api/user/1 -d '{"name":"pizza admin", "email":"a@jwt.com", "password":"admin"}' -H 'Content-Type: application/json' -H 'Authorization: Bearer tttttt'""",
        "response": {"user": {"id": 1, "name": "pizza admin", "email": "a@jwt.com", "roles": [{"role": "admin"}]}, "token": "tttttt"},
    },
    {
        "method": "DELETE",
        "path": "/api/user/:userId",
        "requiresAuth": True,
        "description": "Delete user",
        "example": "curl -X DELETE localhost:5000/api/user/1 -H 'Authorization: Bearer tttttt'",
        "response": {"message": "user deleted"},
    },
]


@user_bp.get("/me")
@require_auth
def get_me():
    user = auth_service.get_user(g.identity, g.identity.id)
    return jsonify(user.to_dict()), 200


@user_bp.get("")
@require_auth
@require_admin
def list_users():
    users, more = auth_service.list_users(
        g.identity,
        page=query_int("page"),
        limit=query_int("limit"),
        name=request.args.get("name"),
    )
    return jsonify({"users": [user.to_dict() for user in users], "more": more}), 200


@user_bp.get("/<int:user_id>")
@require_auth
def get_user(user_id: int):
    user = auth_service.get_user(g.identity, user_id)
    return jsonify(user.to_dict()), 200


@user_bp.put("/<int:user_id>")
@require_auth
def update_user(user_id: int):
    """
    Update a profile. Self or global admin only.

    Returns the updated user and a freshly issued token for them.
    """
    data = json_body()
    user, token = auth_service.update_user(
        g.identity,
        user_id,
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
    )
    return jsonify({"user": user.to_dict(), "token": token}), 200


@user_bp.delete("/<int:user_id>")
@require_auth
def delete_user(user_id: int):
    auth_service.delete_user(g.identity, user_id)
    return jsonify({"message": "user deleted"}), 200
