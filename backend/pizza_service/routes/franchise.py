# Overview: Flask API routes for franchises and stores; parses input and returns JSON responses.

from flask import Blueprint, g, jsonify, request

from ..decorators import optional_auth, require_auth
from ..request_utils import json_body, query_int
from ..services import franchise_service


franchise_bp = Blueprint("franchise", __name__, url_prefix="/api/franchise")

DOCS = [
    {
        "method": "GET",
        "path": "/api/franchise?page=0&limit=10&name=*",
        "description": "List all the franchises",
        "example": "curl 'localhost:5000/api/franchise?page=0&limit=10&name=pizzaPocket'",
        "response": {"franchises": [{"id": 1, "name": "pizzaPocket", "stores": [{"id": 1, "name": "SLC"}]}], "more": True},
    },
    {
        "method": "GET",
        "path": "/api/franchise/:userId",
        "requiresAuth": True,
        "description": "List a user's franchises",
        "example": "curl localhost:5000/api/franchise/4 -H 'Authorization: Bearer tttttt'",
        "response": [{"id": 2, "name": "pizzaPocket", "admins": [{"id": 4, "name": "pizza franchisee", "email": "f@jwt.com"}], "stores": [{"id": 4, "name": "SLC", "totalRevenue": 0}]}],
    },
    {
        "method": "POST",
        "path": "/api/franchise",
        "requiresAuth": True,
        "description": "Create a new franchise",
        "example": """curl -X POST localhost:5000/api/franchise -H 'Content-Type: application/json' -H 'Authorization: Bearer tttttt' -d '{"name": "pizzaPocket", "admins": [{"email": "f@jwt.com"}]}'""",
        "response": {"id": 1, "name": "pizzaPocket", "admins": [{"id": 4, "name": "pizza franchisee", "email": "f@jwt.com"}]},
    },
    {
        "method": "DELETE",
        "path": "/api/franchise/:franchiseId",
        "requiresAuth": True,
        "description": "Delete a franchise",
        "example": "curl -X DELETE localhost:5000/api/franchise/1 -H 'Authorization: Bearer tttttt'",
        "response": {"message": "franchise deleted"},
    },
    {
        "method": "POST",
        "path": "/api/franchise/:franchiseId/store",
        "requiresAuth": True,
        "description": "Create a new franchise store",
        "example": """curl -X POST localhost:5000/api/franchise/1/store -H 'Content-Type: application/json' -d '{"name":"SLC"}' -H 'Authorization: Bearer tttttt'""",
        "response": {"id": 1, "name": "SLC", "totalRevenue": 0},
    },
    {
        "method": "DELETE",
        "path": "/api/franchise/:franchiseId/store/:storeId",
        "requiresAuth": True,
        "description": "Delete a store",
        "example": "curl -X DELETE localhost:5000/api/franchise/1/store/1 -H 'Authorization: Bearer tttttt'",
        "response": {"message": "store deleted"},
    },
]


@franchise_bp.get("")
@optional_auth
def list_franchises():
    """
    List franchises.

    Query params:
    - page: int (zero-based, default 0)
    - limit: int (default 10)
    - name: str, '*' is a wildcard
    """
    franchises, more = franchise_service.list_franchises(
        g.identity,
        page=query_int("page"),
        limit=query_int("limit"),
        name=request.args.get("name"),
    )
    return jsonify({"franchises": franchises, "more": more}), 200


@franchise_bp.get("/<int:user_id>")
@require_auth
def list_user_franchises(user_id: int):
    return jsonify(franchise_service.get_user_franchises(g.identity, user_id)), 200


@franchise_bp.post("")
@require_auth
def create_franchise():
    data = json_body()
    franchise = franchise_service.create_franchise(g.identity, data.get("name"), data.get("admins"))
    return jsonify(franchise), 200


@franchise_bp.delete("/<int:franchise_id>")
@require_auth
def delete_franchise(franchise_id: int):
    franchise_service.delete_franchise(g.identity, franchise_id)
    return jsonify({"message": "franchise deleted"}), 200


@franchise_bp.post("/<int:franchise_id>/store")
@require_auth
def create_store(franchise_id: int):
    data = json_body()
    store = franchise_service.create_store(g.identity, franchise_id, data.get("name"))
    return jsonify(store.to_dict()), 200


@franchise_bp.delete("/<int:franchise_id>/store/<int:store_id>")
@require_auth
def delete_store(franchise_id: int, store_id: int):
    franchise_service.delete_store(g.identity, franchise_id, store_id)
    return jsonify({"message": "store deleted"}), 200
