# Overview: Flask API routes for the menu and diner orders.

from flask import Blueprint, g, jsonify

from ..decorators import require_auth
from ..request_utils import json_body, query_int
from ..services import menu_service, order_service


order_bp = Blueprint("orders", __name__, url_prefix="/api/order")

DOCS = [
    {
        "method": "GET",
        "path": "/api/order/menu",
        "description": "Get the pizza menu",
        "example": "curl localhost:5000/api/order/menu",
        "response": [{"id": 1, "title": "Veggie", "image": "pizza1.png", "price": 0.0038, "description": "A garden of delight"}],
    },
    {
        "method": "PUT",
        "path": "/api/order/menu",
        "requiresAuth": True,
        "description": "Add an item to the menu",
        "example": """curl -X PUT localhost:5000/api/order/menu -H 'Content-Type: application/json' -d '{ "title":"Student", "description": "No topping, no sauce, just carbs", "image":"pizza9.png", "price": 0.0001 }'  -H 'Authorization: Bearer tttttt'""",
        "response": [{"id": 1, "title": "Student", "description": "No topping, no sauce, just carbs", "image": "pizza9.png", "price": 0.0001}],
    },
    {
        "method": "GET",
        "path": "/api/order?page=1",
        "requiresAuth": True,
        "description": "Get the orders for the authenticated user",
        "example": "curl -X GET localhost:5000/api/order -H 'Authorization: Bearer tttttt'",
        "response": {"dinerId": 4, "orders": [{"id": 1, "franchiseId": 1, "storeId": 1, "date": "2024-06-05T05:14:40Z", "items": [{"id": 1, "menuId": 1, "description": "Veggie", "price": 0.05}]}], "page": 1},
    },
    {
        "method": "POST",
        "path": "/api/order",
        "requiresAuth": True,
        "description": "Create a order for the authenticated user",
        "example": """curl -X POST localhost:5000/api/order -H 'Content-Type: application/json' -d '{"franchiseId": 1, "storeId":1, "items":[{ "menuId": 1, "description": "Veggie", "price": 0.05 }]}'  -H 'Authorization: Bearer tttttt'""",
        "response": {"order": {"franchiseId": 1, "storeId": 1, "items": [{"menuId": 1, "description": "Veggie", "price": 0.05}], "id": 1}, "jwt": "1111111111", "followLinkToEndChaos": "https://factory/report"},
    },
]


@order_bp.get("/menu")
def get_menu():
    return jsonify([item.to_dict() for item in menu_service.get_menu()]), 200


@order_bp.put("/menu")
@require_auth
def add_menu_item():
    data = json_body()
    menu = menu_service.add_menu_item(
        g.identity,
        title=data.get("title"),
        description=data.get("description"),
        image=data.get("image"),
        price=data.get("price"),
    )
    return jsonify([item.to_dict() for item in menu]), 200


@order_bp.get("")
@require_auth
def get_orders():
    return jsonify(order_service.get_orders(g.identity, page=query_int("page"))), 200


@order_bp.post("")
@require_auth
def create_order():
    """
    Submit an order for the authenticated diner.

    Any dinerId in the body is ignored; the order belongs to the caller.
    Factory rejection -> 500 {message, followLinkToEndChaos}.
    """
    data = json_body()
    receipt = order_service.submit_order(
        g.identity,
        franchise_id=data.get("franchiseId"),
        store_id=data.get("storeId"),
        items=data.get("items"),
    )
    return jsonify(receipt.to_dict()), 200
