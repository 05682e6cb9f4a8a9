# Overview: Service-layer operations for orders; persists orders and forwards them to the factory.

"""
Order Submission

Orders are always attributed to the authenticated caller. Line prices are
taken from the menu, never from the request body; description and price are
captured on the order line so order history does not change when the menu
does.

Factory failures are surfaced as OrderSubmissionFailed. The order row that
was already committed is kept (no rollback); operators reconcile it.
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from ..errors import NotFound, OrderSubmissionFailed, ValidationError
from ..extensions import db
from ..identity import Identity
from ..models import DinerOrder, MenuItem, OrderItem
from .factory_client import get_factory_client
from .franchise_service import get_store

ORDERS_PAGE_SIZE = 10
FACTORY_FAILURE_MESSAGE = "Failed to fulfill order at factory"


@dataclass(frozen=True)
class OrderReceipt:
    order: DinerOrder
    jwt: str
    report_url: str | None

    def to_dict(self) -> dict:
        return {
            "order": self.order.to_dict(),
            "followLinkToEndChaos": self.report_url,
            "jwt": self.jwt,
        }


def _as_int(value, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def _validate_items(items) -> list[tuple[int, str | None]]:
    """(menuId, description) per line. Any client-supplied price is ignored."""
    if not isinstance(items, list) or not items:
        raise ValidationError("order must contain at least one item")

    lines = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("order items must be objects")
        menu_id = _as_int(item.get("menuId"), "menuId")
        description = item.get("description")
        lines.append((menu_id, str(description) if description else None))
    return lines


def submit_order(identity: Identity, franchise_id, store_id, items) -> OrderReceipt:
    """
    Validate, persist and forward an order for identity.

    Raises ValidationError / NotFound before anything is written, and
    OrderSubmissionFailed after the order is stored if the factory rejects it.
    """
    franchise_id = _as_int(franchise_id, "franchiseId")
    store_id = _as_int(store_id, "storeId")
    lines = _validate_items(items)

    store = get_store(franchise_id, store_id)
    if not store:
        raise NotFound("store not found")

    menu_ids = {menu_id for menu_id, _ in lines}
    menu = {item.id: item for item in db.session.query(MenuItem).filter(MenuItem.id.in_(menu_ids)).all()}
    unknown = sorted(menu_ids - menu.keys())
    if unknown:
        raise NotFound(f"unknown menu item {unknown[0]}")

    order = DinerOrder(diner_id=identity.id, franchise_id=franchise_id, store_id=store_id)
    for menu_id, description in lines:
        menu_item = menu[menu_id]
        order.items.append(OrderItem(
            menu_id=menu_id,
            description=description or menu_item.title,
            price=menu_item.price,
        ))
    db.session.add(order)
    store.total_revenue = (store.total_revenue or 0) + sum(menu[menu_id].price for menu_id, _ in lines)
    db.session.commit()

    diner = {"id": identity.id, "name": identity.name, "email": identity.email}
    result = get_factory_client().submit_order(diner, order.to_dict())

    if not result.ok:
        current_app.logger.warning(
            "Factory rejected order %s for diner %s: %s", order.id, identity.id, result.message
        )
        raise OrderSubmissionFailed(FACTORY_FAILURE_MESSAGE, report_url=result.report_url)

    return OrderReceipt(order=order, jwt=result.jwt, report_url=result.report_url)


def get_orders(identity: Identity, page: int | None = None) -> dict:
    """The caller's own orders, newest first, ORDERS_PAGE_SIZE per page (1-based)."""
    page = max(page or 1, 1)
    orders = (
        db.session.query(DinerOrder)
        .filter_by(diner_id=identity.id)
        .order_by(DinerOrder.date.desc(), DinerOrder.id.desc())
        .offset((page - 1) * ORDERS_PAGE_SIZE)
        .limit(ORDERS_PAGE_SIZE)
        .all()
    )
    return {
        "dinerId": identity.id,
        "orders": [order.to_dict() for order in orders],
        "page": page,
    }
