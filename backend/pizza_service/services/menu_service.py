# Overview: Service-layer operations for the menu.

from __future__ import annotations

from ..errors import Forbidden, ValidationError
from ..extensions import db
from ..identity import Identity
from ..models import MenuItem


def get_menu() -> list[MenuItem]:
    return db.session.query(MenuItem).order_by(MenuItem.id.asc()).all()


def add_menu_item(
    identity: Identity,
    *,
    title: str | None,
    description: str | None = None,
    image: str | None = None,
    price,
) -> list[MenuItem]:
    """Admin-only. Returns the whole menu after the insert."""
    if not identity.is_admin:
        raise Forbidden("unable to add menu item")

    if not isinstance(title, str) or not title.strip():
        raise ValidationError("menu item title required")

    if isinstance(price, bool) or not isinstance(price, (int, float)) or price < 0:
        raise ValidationError("menu item price must be a non-negative number")

    item = MenuItem(
        title=title.strip(),
        description=(description or "").strip(),
        image=(image or "").strip(),
        price=float(price),
    )
    db.session.add(item)
    db.session.commit()
    return get_menu()
