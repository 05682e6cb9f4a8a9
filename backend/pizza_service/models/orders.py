from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class MenuItem(db.Model):
    __tablename__ = "menu"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    image = db.Column(db.String(255), nullable=False, default="")
    price = db.Column(db.Float, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "image": self.image,
            "price": self.price,
            "description": self.description,
        }


class DinerOrder(db.Model):
    """
    An order placed by a diner.

    IMMUTABLE: orders have no update path. diner_id, franchise_id and store_id
    are plain integers so order history survives user and franchise deletion.
    """
    __tablename__ = "diner_orders"
    __table_args__ = (
        db.Index("ix_diner_orders_diner_date", "diner_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    diner_id = db.Column(db.Integer, nullable=False)
    franchise_id = db.Column(db.Integer, nullable=False)
    store_id = db.Column(db.Integer, nullable=False)
    date = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    items = db.relationship(
        "OrderItem",
        backref=db.backref("order", lazy=True),
        lazy=True,
        order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )

    @property
    def total(self) -> float:
        return sum(item.price for item in self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "dinerId": self.diner_id,
            "franchiseId": self.franchise_id,
            "storeId": self.store_id,
            "date": to_utc_z(self.date),
            "items": [item.to_dict() for item in self.items],
        }


class OrderItem(db.Model):
    """Order line. description and price are captured at submission time."""
    __tablename__ = "order_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("diner_orders.id"), nullable=False, index=True)
    menu_id = db.Column(db.Integer, db.ForeignKey("menu.id"), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Float, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "menuId": self.menu_id,
            "description": self.description,
            "price": self.price,
        }
