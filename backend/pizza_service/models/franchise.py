from __future__ import annotations

from ..extensions import db


class Franchise(db.Model):
    """
    A franchise owns its stores exclusively.

    Franchise admins are not a column: they are the users holding a
    'franchisee' role whose object_id is this franchise's id.
    """
    __tablename__ = "franchises"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, unique=True)

    stores = db.relationship(
        "Store",
        backref=db.backref("franchise", lazy=True),
        lazy=True,
        order_by="Store.id",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Franchise id={self.id} name={self.name!r}>"


class Store(db.Model):
    __tablename__ = "stores"
    __table_args__ = (
        db.Index("ix_stores_franchise_id", "franchise_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    franchise_id = db.Column(db.Integer, db.ForeignKey("franchises.id"), nullable=False)
    name = db.Column(db.String(255), nullable=False)

    # Sum of accepted order totals
    total_revenue = db.Column(db.Float, nullable=False, default=0.0)

    def __repr__(self) -> str:
        return f"<Store id={self.id} franchise_id={self.franchise_id} name={self.name!r}>"

    def to_dict(self, *, include_revenue: bool = True) -> dict:
        data = {"id": self.id, "name": self.name}
        if include_revenue:
            data["totalRevenue"] = self.total_revenue or 0
        return data
