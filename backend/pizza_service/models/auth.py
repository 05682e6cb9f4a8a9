from __future__ import annotations

from ..extensions import db
from ..roles import RoleAssignment, from_record
from ..time_utils import to_utc_z


class User(db.Model):
    """
    User accounts for authentication and attribution.

    Email is the login key and is unique across the service (case-sensitive).
    The password is stored only as a bcrypt hash.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_users_email"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)

    role_records = db.relationship(
        "UserRole",
        backref=db.backref("user", lazy=True),
        lazy=True,
        order_by="UserRole.id",
        cascade="all, delete-orphan",
    )

    @property
    def roles(self) -> list[RoleAssignment]:
        return [record.assignment for record in self.role_records]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "roles": [role.to_dict() for role in self.roles],
        }


class UserRole(db.Model):
    """
    One role assignment of a user.

    role is 'admin', 'franchisee' or 'diner'. object_id holds the franchise
    id for 'franchisee' rows and is NULL otherwise.
    """
    __tablename__ = "user_roles"
    __table_args__ = (
        db.UniqueConstraint("user_id", "role", "object_id", name="uq_user_roles_user_role_object"),
        db.Index("ix_user_roles_role_object", "role", "object_id"),
        db.CheckConstraint(
            "(role = 'franchisee' AND object_id IS NOT NULL) OR (role != 'franchisee' AND object_id IS NULL)",
            name="ck_user_roles_object_id",
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    role = db.Column(db.String(32), nullable=False)
    object_id = db.Column(db.Integer, nullable=True)

    @property
    def assignment(self) -> RoleAssignment:
        return from_record(self.role, self.object_id)


class AuthToken(db.Model):
    """
    Ledger of currently valid bearer tokens.

    A signed token is only honoured while its row exists here; logout deletes
    the row. Only the SHA-256 hash of the token is stored.
    """
    __tablename__ = "auth_tokens"

    token_hash = db.Column(db.String(64), primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "created_at": to_utc_z(self.created_at),
            "expires_at": to_utc_z(self.expires_at),
        }
