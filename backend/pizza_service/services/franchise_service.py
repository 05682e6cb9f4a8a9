# Overview: Service-layer operations for franchises and stores.

"""
Franchise and Store Service

Franchise creation and deletion are global-admin operations. Store creation
and deletion go through the ownership resolver, which also admits the
franchise's own admins.

Deleting a franchise cascades in one transaction: its stores and every
'franchisee' role row pointing at it are removed. Orders keep their ids.
"""

from __future__ import annotations

from ..errors import Conflict, Forbidden, NotFound, ValidationError
from ..extensions import db
from ..identity import Identity
from ..models import Franchise, Store, User, UserRole
from ..roles import FRANCHISEE, FranchiseeOf
from .auth_service import assign_role
from .ownership import FranchiseSnapshot, can_view_user_franchises, require_manage
from .query_utils import name_pattern, paginate


def _franchise_admins(franchise_id: int) -> list[User]:
    return (
        db.session.query(User)
        .join(UserRole, UserRole.user_id == User.id)
        .filter(UserRole.role == FRANCHISEE, UserRole.object_id == franchise_id)
        .order_by(UserRole.id.asc())
        .all()
    )


def _admin_to_dict(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email}


def franchise_to_dict(franchise: Franchise, *, detailed: bool) -> dict:
    """
    Serialize a franchise.

    detailed=True adds the admin list and store revenue; it is only used for
    global admins and for a franchisee's own franchises.
    """
    if not detailed:
        return {
            "id": franchise.id,
            "name": franchise.name,
            "stores": [store.to_dict(include_revenue=False) for store in franchise.stores],
        }
    return {
        "id": franchise.id,
        "name": franchise.name,
        "admins": [_admin_to_dict(admin) for admin in _franchise_admins(franchise.id)],
        "stores": [store.to_dict() for store in franchise.stores],
    }


def get_franchise_snapshot(franchise_id: int) -> FranchiseSnapshot | None:
    """Read a franchise and its admin ids once, for one authorization decision."""
    franchise = db.session.get(Franchise, franchise_id)
    if not franchise:
        return None
    admin_ids = frozenset(user.id for user in _franchise_admins(franchise.id))
    return FranchiseSnapshot(id=franchise.id, name=franchise.name, admin_ids=admin_ids)


def _require_snapshot(franchise_id: int) -> FranchiseSnapshot:
    snapshot = get_franchise_snapshot(franchise_id)
    if not snapshot:
        raise NotFound("franchise not found")
    return snapshot


def list_franchises(
    identity: Identity | None,
    page: int | None = None,
    limit: int | None = None,
    name: str | None = None,
) -> tuple[list[dict], bool]:
    """Public paged listing; global admins also see admins and revenue."""
    query = (
        db.session.query(Franchise)
        .filter(Franchise.name.like(name_pattern(name), escape="\\"))
        .order_by(Franchise.id.asc())
    )
    franchises, more = paginate(query, page, limit)
    detailed = identity is not None and identity.is_admin
    return [franchise_to_dict(f, detailed=detailed) for f in franchises], more


def get_user_franchises(identity: Identity, user_id: int) -> list[dict]:
    """
    Franchises administered by user_id.

    Returns [] instead of an error when the caller is neither that user nor
    a global admin, so other users' franchises are not disclosed.
    """
    if not can_view_user_franchises(identity, user_id):
        return []

    franchises = (
        db.session.query(Franchise)
        .join(UserRole, UserRole.object_id == Franchise.id)
        .filter(UserRole.role == FRANCHISEE, UserRole.user_id == user_id)
        .order_by(Franchise.id.asc())
        .all()
    )
    return [franchise_to_dict(f, detailed=True) for f in franchises]


def create_franchise(identity: Identity, name: str | None, admins: list | None) -> dict:
    """
    Create a franchise and grant FranchiseeOf(franchise) to each listed admin.

    admins is a list of {"email": ...}; every email must resolve to an
    existing user.
    """
    if not identity.is_admin:
        raise Forbidden("unable to create a franchise")

    if not isinstance(name, str) or not name.strip():
        raise ValidationError("franchise name required")
    name = name.strip()

    if admins is None:
        admins = []
    if not isinstance(admins, list):
        raise ValidationError("admins must be a list")

    if db.session.query(Franchise.id).filter_by(name=name).first():
        raise Conflict("franchise name already exists")

    admin_users: list[User] = []
    for entry in admins:
        email = entry.get("email") if isinstance(entry, dict) else None
        if not email:
            raise ValidationError("franchise admin email required")
        user = db.session.query(User).filter_by(email=email).first()
        if not user:
            raise NotFound(f"unknown user for franchise admin {email} provided")
        admin_users.append(user)

    franchise = Franchise(name=name)
    db.session.add(franchise)
    db.session.flush()

    for user in admin_users:
        assign_role(user, FranchiseeOf(franchise.id))

    db.session.commit()

    return {
        "id": franchise.id,
        "name": franchise.name,
        "admins": [_admin_to_dict(user) for user in admin_users],
    }


def delete_franchise(identity: Identity, franchise_id: int) -> None:
    if not identity.is_admin:
        raise Forbidden("unable to delete a franchise")

    franchise = db.session.get(Franchise, franchise_id)
    if not franchise:
        raise NotFound("franchise not found")

    db.session.query(UserRole).filter(
        UserRole.role == FRANCHISEE,
        UserRole.object_id == franchise_id,
    ).delete(synchronize_session="fetch")
    db.session.delete(franchise)
    db.session.commit()


def create_store(identity: Identity, franchise_id: int, name: str | None) -> Store:
    snapshot = _require_snapshot(franchise_id)
    require_manage(identity, snapshot, "create a store")

    if not isinstance(name, str) or not name.strip():
        raise ValidationError("store name required")

    store = Store(franchise_id=snapshot.id, name=name.strip(), total_revenue=0.0)
    db.session.add(store)
    db.session.commit()
    return store


def delete_store(identity: Identity, franchise_id: int, store_id: int) -> None:
    snapshot = _require_snapshot(franchise_id)
    require_manage(identity, snapshot, "delete a store")

    store = db.session.query(Store).filter_by(id=store_id, franchise_id=snapshot.id).first()
    if not store:
        raise NotFound("store not found")

    db.session.delete(store)
    db.session.commit()


def get_store(franchise_id: int, store_id: int) -> Store | None:
    return db.session.query(Store).filter_by(id=store_id, franchise_id=franchise_id).first()
