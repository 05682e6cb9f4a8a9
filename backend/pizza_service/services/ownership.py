# Overview: Resource ownership decisions for franchise-scoped operations.

"""
Resource Ownership Resolver

Pure decision functions of (identity, resource snapshot). Every mutating
franchise/store endpoint goes through can_manage() with a snapshot taken once
at the start of the request, so global admins and franchise admins are
treated the same everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import Forbidden
from ..identity import Identity


@dataclass(frozen=True)
class FranchiseSnapshot:
    id: int
    name: str
    admin_ids: frozenset[int]


def can_manage(identity: Identity, franchise: FranchiseSnapshot) -> bool:
    """True iff identity is a global admin or one of the franchise's admins."""
    return identity.is_admin or identity.id in franchise.admin_ids


def require_manage(identity: Identity, franchise: FranchiseSnapshot, action: str) -> None:
    if not can_manage(identity, franchise):
        raise Forbidden(f"unable to {action}")


def can_act_on_user(identity: Identity, user_id: int) -> bool:
    """Self-or-admin rule used for profile reads/updates and franchise listings."""
    return identity.id == user_id or identity.is_admin


# Franchise listings by user follow the same self-or-admin rule
can_view_user_franchises = can_act_on_user
