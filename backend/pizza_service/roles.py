# Overview: Role assignments as a closed tagged variant.

"""
Role model.

A user holds an ordered set of role assignments:

- Admin: global administrator
- FranchiseeOf(franchise_id): administrator of one franchise
- Diner: the implicit baseline every user has

Rows in user_roles are converted to these values with from_record(); a
franchisee row without a franchise id cannot be represented.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ADMIN = "admin"
FRANCHISEE = "franchisee"
DINER = "diner"


@dataclass(frozen=True)
class Admin:
    name = ADMIN

    def to_dict(self) -> dict:
        return {"role": ADMIN}


@dataclass(frozen=True)
class FranchiseeOf:
    franchise_id: int
    name = FRANCHISEE

    def __post_init__(self):
        if not isinstance(self.franchise_id, int) or isinstance(self.franchise_id, bool):
            raise ValueError("franchisee role requires an integer franchise id")

    def to_dict(self) -> dict:
        return {"role": FRANCHISEE, "objectId": self.franchise_id}


@dataclass(frozen=True)
class Diner:
    name = DINER

    def to_dict(self) -> dict:
        return {"role": DINER}


RoleAssignment = Union[Admin, FranchiseeOf, Diner]


def from_record(role: str, object_id: int | None = None) -> RoleAssignment:
    """Build a role assignment from its persisted (role, object_id) pair."""
    if role == ADMIN:
        return Admin()
    if role == FRANCHISEE:
        if object_id is None:
            raise ValueError("franchisee role requires a franchise id")
        return FranchiseeOf(int(object_id))
    if role == DINER:
        return Diner()
    raise ValueError(f"Unknown role: {role}")


def to_record(assignment: RoleAssignment) -> tuple[str, int | None]:
    if isinstance(assignment, FranchiseeOf):
        return FRANCHISEE, assignment.franchise_id
    return assignment.name, None
