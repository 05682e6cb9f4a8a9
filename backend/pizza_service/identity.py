# Overview: The authenticated caller as seen by services.

from __future__ import annotations

from dataclasses import dataclass, field

from .roles import Admin, FranchiseeOf, RoleAssignment


@dataclass(frozen=True)
class Identity:
    """
    The authenticated caller, resolved by the authorization guard.

    Services receive it as an explicit argument instead of reading request
    globals, so authorization checks are plain functions of (identity,
    resource).
    """
    id: int
    name: str
    email: str
    roles: tuple[RoleAssignment, ...] = field(default_factory=tuple)

    def has_role(self, role: type | RoleAssignment) -> bool:
        if isinstance(role, type):
            return any(isinstance(r, role) for r in self.roles)
        return role in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(Admin)

    @property
    def franchise_ids(self) -> set[int]:
        return {r.franchise_id for r in self.roles if isinstance(r, FranchiseeOf)}

    @classmethod
    def from_user(cls, user) -> "Identity":
        return cls(id=user.id, name=user.name, email=user.email, roles=tuple(user.roles))
