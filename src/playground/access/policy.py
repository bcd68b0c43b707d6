"""Role-based access policy.

The lifecycle handlers receive the caller as an ``Actor`` (resolved upstream
from a bearer credential) and consult these guards before touching any
aggregate, so a refused call leaves no trace behind.
"""

from dataclasses import dataclass
from enum import Enum

from playground.shared.errors import Forbidden


class Role(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"
    INSTALLATION_TEAM = "installation_team"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str

    @classmethod
    def of(cls, user_id, role) -> "Actor":
        """Build an actor from raw command fields, rejecting unknown roles."""
        try:
            role = Role(role).value
        except ValueError:
            raise Forbidden({"role": [f"Unknown role: {role}"]}) from None
        return cls(user_id=str(user_id), role=role)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_team(self) -> bool:
        return self.role == Role.INSTALLATION_TEAM.value

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER.value


def require_role(actor: Actor, *roles: Role, message: str | None = None) -> None:
    if actor.role not in {r.value for r in roles}:
        allowed = ", ".join(r.value for r in roles)
        raise Forbidden({"role": [message or f"Role {actor.role} is not allowed; requires one of: {allowed}"]})


def require_admin(actor: Actor) -> None:
    require_role(actor, Role.ADMIN, message="Admin access required")


def require_owner_or_admin(actor: Actor, owner_id, resource: str = "resource") -> None:
    if actor.is_admin:
        return
    if str(owner_id) != actor.user_id:
        raise Forbidden({"owner": [f"Not authorized to access this {resource}"]})


def require_assigned_team_or_admin(actor: Actor, team_id) -> None:
    """Admins pass; team members pass only for installations assigned to them."""
    require_role(actor, Role.ADMIN, Role.INSTALLATION_TEAM)
    if actor.is_team and str(team_id) != actor.user_id:
        raise Forbidden({"team": ["Installation is assigned to another team"]})


def require_owning_customer(actor: Actor, customer_id) -> None:
    require_role(actor, Role.CUSTOMER, message="Only customers can perform this action")
    if str(customer_id) != actor.user_id:
        raise Forbidden({"customer": ["Installation belongs to another customer"]})


def can_view_installation(actor: Actor, installation) -> bool:
    if actor.is_admin:
        return True
    if actor.is_team:
        return str(installation.team_id) == actor.user_id
    return str(installation.customer_id) == actor.user_id
