"""AuthorizationGuard: who may act on which task.

A pure predicate over the role assignment and the caller's privileges.
Task-level authorization is role identity OR operational privilege;
administrative privilege alone never satisfies it.
"""

from __future__ import annotations

from turnaround.domain.errors.authorization import UnauthorizedError
from turnaround.domain.models.actor import Actor, CallerContext, Privilege
from turnaround.domain.models.role_assignment import RoleAssignment


class AuthorizationGuard:
    """Authorization checks bound to one role assignment."""

    def __init__(self, role_assignment: RoleAssignment) -> None:
        self._roles = role_assignment

    def is_authorized(self, caller: CallerContext, required_role: Actor) -> bool:
        """True iff the caller is the role's identity or holds operational privilege."""
        if caller.is_operational:
            return True
        assigned = self._roles.identity_for(required_role)
        return assigned is not None and assigned == caller.identity

    def require_role(self, caller: CallerContext, required_role: Actor) -> None:
        """Raise UnauthorizedError unless ``is_authorized`` approves the caller."""
        if not self.is_authorized(caller, required_role):
            raise UnauthorizedError(
                caller.identity,
                f"role {required_role.value} or {Privilege.OPERATIONAL.value} privilege",
            )

    @staticmethod
    def require_operational(caller: CallerContext) -> None:
        if not caller.is_operational:
            raise UnauthorizedError(caller.identity, f"{Privilege.OPERATIONAL.value} privilege")

    @staticmethod
    def require_administrative(caller: CallerContext) -> None:
        if not caller.is_administrative:
            raise UnauthorizedError(caller.identity, f"{Privilege.ADMINISTRATIVE.value} privilege")
