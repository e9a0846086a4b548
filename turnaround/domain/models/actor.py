"""Operational roles, privilege tiers and the caller context.

Two independent capabilities decide who may act:

- Actor: one of the six operational roles a task is assigned to. Each role
  maps to exactly one identity through the RoleAssignment.
- Privilege: tiers granted by identity provisioning. ADMINISTRATIVE governs
  provisioning (role assignment, turnaround creation). OPERATIONAL executes
  and certifies, and overrides role checks on tasks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Actor(Enum):
    """The six operational roles of a turnaround.

    Roles:
        GROUND_HANDLING: Ramp, baggage, cargo and pushback
        CLEANING: Cabin cleaning and lavatory service
        FUEL: Refuelling
        CATERING: Galley unload and load
        FLIGHT_CREW: Cockpit and cabin crew duties
        GATE: Boarding gate and passenger bridge
    """

    GROUND_HANDLING = "GROUND_HANDLING"
    CLEANING = "CLEANING"
    FUEL = "FUEL"
    CATERING = "CATERING"
    FLIGHT_CREW = "FLIGHT_CREW"
    GATE = "GATE"


class Privilege(Enum):
    """Privilege tiers granted by identity provisioning.

    ADMINISTRATIVE and OPERATIONAL are deliberately separate: holding one
    never implies the other.
    """

    ADMINISTRATIVE = "ADMINISTRATIVE"
    OPERATIONAL = "OPERATIONAL"


@dataclass(frozen=True, eq=True)
class CallerContext:
    """Identity of a caller together with its resolved privileges.

    Attributes:
        identity: Opaque caller identity (wallet address, staff id, ...).
        privileges: Privilege tiers held by the identity.
    """

    identity: str
    privileges: frozenset[Privilege] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        """Validate the identity and freeze the privilege set."""
        if not isinstance(self.identity, str) or not self.identity.strip():
            raise ValueError("Caller identity must be a non-empty string")
        if not isinstance(self.privileges, frozenset):
            object.__setattr__(self, "privileges", frozenset(self.privileges))

    @property
    def is_operational(self) -> bool:
        return Privilege.OPERATIONAL in self.privileges

    @property
    def is_administrative(self) -> bool:
        return Privilege.ADMINISTRATIVE in self.privileges
