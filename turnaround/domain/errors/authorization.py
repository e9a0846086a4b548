"""Authorization errors.

Raised by the AuthorizationGuard when a caller identity lacks the role
assignment or privilege an operation requires.
"""

from __future__ import annotations

from turnaround.domain.exceptions import TurnaroundError


class UnauthorizedError(TurnaroundError):
    """Raised when a caller is not allowed to perform an operation.

    Attributes:
        caller_id: Identity of the rejected caller.
        required: What the operation needed (a role name or a privilege).

    Example:
        >>> raise UnauthorizedError("0xabc", "role FUEL or OPERATIONAL privilege")
        Traceback (most recent call last):
            ...
        UnauthorizedError: Caller 0xabc is not authorized: requires role FUEL or OPERATIONAL privilege
    """

    def __init__(self, caller_id: str, required: str) -> None:
        """Initialize UnauthorizedError.

        Args:
            caller_id: Identity of the rejected caller.
            required: Description of the missing role or privilege.
        """
        self.caller_id = caller_id
        self.required = required
        super().__init__(f"Caller {caller_id} is not authorized: requires {required}")
