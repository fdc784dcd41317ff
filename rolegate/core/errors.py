"""
Error types raised by the role engine.

All errors derive from RoleGateError so callers can catch the whole family.
None of them are swallowed inside the engine; "already in the desired state"
is reported as a normal return value, not as an error.
"""

from typing import Any


class RoleGateError(Exception):
    """Base class for role engine errors."""
    pass


class RoleNotFound(RoleGateError, LookupError):
    """Raised when a slug or id does not resolve to an existing role."""

    def __init__(self, identifier: Any):
        self.identifier = identifier
        super().__init__(f'Role "{identifier}" does not exist.')


class InvalidMode(RoleGateError, ValueError):
    """Raised when a match mode other than ANY/ALL is given."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Invalid match mode {value!r}: pass only 'any' or 'all'."
        )


class NoRoleAssigned(RoleGateError):
    """Raised when a level is requested for a principal holding no roles."""

    def __init__(self, principal_id: str):
        self.principal_id = principal_id
        super().__init__(f"Principal {principal_id} has no role.")


class StoreUnavailable(RoleGateError):
    """Raised when the persistence layer fails (timeout, connection loss)."""

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Role store unavailable during {operation}{detail}")
