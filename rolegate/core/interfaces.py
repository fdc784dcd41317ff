"""
Role engine interfaces - shared types.

Application code hands principals and role references to the services;
these are the shapes the services accept.
"""

from enum import Enum
from typing import Any, Protocol, Union, runtime_checkable
from uuid import UUID

from .errors import InvalidMode


# ============================================================
# PRINCIPAL
# ============================================================

@runtime_checkable
class Principal(Protocol):
    """
    Anything that can hold roles.

    Only a stable identifier is needed; user models, service accounts or
    plain dataclasses all qualify.
    """

    id: Any


PrincipalLike = Union[Principal, int, str, UUID]

# Width of the principal_id column
PRINCIPAL_ID_MAX_LENGTH = 255


def principal_key(principal: PrincipalLike) -> str:
    """
    Get the storage key for a principal.

    Accepts an object with an `id` attribute or a raw identifier.

    Raises:
        ValueError: If the principal has no identifier or it is too long
    """
    principal_id = getattr(principal, "id", principal)
    if principal_id is None or principal_id == "":
        raise ValueError("Principal has no identifier")
    key = str(principal_id)
    if len(key) > PRINCIPAL_ID_MAX_LENGTH:
        raise ValueError(
            f"Principal identifier longer than {PRINCIPAL_ID_MAX_LENGTH} characters"
        )
    return key


# ============================================================
# MATCH MODE
# ============================================================

class MatchMode(str, Enum):
    """Containment semantics for multi-role checks."""
    ANY = "any"  # at least one
    ALL = "all"  # every one

    @classmethod
    def parse(cls, value: "MatchMode | str") -> "MatchMode":
        """
        Parse a mode from an enum member or a case-insensitive string.

        Raises:
            InvalidMode: For anything other than ANY/ALL
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidMode(value)
