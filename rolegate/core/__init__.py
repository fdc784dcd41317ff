"""
Core building blocks: configuration, errors, logging and shared types.
"""

from .config import Settings, get_settings
from .errors import (
    RoleGateError,
    RoleNotFound,
    InvalidMode,
    NoRoleAssigned,
    StoreUnavailable,
)
from .interfaces import MatchMode, Principal, PrincipalLike, principal_key

__all__ = [
    "Settings",
    "get_settings",
    "RoleGateError",
    "RoleNotFound",
    "InvalidMode",
    "NoRoleAssigned",
    "StoreUnavailable",
    "MatchMode",
    "Principal",
    "PrincipalLike",
    "principal_key",
]
