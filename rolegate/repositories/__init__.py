"""
Repository pattern for data access.
"""

from rolegate.repositories.base import BaseRepository, store_errors
from rolegate.repositories.role import RoleRepository, normalize_slug
from rolegate.repositories.membership import MembershipRepository

__all__ = [
    "BaseRepository",
    "store_errors",
    "RoleRepository",
    "normalize_slug",
    "MembershipRepository",
]
