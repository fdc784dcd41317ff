"""
Database models.
"""

from .base import Base, TimestampMixin
from .role import Role, Membership

__all__ = [
    "Base",
    "TimestampMixin",
    "Role",
    "Membership",
]
