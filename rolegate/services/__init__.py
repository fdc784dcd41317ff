"""
Role services.
"""

from .evaluator import AuthorizationEvaluator, parse_identifiers
from .gate import RoleGate, PrincipalRoles
from .locks import PrincipalLocks
from .membership import MembershipManager

__all__ = [
    "AuthorizationEvaluator",
    "parse_identifiers",
    "RoleGate",
    "PrincipalRoles",
    "PrincipalLocks",
    "MembershipManager",
]
