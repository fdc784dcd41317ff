"""
Authorization Evaluator.

Answers read-only questions about a principal's roles:
- Does the principal hold any / all of the given roles?
- What is the principal's effective level (highest level among its roles)?

Every call reads a fresh snapshot through the MembershipManager; nothing
is cached between calls.

Role specs:
    "admin"                 single slug
    "admin|editor"          several slugs, pipe or comma separated
    "admin, 3"              numeric tokens are role ids
    ["admin", 3, role]      any iterable of slugs, ids or Role objects

Usage:
    evaluator = AuthorizationEvaluator(manager)

    await evaluator.has(user, "admin|editor")               # ANY by default
    await evaluator.has(user, "admin,editor", MatchMode.ALL)
    await evaluator.has(user, ["admin", "editor"], "all")
    level = await evaluator.effective_level(user)
"""

import re
from typing import Iterable, Union

import structlog

from rolegate.core.errors import NoRoleAssigned
from rolegate.core.interfaces import MatchMode, PrincipalLike, principal_key
from rolegate.models.role import Role

from .membership import MembershipManager

logger = structlog.get_logger()

Identifier = Union[int, str]
RoleSpec = Union[int, str, Role, Iterable[Union[int, str, Role]]]

# Separators between role tokens in a single string, surrounding spaces dropped
_SEPARATORS = re.compile(r"\s*[,|]\s*")
_NUMERIC = re.compile(r"\d+", re.ASCII)


def _identifier(value: int | str | Role) -> Identifier:
    if isinstance(value, Role):
        if value.id is None:
            raise TypeError(f"Unsaved role cannot be matched: {value!r}")
        return value.id
    if isinstance(value, bool):
        raise TypeError(f"Unsupported role identifier: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        return int(value) if _NUMERIC.fullmatch(value) else value
    raise TypeError(f"Unsupported role identifier: {value!r}")


def parse_identifiers(spec: RoleSpec) -> list[Identifier]:
    """
    Turn a role spec into discrete identifiers.

    A single string is split on commas and pipes. Numeric-looking tokens
    become integer ids; empty tokens are dropped.
    """
    if isinstance(spec, str):
        tokens: Iterable = _SEPARATORS.split(spec.strip())
    elif isinstance(spec, (int, Role)):
        tokens = [spec]
    else:
        tokens = spec

    identifiers = [_identifier(token) for token in tokens]
    return [i for i in identifiers if i != ""]


class AuthorizationEvaluator:
    """
    Evaluates role containment and effective level.

    Identifier matching:
    - Integer identifiers compare against role ids
    - Anything else compares against the stored slug, case-sensitively
      unless case_sensitive_slugs is False
    """

    def __init__(
        self,
        memberships: MembershipManager,
        *,
        case_sensitive_slugs: bool = True,
        default_mode: MatchMode | str = MatchMode.ANY,
    ):
        self.memberships = memberships
        self.case_sensitive_slugs = case_sensitive_slugs
        self.default_mode = MatchMode.parse(default_mode)

    def matches(self, identifier: Identifier, role: Role) -> bool:
        """Check one identifier against one role."""
        if isinstance(identifier, int):
            return role.id == identifier
        if self.case_sensitive_slugs:
            return role.slug == identifier
        return role.slug.lower() == identifier.lower()

    def _holds(self, identifier: Identifier, roles: list[Role]) -> bool:
        return any(self.matches(identifier, role) for role in roles)

    def evaluate(
        self,
        identifiers: list[Identifier],
        roles: list[Role],
        mode: MatchMode | str = MatchMode.ANY,
    ) -> bool:
        """
        Decide containment over an already-read role snapshot.

        ANY: at least one identifier matches (False for no identifiers).
        ALL: every identifier matches (True for no identifiers).

        Raises:
            InvalidMode: For a mode other than ANY/ALL
        """
        mode = MatchMode.parse(mode)
        if mode is MatchMode.ALL:
            return all(self._holds(i, roles) for i in identifiers)
        return any(self._holds(i, roles) for i in identifiers)

    async def has(
        self,
        principal: PrincipalLike,
        roles: RoleSpec,
        mode: MatchMode | str | None = None,
    ) -> bool:
        """
        Check if a principal holds the given role or roles.

        Args:
            principal: The principal (or its identifier)
            roles: Role spec (see module docstring)
            mode: ANY or ALL, case-insensitive; defaults to default_mode

        Raises:
            InvalidMode: For a mode other than ANY/ALL
        """
        # Reject a bad mode before touching the store
        mode = MatchMode.parse(self.default_mode if mode is None else mode)
        identifiers = parse_identifiers(roles)

        held = await self.memberships.current_roles(principal)
        result = self.evaluate(identifiers, held, mode)

        logger.debug(
            "Role check",
            principal_id=principal_key(principal),
            mode=mode.value,
            identifiers=identifiers,
            result=result,
        )
        return result

    async def effective_level(self, principal: PrincipalLike) -> int:
        """
        Highest level among the principal's roles.

        Raises:
            NoRoleAssigned: If the principal holds no roles
        """
        held = await self.memberships.current_roles(principal)
        if not held:
            raise NoRoleAssigned(principal_key(principal))
        return max(role.level for role in held)
