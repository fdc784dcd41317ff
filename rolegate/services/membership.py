"""
Membership Manager - attach and detach roles.

Usage:
    manager = MembershipManager(RoleRepository(db), MembershipRepository(db))

    # By slug (case-insensitive), by id, or with a Role object
    await manager.attach(user, "editor")
    await manager.attach(user, 3)
    await manager.detach(user, editor_role)

    roles = await manager.current_roles(user)
"""

from contextlib import nullcontext
from typing import Union

import structlog

from rolegate.core.errors import RoleNotFound
from rolegate.core.interfaces import PrincipalLike, principal_key
from rolegate.models.role import Role
from rolegate.repositories.membership import MembershipRepository
from rolegate.repositories.role import RoleRepository

from .locks import PrincipalLocks

logger = structlog.get_logger()

RoleRef = Union[Role, int, str]


class MembershipManager:
    """
    Attaches and detaches roles for principals.

    Every mutation is idempotent: attaching a held role or detaching a role
    that is not held succeeds without changing anything.
    """

    def __init__(
        self,
        roles: RoleRepository,
        memberships: MembershipRepository,
        locks: PrincipalLocks | None = None,
    ):
        self.roles = roles
        self.memberships = memberships
        self.locks = locks

    def _guard(self, principal_id: str):
        if self.locks is None:
            return nullcontext()
        return self.locks.lock(principal_id)

    async def resolve(self, role: RoleRef) -> Role:
        """
        Resolve a role reference.

        Strings are slugs, integers are ids. Role objects are looked up
        again by id so a stale or unsaved object cannot create an edge.

        Raises:
            RoleNotFound: If the slug or id does not exist
            TypeError: For any other kind of reference
        """
        if isinstance(role, Role):
            if role.id is None:
                raise RoleNotFound(role.slug)
            return await self.roles.find_by_id(role.id)
        if isinstance(role, bool):
            raise TypeError(f"Unsupported role reference: {role!r}")
        if isinstance(role, int):
            return await self.roles.find_by_id(role)
        if isinstance(role, str):
            return await self.roles.find_by_slug(role)
        raise TypeError(f"Unsupported role reference: {role!r}")

    async def attach(self, principal: PrincipalLike, role: RoleRef) -> bool:
        """
        Give a principal a role.

        Returns:
            True if the role was attached, False if it was already held
        """
        principal_id = principal_key(principal)

        async with self._guard(principal_id):
            resolved = await self.resolve(role)
            if await self.memberships.exists(principal_id, resolved.id):
                created = False
            else:
                # A concurrent attach may still win; add() reports that as False
                created = await self.memberships.add(principal_id, resolved.id)

        if created:
            logger.info(
                "Role attached",
                principal_id=principal_id,
                role_id=resolved.id,
                role_slug=resolved.slug,
            )
        else:
            logger.debug(
                "Role already attached",
                principal_id=principal_id,
                role_slug=resolved.slug,
            )
        return created

    async def detach(self, principal: PrincipalLike, role: RoleRef) -> bool:
        """
        Take a role away from a principal.

        Returns:
            True if the role was detached, False if it was not held
        """
        principal_id = principal_key(principal)

        async with self._guard(principal_id):
            resolved = await self.resolve(role)
            removed = await self.memberships.remove(principal_id, resolved.id)

        if removed:
            logger.info(
                "Role detached",
                principal_id=principal_id,
                role_id=resolved.id,
                role_slug=resolved.slug,
            )
        else:
            logger.debug(
                "Role not attached",
                principal_id=principal_id,
                role_slug=resolved.slug,
            )
        return removed

    async def detach_all(self, principal: PrincipalLike) -> int:
        """Take every role away from a principal. Returns the number removed."""
        principal_id = principal_key(principal)

        async with self._guard(principal_id):
            removed = await self.memberships.remove_all(principal_id)

        logger.info("All roles detached", principal_id=principal_id, removed=removed)
        return removed

    async def current_roles(self, principal: PrincipalLike) -> list[Role]:
        """Snapshot of the roles a principal holds, in attachment order."""
        return await self.memberships.roles_for(principal_key(principal))
