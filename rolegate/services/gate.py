"""
RoleGate - wires repositories, manager and evaluator for one session.

Usage:
    async with session_scope(session_factory) as db:
        gate = RoleGate(db)

        await gate.memberships.attach(user, "editor")
        if await gate.evaluator.has(user, "admin|editor"):
            ...

        # Or bound to one principal
        roles = gate.for_principal(user)
        await roles.attach("viewer")
        level = await roles.level()
"""

from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.core.config import Settings, get_settings
from rolegate.core.interfaces import MatchMode, PrincipalLike
from rolegate.models.role import Role
from rolegate.repositories.membership import MembershipRepository
from rolegate.repositories.role import RoleRepository

from .evaluator import AuthorizationEvaluator, RoleSpec
from .locks import PrincipalLocks
from .membership import MembershipManager, RoleRef

# Shared across gates so serialization holds between sessions in one process
_locks = PrincipalLocks()


class RoleGate:
    """Entry point bundling the role services for a database session."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        locks: PrincipalLocks | None = None,
    ):
        settings = settings or get_settings()
        if settings.roles.serialize_mutations:
            locks = locks or _locks
        else:
            locks = None

        self.db = db
        self.roles = RoleRepository(db)
        self.memberships = MembershipManager(
            self.roles,
            MembershipRepository(db),
            locks=locks,
        )
        self.evaluator = AuthorizationEvaluator(
            self.memberships,
            case_sensitive_slugs=settings.roles.case_sensitive_slugs,
            default_mode=settings.roles.default_mode,
        )

    def for_principal(self, principal: PrincipalLike) -> "PrincipalRoles":
        """Get the role surface bound to one principal."""
        return PrincipalRoles(principal, self.memberships, self.evaluator)


class PrincipalRoles:
    """Role operations for a single principal."""

    def __init__(
        self,
        principal: PrincipalLike,
        memberships: MembershipManager,
        evaluator: AuthorizationEvaluator,
    ):
        self.principal = principal
        self.memberships = memberships
        self.evaluator = evaluator

    async def roles(self) -> list[Role]:
        return await self.memberships.current_roles(self.principal)

    async def has(self, roles: RoleSpec, mode: MatchMode | str | None = None) -> bool:
        return await self.evaluator.has(self.principal, roles, mode)

    async def attach(self, role: RoleRef) -> bool:
        return await self.memberships.attach(self.principal, role)

    async def detach(self, role: RoleRef) -> bool:
        return await self.memberships.detach(self.principal, role)

    async def detach_all(self) -> int:
        return await self.memberships.detach_all(self.principal)

    async def level(self) -> int:
        return await self.evaluator.effective_level(self.principal)
