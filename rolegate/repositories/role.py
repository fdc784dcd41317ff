"""
Role repository - read-only role resolution.
"""

from sqlalchemy import select

from rolegate.core.errors import RoleNotFound
from rolegate.models.role import Role

from .base import BaseRepository, store_errors


def normalize_slug(slug: str) -> str:
    """Canonical slug form used for lookups."""
    return slug.strip().lower()


class RoleRepository(BaseRepository[Role]):
    """
    Resolves roles by id or slug and lists them.

    No side effects; roles themselves are managed by an administrative
    process, `create` is only there for seeding.
    """

    model = Role

    async def find_by_slug(self, slug: str) -> Role:
        """
        Find a role by slug (case-insensitive).

        Raises:
            RoleNotFound: If no role has that slug
        """
        role = await self.get_one(slug=normalize_slug(slug))
        if role is None:
            raise RoleNotFound(slug)
        return role

    async def find_by_id(self, role_id: int) -> Role:
        """
        Find a role by numeric id.

        Raises:
            RoleNotFound: If no role has that id
        """
        role = await self.get_by_id(role_id)
        if role is None:
            raise RoleNotFound(role_id)
        return role

    async def list_all(self) -> list[Role]:
        """All roles in id order."""
        return await self.all()

    async def list_ordered_by_level_desc(self) -> list[Role]:
        """All roles, highest level first; ties broken by id ascending."""
        stmt = select(Role).order_by(Role.level.desc(), Role.id.asc())
        async with store_errors("roles.list_ordered_by_level_desc"):
            result = await self.db.execute(stmt)
        return list(result.scalars().all())
