"""
Membership repository - principal/role association rows.
"""

from sqlalchemy import Insert, select, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from rolegate.models.base import utcnow
from rolegate.models.role import Membership, Role

from .base import BaseRepository, store_errors

# Dialects with a native "insert, ignore duplicates" statement
_INSERT_IGNORE = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class MembershipRepository(BaseRepository[Membership]):
    """
    Persistence for membership edges.

    Every method is a single statement, so an edge either exists or it
    does not; nothing in between is ever visible to readers.
    """

    model = Membership

    def _insert_ignore(self, values: dict) -> Insert | None:
        dialect = self.db.get_bind().dialect.name
        insert = _INSERT_IGNORE.get(dialect)
        if insert is None:
            return None
        return (
            insert(Membership.__table__)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["principal_id", "role_id"])
        )

    async def add(self, principal_id: str, role_id: int) -> bool:
        """
        Create the edge unless it already exists.

        Returns:
            True if a row was inserted, False if the pair was already present
            (including when a concurrent writer won the race)
        """
        now = utcnow()
        values = {
            "principal_id": principal_id,
            "role_id": role_id,
            "created_at": now,
            "updated_at": now,
        }
        stmt = self._insert_ignore(values)

        async with store_errors("role_user.add"):
            if stmt is not None:
                result = await self.db.execute(stmt)
                return result.rowcount > 0

            try:
                async with self.db.begin_nested():
                    self.db.add(Membership(**values))
            except IntegrityError:
                return False
            return True

    async def exists(self, principal_id: str, role_id: int) -> bool:
        """Check whether the edge exists."""
        stmt = select(Membership.id).where(
            Membership.principal_id == principal_id,
            Membership.role_id == role_id,
        )
        async with store_errors("role_user.exists"):
            result = await self.db.execute(stmt)
        return result.first() is not None

    async def remove(self, principal_id: str, role_id: int) -> bool:
        """Delete the edge. Returns False if there was none."""
        stmt = delete(Membership).where(
            Membership.principal_id == principal_id,
            Membership.role_id == role_id,
        )
        async with store_errors("role_user.remove"):
            result = await self.db.execute(stmt)
        return result.rowcount > 0

    async def remove_all(self, principal_id: str) -> int:
        """Delete every edge of a principal. Returns the number removed."""
        stmt = delete(Membership).where(Membership.principal_id == principal_id)
        async with store_errors("role_user.remove_all"):
            result = await self.db.execute(stmt)
        return result.rowcount

    async def roles_for(self, principal_id: str) -> list[Role]:
        """
        All roles held by a principal, read in one statement.

        Ordered by attachment (edge id) so repeated reads are stable.
        """
        stmt = (
            select(Role)
            .join(Membership, Membership.role_id == Role.id)
            .where(Membership.principal_id == principal_id)
            .order_by(Membership.id)
        )
        async with store_errors("role_user.roles_for"):
            result = await self.db.execute(stmt)
        return list(result.scalars().all())
