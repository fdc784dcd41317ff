"""
Role models - roles and principal memberships.

Usage:
    # Roles are created by an administrative process
    admin = Role(name="Admin", slug="admin", level=10)

    # A membership links a principal to a role
    edge = Membership(principal_id="42", role_id=admin.id)
"""

from sqlalchemy import String, Text, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from rolegate.core.interfaces import PRINCIPAL_ID_MAX_LENGTH

from .base import Base, TimestampMixin


class Role(Base, TimestampMixin):
    """
    Role definition.

    The slug is the canonical identifier and is stored lower-cased.
    The level orders roles by privilege (higher = more privileged, ties allowed).
    """

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    @validates("slug")
    def normalize_slug(self, key: str, value: str) -> str:
        return value.strip().lower()

    def __repr__(self) -> str:
        return f"<Role {self.slug} level={self.level}>"


class Membership(Base, TimestampMixin):
    """
    Principal role assignment.

    At most one row per (principal, role) pair; the unique constraint is what
    keeps concurrent attach calls from creating duplicates.
    """

    __tablename__ = "role_user"
    __table_args__ = (
        UniqueConstraint("principal_id", "role_id", name="uq_role_user_principal_role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    principal_id: Mapped[str] = mapped_column(
        String(PRINCIPAL_ID_MAX_LENGTH),
        nullable=False,
        index=True,
    )
    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role: Mapped["Role"] = relationship("Role", lazy="joined")

    def __repr__(self) -> str:
        return f"<Membership principal={self.principal_id} role={self.role_id}>"
