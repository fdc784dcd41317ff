"""
Tests for attaching and detaching roles.
"""

import asyncio

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.core.errors import RoleNotFound, StoreUnavailable
from rolegate.models.role import Role
from rolegate.repositories.membership import MembershipRepository
from rolegate.repositories.role import RoleRepository
from rolegate.services.locks import PrincipalLocks
from rolegate.services.membership import MembershipManager


@pytest.mark.asyncio
async def test_attach_by_slug_id_and_object(manager: MembershipManager, user, roles):
    assert await manager.attach(user, "ADMIN") is True
    assert await manager.attach(user, roles["editor"].id) is True
    assert await manager.attach(user, roles["viewer"]) is True

    held = await manager.current_roles(user)
    assert [r.slug for r in held] == ["admin", "editor", "viewer"]


@pytest.mark.asyncio
async def test_attach_twice_creates_one_edge(
    db: AsyncSession,
    manager: MembershipManager,
    user,
    roles,
):
    assert await manager.attach(user, "editor") is True
    assert await manager.attach(user, "Editor") is False

    count = await MembershipRepository(db).count(principal_id=user.id)
    assert count == 1


@pytest.mark.asyncio
async def test_attach_unknown_slug(manager: MembershipManager, user, roles):
    with pytest.raises(RoleNotFound) as exc_info:
        await manager.attach(user, "nonexistent-slug")

    assert exc_info.value.identifier == "nonexistent-slug"
    assert await manager.current_roles(user) == []


@pytest.mark.asyncio
async def test_detach_unknown_id(manager: MembershipManager, user, roles):
    with pytest.raises(RoleNotFound):
        await manager.detach(user, 4242)


@pytest.mark.asyncio
async def test_unsupported_reference(manager: MembershipManager, user, roles):
    with pytest.raises(TypeError):
        await manager.attach(user, 1.5)
    with pytest.raises(TypeError):
        await manager.attach(user, True)


@pytest.mark.asyncio
async def test_detach_is_idempotent(manager: MembershipManager, user, roles):
    await manager.attach(user, "viewer")

    assert await manager.detach(user, "viewer") is True
    assert await manager.detach(user, "viewer") is False
    # Never held
    assert await manager.detach(user, "admin") is False

    assert await manager.current_roles(user) == []


@pytest.mark.asyncio
async def test_detach_all(manager: MembershipManager, user, other_user, roles):
    await manager.attach(user, "admin")
    await manager.attach(user, "viewer")
    await manager.attach(other_user, "viewer")

    assert await manager.detach_all(user) == 2
    assert await manager.detach_all(user) == 0

    assert await manager.current_roles(user) == []
    assert [r.slug for r in await manager.current_roles(other_user)] == ["viewer"]


@pytest.mark.asyncio
async def test_raw_identifiers_as_principals(manager: MembershipManager, roles):
    await manager.attach(42, "editor")

    assert [r.slug for r in await manager.current_roles("42")] == ["editor"]


@pytest.mark.asyncio
async def test_principal_without_identifier(manager: MembershipManager, roles):
    with pytest.raises(ValueError):
        await manager.attach(None, "editor")


@pytest.mark.asyncio
async def test_serialized_attach_keeps_one_edge(db: AsyncSession, user, roles):
    manager = MembershipManager(
        RoleRepository(db),
        MembershipRepository(db),
        locks=PrincipalLocks(),
    )
    editor: Role = roles["editor"]

    results = await asyncio.gather(
        manager.attach(user, editor),
        manager.attach(user, editor),
        manager.attach(user, editor),
    )

    assert sorted(results) == [False, False, True]
    assert await MembershipRepository(db).count(principal_id=user.id) == 1


@pytest.mark.asyncio
async def test_principal_locks_reuse_while_held():
    locks = PrincipalLocks()

    first = locks.lock("a")
    assert locks.lock("a") is first
    assert locks.lock("b") is not first

    async with first:
        assert first.locked()
        assert locks.lock("a").locked()


@pytest.mark.asyncio
async def test_attach_rejects_role_missing_from_store(manager: MembershipManager, user, roles):
    ghost = Role(id=9999, name="Ghost", slug="ghost", level=99)

    with pytest.raises(RoleNotFound) as exc_info:
        await manager.attach(user, ghost)
    assert exc_info.value.identifier == 9999

    with pytest.raises(RoleNotFound):
        await manager.detach(user, ghost)

    assert await manager.current_roles(user) == []


@pytest.mark.asyncio
async def test_attach_rejects_unsaved_role(manager: MembershipManager, user, roles):
    with pytest.raises(RoleNotFound) as exc_info:
        await manager.attach(user, Role(name="Temp", slug="temp"))

    assert exc_info.value.identifier == "temp"
    assert await manager.current_roles(user) == []


@pytest.mark.asyncio
async def test_attach_rejects_overlong_principal_id(manager: MembershipManager, roles):
    with pytest.raises(ValueError):
        await manager.attach("x" * 256, "editor")

    assert await manager.attach("x" * 255, "editor") is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call, operation",
    [
        (lambda m, u: m.attach(u, "editor"), "roles.get_one"),
        (lambda m, u: m.attach(u, 1), "roles.get_by_id"),
        (lambda m, u: m.detach(u, "editor"), "roles.get_one"),
        (lambda m, u: m.detach_all(u), "role_user.remove_all"),
        (lambda m, u: m.current_roles(u), "role_user.roles_for"),
    ],
    ids=["attach-slug", "attach-id", "detach", "detach_all", "current_roles"],
)
async def test_store_failure_surfaces_as_store_unavailable(
    db: AsyncSession,
    manager: MembershipManager,
    user,
    monkeypatch: pytest.MonkeyPatch,
    call,
    operation,
):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "execute", broken_execute)

    with pytest.raises(StoreUnavailable) as exc_info:
        await call(manager, user)

    assert exc_info.value.operation == operation
    assert isinstance(exc_info.value.__cause__, OperationalError)
