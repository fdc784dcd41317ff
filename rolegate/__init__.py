"""
Role-based membership and evaluation engine.

Grants, revokes and evaluates leveled roles for principals (users, service
accounts, anything with an id) on top of an async SQLAlchemy store.

To use it:

1. Create the tables:
   engine = create_engine(get_settings().database)
   await init_db(engine)

2. Seed roles (an administrative task):
   await RoleRepository(db).create(name="Editor", slug="editor", level=5)

3. Attach roles and check them:
   gate = RoleGate(db)
   await gate.memberships.attach(user, "editor")
   await gate.evaluator.has(user, "admin|editor")          # ANY
   await gate.evaluator.has(user, "admin,editor", "all")   # ALL
   await gate.evaluator.effective_level(user)              # 5

Models:
- Role: slug, name, description, level
- Membership: links a principal to a role (unique per pair)
"""

from .core.config import Settings, get_settings
from .core.errors import (
    RoleGateError,
    RoleNotFound,
    InvalidMode,
    NoRoleAssigned,
    StoreUnavailable,
)
from .core.interfaces import MatchMode
from .models import Role, Membership
from .models.database import create_engine, create_session_factory, session_scope, init_db, close_db
from .repositories import RoleRepository, MembershipRepository
from .services import (
    AuthorizationEvaluator,
    MembershipManager,
    PrincipalLocks,
    PrincipalRoles,
    RoleGate,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "get_settings",
    "RoleGateError",
    "RoleNotFound",
    "InvalidMode",
    "NoRoleAssigned",
    "StoreUnavailable",
    "MatchMode",
    "Role",
    "Membership",
    "create_engine",
    "create_session_factory",
    "session_scope",
    "init_db",
    "close_db",
    "RoleRepository",
    "MembershipRepository",
    "AuthorizationEvaluator",
    "MembershipManager",
    "PrincipalLocks",
    "PrincipalRoles",
    "RoleGate",
]
