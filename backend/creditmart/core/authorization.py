"""Authorization Policy — the single place where role checks live.

Invariants:
    - Actor is built once per request by the identity dependency
    - Every admin-only operation calls require_admin (no ad hoc is_admin checks)
    - Banned callers never reach the order engine

Design Decisions:
    - Explicit Role claim instead of a boolean flag threaded through handlers
"""

from dataclasses import dataclass

from creditmart.core.domain_types import Role, UserId
from creditmart.core.errors import ErrorContext, ForbiddenError


@dataclass(frozen=True)
class Actor:
    """Resolved caller identity."""
    user_id: UserId
    role: Role = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def role_for(is_admin: bool) -> Role:
    return Role.ADMIN if is_admin else Role.CUSTOMER


def require_admin(actor: Actor) -> None:
    """Raise ForbiddenError unless the actor holds the admin role."""
    if not actor.is_admin:
        raise ForbiddenError(context=ErrorContext(user_id=actor.user_id))


def require_self_or_admin(actor: Actor, user_id: int) -> None:
    """Users may read their own resources; admins may read anyone's."""
    if actor.user_id != user_id and not actor.is_admin:
        raise ForbiddenError(
            "Access denied", context=ErrorContext(user_id=actor.user_id),
        )


def check_not_banned(user_id: int, banned: bool) -> None:
    if banned:
        raise ForbiddenError(
            "Account is banned", context=ErrorContext(user_id=user_id),
        )
