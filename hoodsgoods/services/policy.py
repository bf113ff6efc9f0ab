from typing import Iterable

from hoodsgoods.errors import AuthorizationError
from hoodsgoods.models import User, UserRole


# Roles allowed to perform each guarded action. Admins may act as sellers.
POLICY: dict[str, frozenset[UserRole]] = {
    "cart": frozenset({UserRole.BUYER, UserRole.SELLER, UserRole.ADMIN}),
    "order.create": frozenset({UserRole.BUYER, UserRole.SELLER, UserRole.ADMIN}),
    "store.create": frozenset({UserRole.BUYER, UserRole.SELLER, UserRole.ADMIN}),
    "store.manage": frozenset({UserRole.SELLER, UserRole.ADMIN}),
    "product.manage": frozenset({UserRole.SELLER, UserRole.ADMIN}),
    "order.fulfil": frozenset({UserRole.SELLER, UserRole.ADMIN}),
    "moderate": frozenset({UserRole.ADMIN}),
}


def allowed_roles(action: str) -> frozenset[UserRole]:
    try:
        return POLICY[action]
    except KeyError:
        raise ValueError(f"unknown action: {action}")


def authorize(user: User, action: str) -> User:
    """Raise AuthorizationError unless ``user`` may perform ``action``."""
    if not user.is_active:
        raise AuthorizationError("Account is deactivated")
    roles = allowed_roles(action)
    if user.role not in roles:
        raise AuthorizationError(
            f"User role '{user.role.value}' is not authorized to access this resource. "
            f"Required roles: {_join(roles)}."
        )
    return user


def _join(roles: Iterable[UserRole]) -> str:
    return ", ".join(sorted(r.value for r in roles))
