# storefront/core/security/authorize.py
"""Role-based authorization checks. The admin role includes buyer."""

import logging
from typing import Dict, FrozenSet, Iterable, Optional, Union

from storefront.core.exceptions import ForbiddenError
from storefront.core.security.session import Role, SessionIdentity

logger = logging.getLogger(__name__)

ROLE_HIERARCHY: Dict[Role, FrozenSet[Role]] = {
    Role.BUYER: frozenset({Role.BUYER}),
    Role.ADMIN: frozenset({Role.ADMIN, Role.BUYER}),
}

# Required roles per use case
USE_CASE_AUTHORIZATION: Dict[str, FrozenSet[Role]] = {
    # Catalog
    "get_products": frozenset({Role.BUYER, Role.ADMIN}),
    "get_product_by_id": frozenset({Role.BUYER, Role.ADMIN}),
    "create_product": frozenset({Role.ADMIN}),
    "update_product": frozenset({Role.ADMIN}),
    "delete_product": frozenset({Role.ADMIN}),
    # Cart
    "get_cart": frozenset({Role.BUYER}),
    "add_to_cart": frozenset({Role.BUYER}),
    "update_cart_item": frozenset({Role.BUYER}),
    "remove_from_cart": frozenset({Role.BUYER}),
    # Orders
    "get_orders": frozenset({Role.BUYER, Role.ADMIN}),
    "get_order_by_id": frozenset({Role.BUYER, Role.ADMIN}),
    "create_order": frozenset({Role.BUYER}),
    "update_order_status": frozenset({Role.ADMIN}),
}


def has_role(identity: SessionIdentity, required_role: Role) -> bool:
    return required_role in ROLE_HIERARCHY[identity.role]


def authorize(
    identity: Optional[SessionIdentity],
    required_roles: Union[Role, Iterable[Role]]
) -> SessionIdentity:
    """
    Ensure the identity holds at least one of the required roles.

    Raises:
        ForbiddenError: identity is missing or holds none of the roles
    """
    if identity is None:
        raise ForbiddenError("Session is invalid")

    roles = [required_roles] if isinstance(required_roles, Role) else list(required_roles)
    if not any(has_role(identity, role) for role in roles):
        logger.info(f"🚫 Role {identity.role.value} denied, requires one of {sorted(r.value for r in roles)}")
        raise ForbiddenError()

    return identity
