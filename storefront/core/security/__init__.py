"""
Security layer of the storefront.

- CSRF token store (double-submit pattern, per-session single-use tokens)
- Session credential codec (fail-closed decoding)
- Authorization gate (public / role-restricted path classification)
- Role-based authorization checks

Route handlers and middleware consume these; business logic never does.
"""

from .csrf import (
    CsrfTokenStore,
    InMemoryCsrfTokenStore,
    RedisCsrfTokenStore,
    create_csrf_store,
    generate_csrf_token,
)
from .session import (
    Role,
    SessionCodec,
    SessionIdentity,
    create_session,
    get_demo_user_name,
)
from .gate import (
    AuthorizationGate,
    GateDecision,
    GateOutcome,
    PathRules,
    RestrictedPrefix,
)
from .authorize import authorize, has_role

__all__ = [
    'CsrfTokenStore',
    'InMemoryCsrfTokenStore',
    'RedisCsrfTokenStore',
    'create_csrf_store',
    'generate_csrf_token',
    'Role',
    'SessionCodec',
    'SessionIdentity',
    'create_session',
    'get_demo_user_name',
    'AuthorizationGate',
    'GateDecision',
    'GateOutcome',
    'PathRules',
    'RestrictedPrefix',
    'authorize',
    'has_role',
]
