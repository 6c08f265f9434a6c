"""
FastAPI dependencies shared by the routers.

The gate middleware already redirected unauthenticated requests; these
dependencies re-check the session so a route is never reachable without
one, even if the gate is not installed.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, Request

from storefront.core.config import Settings
from storefront.core.exceptions import UnauthorizedError
from storefront.core.security.authorize import USE_CASE_AUTHORIZATION, authorize
from storefront.core.security.csrf import SAFE_METHODS, CsrfTokenStore
from storefront.core.security.session import SessionCodec, SessionIdentity

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_codec(request: Request) -> SessionCodec:
    return request.app.state.session_codec


def get_csrf_store(request: Request) -> CsrfTokenStore:
    return request.app.state.csrf_store


def get_optional_session(
    request: Request,
    settings: Settings = Depends(get_settings),
    codec: SessionCodec = Depends(get_session_codec),
) -> Optional[SessionIdentity]:
    identity = getattr(request.state, "session", None)
    if identity is not None:
        return identity
    return codec.decode(request.cookies.get(settings.SESSION_COOKIE_NAME))


def get_current_session(
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
) -> SessionIdentity:
    if identity is None:
        raise UnauthorizedError()
    return identity


def require_use_case(use_case: str) -> Callable[..., SessionIdentity]:
    """Dependency factory enforcing the role requirement of a use case"""
    # Fail at import time on typos
    required_roles = USE_CASE_AUTHORIZATION[use_case]

    def dependency(identity: SessionIdentity = Depends(get_current_session)) -> SessionIdentity:
        return authorize(identity, required_roles)

    return dependency


async def verify_csrf_token(
    request: Request,
    identity: SessionIdentity = Depends(get_current_session),
    settings: Settings = Depends(get_settings),
    store: CsrfTokenStore = Depends(get_csrf_store),
) -> None:
    """Consume the echoed CSRF token of a mutating request"""
    if request.method.upper() in SAFE_METHODS:
        return
    token = request.headers.get(settings.CSRF_HEADER_NAME)
    await store.require_valid(identity.csrf_key, token)
