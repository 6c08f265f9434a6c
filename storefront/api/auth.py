"""
Authentication routes: mock login/logout, session lookup, CSRF token issuance.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from slowapi import Limiter

from storefront.api.dependencies import (
    get_csrf_store,
    get_current_session,
    get_optional_session,
    get_session_codec,
    get_settings,
)
from storefront.core.audit import AuditAction, record_audit
from storefront.core.config import Settings
from storefront.core.responses import success
from storefront.core.security.csrf import CsrfTokenStore
from storefront.core.security.session import (
    Role,
    SessionCodec,
    SessionIdentity,
    create_session,
    get_demo_user_name,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: Optional[str] = None


def _set_csrf_cookie(response: Response, token: str, settings: Settings) -> None:
    # Readable by client scripts so they can echo it in the header
    response.set_cookie(
        settings.CSRF_COOKIE_NAME,
        token,
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=False,
        secure=settings.is_production,
        samesite="strict",
        path="/",
    )


def create_login_router(limiter: Limiter, login_rate_limit: str) -> APIRouter:
    """
    Login lives on its own router so each app decorates it with its own
    limiter and limit.
    """
    login_router = APIRouter(prefix="/api/auth", tags=["auth"])

    @login_router.post("/login")
    @limiter.limit(login_rate_limit)
    async def login(
        request: Request,
        response: Response,
        payload: Optional[LoginRequest] = Body(default=None),
        previous: Optional[SessionIdentity] = Depends(get_optional_session),
        settings: Settings = Depends(get_settings),
        codec: SessionCodec = Depends(get_session_codec),
        store: CsrfTokenStore = Depends(get_csrf_store),
    ):
        """
        Demo login. An email containing "admin" logs in as the admin account,
        anything else (including an empty body) as the buyer account.
        """
        email = payload.email if payload else None
        return await _login(response, email, previous, settings, codec, store)

    return login_router


async def _login(
    response: Response,
    email: Optional[str],
    previous: Optional[SessionIdentity],
    settings: Settings,
    codec: SessionCodec,
    store: CsrfTokenStore,
):
    role = Role.ADMIN if email and "admin" in email else Role.BUYER

    # Session rotation: tokens of the replaced session die with it
    if previous is not None:
        await store.invalidate_all(previous.csrf_key)

    identity = create_session(role, settings.SESSION_MAX_AGE_SECONDS)
    csrf_token = await store.issue(identity.csrf_key)

    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        codec.encode(identity),
        max_age=settings.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    _set_csrf_cookie(response, csrf_token, settings)

    logger.info(f"🔐 Login as {role.value}, session {identity.csrf_key[:8]}...")
    await record_audit(AuditAction.LOGIN, identity.user_id, "session", identity.csrf_key[:8])

    return success({
        "userId": identity.user_id,
        "role": identity.role.value,
        "name": get_demo_user_name(role),
        "csrfToken": csrf_token,
    })


async def _logout(
    identity: Optional[SessionIdentity],
    settings: Settings,
    store: CsrfTokenStore,
) -> RedirectResponse:
    if identity is not None:
        await store.invalidate_all(identity.csrf_key)
        await record_audit(AuditAction.LOGOUT, identity.user_id or "unknown", "session", identity.csrf_key[:8])
        logger.info(f"👋 Logout, session {identity.csrf_key[:8]}...")

    response = RedirectResponse(url=settings.LOGOUT_REDIRECT_PATH, status_code=303)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")
    response.delete_cookie(settings.CSRF_COOKIE_NAME, path="/")
    return response


@router.post("/logout")
async def logout(
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
    settings: Settings = Depends(get_settings),
    store: CsrfTokenStore = Depends(get_csrf_store),
):
    return await _logout(identity, settings, store)


@router.get("/logout")
async def logout_via_get(
    identity: Optional[SessionIdentity] = Depends(get_optional_session),
    settings: Settings = Depends(get_settings),
    store: CsrfTokenStore = Depends(get_csrf_store),
):
    return await _logout(identity, settings, store)


@router.get("/session")
async def current_session(identity: SessionIdentity = Depends(get_current_session)):
    return success({
        "userId": identity.user_id,
        "role": identity.role.value,
        "name": get_demo_user_name(identity.role),
    })


@router.get("/csrf")
async def issue_csrf_token(
    response: Response,
    identity: SessionIdentity = Depends(get_current_session),
    settings: Settings = Depends(get_settings),
    store: CsrfTokenStore = Depends(get_csrf_store),
):
    """Issue a fresh single-use token for the next mutating request"""
    token = await store.issue(identity.csrf_key)
    _set_csrf_cookie(response, token, settings)
    return success({"csrfToken": token})
