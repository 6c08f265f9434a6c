"""
Authorization gate middleware.

Runs the AuthorizationGate in front of every route: public paths pass
through, requests without a decodable session are redirected to login,
requests lacking the role of a restricted path are redirected to the
forbidden page.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from storefront.core.security.gate import AuthorizationGate

logger = logging.getLogger(__name__)


class AuthGateMiddleware:
    """Installs an AuthorizationGate as an HTTP middleware"""

    def __init__(self, gate: AuthorizationGate, cookie_name: str = "session"):
        self.gate = gate
        self.cookie_name = cookie_name

    async def __call__(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        decision = self.gate.evaluate(path, request.cookies.get(self.cookie_name))

        if not decision.forwards:
            return RedirectResponse(url=decision.redirect_to, status_code=307)

        # Downstream dependencies reuse the decoded identity
        request.state.session = decision.identity
        return await call_next(request)
