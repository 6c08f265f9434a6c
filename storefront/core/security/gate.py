# storefront/core/security/gate.py
"""
Authorization gate.

Decides, per request path and session credential, whether a request is
forwarded or redirected:

    Unclassified -> PublicBypass                      (forward)
                 -> NeedsAuth -> Unauthenticated      (redirect to login)
                              -> Authenticated -> RoleDenied (redirect to forbidden)
                                               -> Allowed    (forward)

The gate never raises for expected conditions; malformed credentials are
folded into Unauthenticated.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence
from urllib.parse import urlencode

from storefront.core.config import Settings
from storefront.core.security.authorize import has_role
from storefront.core.security.session import Role, SessionCodec, SessionIdentity

logger = logging.getLogger(__name__)


class GateOutcome(str, Enum):
    PUBLIC_BYPASS = "public_bypass"
    ALLOWED = "allowed"
    UNAUTHENTICATED = "unauthenticated"
    ROLE_DENIED = "role_denied"


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    identity: Optional[SessionIdentity] = None
    redirect_to: Optional[str] = None

    @property
    def forwards(self) -> bool:
        return self.outcome in (GateOutcome.PUBLIC_BYPASS, GateOutcome.ALLOWED)


@dataclass(frozen=True)
class RestrictedPrefix:
    """A path prefix reserved for a role"""
    prefix: str
    role: Role = Role.ADMIN
    # When True this prefix wins over a public prefix matching the same path
    overrides_public: bool = False

    def matches(self, path: str) -> bool:
        return path.startswith(self.prefix)


@dataclass
class PathRules:
    """Public and role-restricted prefixes, matched with starts-with"""
    public_prefixes: List[str] = field(default_factory=list)
    restricted_prefixes: List[RestrictedPrefix] = field(default_factory=list)

    def is_public(self, path: str) -> bool:
        if not any(path.startswith(prefix) for prefix in self.public_prefixes):
            return False
        return not any(r.overrides_public and r.matches(path) for r in self.restricted_prefixes)

    def restriction_for(self, path: str) -> Optional[RestrictedPrefix]:
        for restricted in self.restricted_prefixes:
            if restricted.matches(path):
                return restricted
        return None


class AuthorizationGate:
    """Classifies request paths and checks the decoded session against them"""

    def __init__(
        self,
        rules: PathRules,
        codec: SessionCodec,
        login_path: str = "/login",
        section_login_paths: Optional[Dict[str, str]] = None,
        forbidden_path: str = "/forbidden",
        callback_param: str = "callbackUrl",
    ):
        self.rules = rules
        self.codec = codec
        self.login_path = login_path
        self.section_login_paths = section_login_paths or {}
        self.forbidden_path = forbidden_path
        self.callback_param = callback_param

    @classmethod
    def from_settings(cls, settings: Settings, codec: SessionCodec) -> "AuthorizationGate":
        return cls(
            rules=build_rules(
                settings.PUBLIC_PATHS,
                settings.ADMIN_PATHS,
                settings.ADMIN_PATHS_OVERRIDE_PUBLIC,
            ),
            codec=codec,
            login_path=settings.LOGIN_PATH,
            section_login_paths=dict(settings.SECTION_LOGIN_PATHS),
            forbidden_path=settings.FORBIDDEN_PATH,
            callback_param=settings.CALLBACK_PARAM,
        )

    def login_path_for(self, path: str) -> str:
        """Login page of the site section the path belongs to"""
        for section_prefix, login_path in self.section_login_paths.items():
            if path.startswith(section_prefix):
                return login_path
        return self.login_path

    def login_redirect(self, path: str) -> str:
        return f"{self.login_path_for(path)}?{urlencode({self.callback_param: path})}"

    def evaluate(self, path: str, credential: Optional[str]) -> GateDecision:
        if self.rules.is_public(path):
            return GateDecision(GateOutcome.PUBLIC_BYPASS)

        identity = self.codec.decode(credential)
        if identity is None:
            logger.info(f"🔓 Unauthenticated request to {path}")
            return GateDecision(GateOutcome.UNAUTHENTICATED, redirect_to=self.login_redirect(path))

        restriction = self.rules.restriction_for(path)
        if restriction is not None and not has_role(identity, restriction.role):
            logger.warning(f"🚫 Role {identity.role.value} denied for {path}")
            return GateDecision(GateOutcome.ROLE_DENIED, identity=identity, redirect_to=self.forbidden_path)

        return GateDecision(GateOutcome.ALLOWED, identity=identity)


def build_rules(
    public_prefixes: Sequence[str],
    admin_prefixes: Sequence[str],
    admin_overrides_public: Sequence[str] = ()
) -> PathRules:
    """Shorthand for admin-only rule sets"""
    return PathRules(
        public_prefixes=list(public_prefixes),
        restricted_prefixes=[
            RestrictedPrefix(prefix, Role.ADMIN, overrides_public=prefix in admin_overrides_public)
            for prefix in admin_prefixes
        ],
    )
