# storefront/core/security/session.py
"""
Session credential handling.

The session travels in a cookie whose value is a JSON object carrying at
least ``role``. When a secret key is configured the JSON is signed with
itsdangerous so tampered-but-parseable credentials are rejected as well.

Decoding is fail-closed: any problem with the credential means "no session".
"""

import json
import logging
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

from itsdangerous import BadData, URLSafeSerializer
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


class Role(str, Enum):
    BUYER = "buyer"
    ADMIN = "admin"


class SessionIdentity(BaseModel):
    """Identity decoded from the session cookie"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: Optional[str] = Field(default=None, alias="userId")
    role: Role
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")

    @property
    def csrf_key(self) -> str:
        """Key of the CSRF token set bound to this session"""
        return self.session_id or self.user_id or ""

    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= expires_at

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SessionCodec:
    """Encodes identities into cookie values and decodes them back"""

    def __init__(self, secret_key: Optional[str] = None, salt: str = "storefront-session"):
        self._serializer = URLSafeSerializer(secret_key, salt=salt) if secret_key else None

    @property
    def signed(self) -> bool:
        return self._serializer is not None

    def encode(self, identity: SessionIdentity) -> str:
        payload = identity.to_payload()
        if self._serializer is not None:
            return self._serializer.dumps(payload)
        return json.dumps(payload, separators=(",", ":"))

    def decode(self, raw: Optional[str]) -> Optional[SessionIdentity]:
        """
        Decode a cookie value into an identity.

        Returns None for a missing or empty value, unparseable JSON, a bad
        signature, a non-object payload, a missing or unknown role, or an
        expired credential. Never raises.
        """
        if not raw:
            return None

        try:
            if self._serializer is not None:
                data = self._serializer.loads(raw)
            else:
                data = json.loads(raw)
        except BadData:
            logger.warning("🔒 Rejected session cookie with bad signature")
            return None
        except (ValueError, TypeError, RecursionError):
            logger.debug("Session cookie is not valid JSON")
            return None

        if not isinstance(data, dict) or not data.get("role"):
            return None

        try:
            identity = SessionIdentity.model_validate(data)
        except PydanticValidationError:
            logger.debug("Session cookie payload failed validation")
            return None

        if identity.is_expired():
            logger.info("⏰ Session cookie expired")
            return None

        return identity


# Demo accounts used by the mock login flow
DEMO_USERS: Dict[Role, Dict[str, str]] = {
    Role.BUYER: {
        "user_id": "550e8400-e29b-41d4-a716-446655440100",
        "name": "Demo Buyer",
    },
    Role.ADMIN: {
        "user_id": "550e8400-e29b-41d4-a716-446655440101",
        "name": "Demo Admin",
    },
}


def generate_session_id() -> str:
    """64 hex chars (256 bits) from the OS CSPRNG"""
    return secrets.token_hex(32)


def create_session(role: Role, max_age_seconds: int = 24 * 60 * 60) -> SessionIdentity:
    """Mint a fresh identity for one of the demo accounts"""
    return SessionIdentity(
        user_id=DEMO_USERS[role]["user_id"],
        role=role,
        session_id=generate_session_id(),
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=max_age_seconds),
    )


def get_demo_user_name(role: Role) -> str:
    return DEMO_USERS[role]["name"]
