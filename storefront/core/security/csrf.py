# storefront/core/security/csrf.py
"""
CSRF protection, double-submit pattern.

The server issues random tokens bound to a session. A mutating request must
echo one of them back (X-CSRF-Token header). Each token is single-use, at
most ``max_tokens`` live per session (oldest evicted first), and a token
only validates against the session it was issued to.

Two backends share the same interface:
- InMemoryCsrfTokenStore: process-local, lost on restart
- RedisCsrfTokenStore: shared across processes via Redis sorted sets
"""

import logging
import secrets
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Dict, Optional

from storefront.core.config import Settings
from storefront.core.exceptions import CsrfInvalidError
from storefront.services.redis_service import RedisService

logger = logging.getLogger(__name__)

CSRF_TOKEN_BYTES = 32  # 256 bits, rendered as 64 hex chars
DEFAULT_MAX_TOKENS = 10
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})


def generate_csrf_token() -> str:
    return secrets.token_hex(CSRF_TOKEN_BYTES)


class CsrfTokenStore(ABC):
    """Issues, validates and invalidates per-session CSRF tokens"""

    def __init__(self, max_tokens: int = DEFAULT_MAX_TOKENS):
        if max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")
        self.max_tokens = max_tokens

    @abstractmethod
    async def issue(self, session_id: str) -> str:
        """Generate a token, register it for the session and return it"""

    @abstractmethod
    async def validate(self, session_id: str, token: Optional[str]) -> bool:
        """
        Check a token and consume it.

        Returns True exactly once per issued token; False for empty tokens,
        unknown sessions, tokens of other sessions, and consumed or evicted
        tokens.
        """

    @abstractmethod
    async def invalidate_all(self, session_id: str) -> None:
        """Drop every token of the session. No-op for unknown sessions."""

    @abstractmethod
    async def reset(self) -> None:
        """Drop every token of every session"""

    async def require_valid(self, session_id: str, token: Optional[str]) -> None:
        """
        Validate and consume a token.

        Raises:
            CsrfInvalidError: token did not validate
        """
        if not await self.validate(session_id, token):
            logger.warning(f"🛡️ CSRF validation failed for session {session_id[:8]}...")
            raise CsrfInvalidError()


class InMemoryCsrfTokenStore(CsrfTokenStore):
    """
    Process-local token store.

    Each session maps to an insertion-ordered set (OrderedDict with unused
    values). The whole mapping is guarded by a lock so threaded hosts keep
    the capacity bound.

    Like the Redis sets, a session's tokens expire ``ttl_seconds`` after its
    last issue. Expired sessions are pruned on issue and ignored on validate.
    """

    def __init__(
        self,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        ttl_seconds: Optional[float] = 24 * 60 * 60,
        clock: Callable[[], float] = time.monotonic
    ):
        super().__init__(max_tokens)
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._tokens: Dict[str, "OrderedDict[str, None]"] = {}
        self._issued_at: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _is_expired(self, session_id: str, now: float) -> bool:
        if self.ttl_seconds is None:
            return False
        return now - self._issued_at.get(session_id, now) >= self.ttl_seconds

    def _prune_expired(self, now: float) -> None:
        # Caller holds the lock
        for session_id in [s for s in self._tokens if self._is_expired(s, now)]:
            self._tokens.pop(session_id, None)
            self._issued_at.pop(session_id, None)

    async def issue(self, session_id: str) -> str:
        token = generate_csrf_token()

        with self._lock:
            now = self._clock()
            self._prune_expired(now)
            tokens = self._tokens.setdefault(session_id, OrderedDict())
            while len(tokens) >= self.max_tokens:
                tokens.popitem(last=False)
            tokens[token] = None
            self._issued_at[session_id] = now

        logger.debug(f"Issued CSRF token for session {session_id[:8]}...")
        return token

    async def validate(self, session_id: str, token: Optional[str]) -> bool:
        if not token:
            return False

        with self._lock:
            tokens = self._tokens.get(session_id)
            if tokens is None or self._is_expired(session_id, self._clock()):
                return False
            if token not in tokens:
                return False
            del tokens[token]
            return True

    async def invalidate_all(self, session_id: str) -> None:
        with self._lock:
            self._tokens.pop(session_id, None)
            self._issued_at.pop(session_id, None)
        logger.debug(f"Invalidated CSRF tokens for session {session_id[:8]}...")

    async def reset(self) -> None:
        with self._lock:
            self._tokens.clear()
            self._issued_at.clear()

    def token_count(self, session_id: str) -> int:
        with self._lock:
            if self._is_expired(session_id, self._clock()):
                return 0
            return len(self._tokens.get(session_id, ()))

    def session_count(self) -> int:
        with self._lock:
            return len(self._tokens)


class RedisCsrfTokenStore(CsrfTokenStore):
    """
    Shared token store.

    One sorted set per session, scored by issue time in nanoseconds, so
    trimming by rank evicts the oldest tokens. ZREM makes consumption atomic
    across processes. Redis failures make validation fail closed.
    """

    def __init__(
        self,
        redis_service: RedisService,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        ttl_seconds: Optional[int] = 24 * 60 * 60,
        key_prefix: str = "csrf:"
    ):
        super().__init__(max_tokens)
        self.redis = redis_service
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    async def issue(self, session_id: str) -> str:
        token = generate_csrf_token()
        stored = await self.redis.zadd_capped(
            self._key(session_id),
            token,
            score=time.time_ns(),
            max_members=self.max_tokens,
            ttl=self.ttl_seconds,
        )
        if not stored:
            # The token will simply never validate
            logger.error(f"CSRF token for session {session_id[:8]}... was not stored")
        return token

    async def validate(self, session_id: str, token: Optional[str]) -> bool:
        if not token:
            return False
        removed = await self.redis.zrem(self._key(session_id), token)
        return removed > 0

    async def invalidate_all(self, session_id: str) -> None:
        await self.redis.delete(self._key(session_id))

    async def reset(self) -> None:
        keys = await self.redis.scan_keys(f"{self.key_prefix}*")
        if keys:
            await self.redis.delete(*keys)
        logger.info(f"🧹 Cleared {len(keys)} CSRF token sets")

    async def token_count(self, session_id: str) -> int:
        return await self.redis.zcard(self._key(session_id))


def create_csrf_store(settings: Settings, redis_service: Optional[RedisService] = None) -> CsrfTokenStore:
    """Pick the store backend: Redis when a connected service is given, memory otherwise"""
    if redis_service is not None and redis_service.is_connected():
        logger.info("🔐 Using Redis-backed CSRF token store")
        return RedisCsrfTokenStore(
            redis_service,
            max_tokens=settings.CSRF_MAX_TOKENS_PER_SESSION,
            ttl_seconds=settings.CSRF_TOKEN_TTL_SECONDS,
        )

    if settings.REDIS_URL:
        logger.warning("⚠️ REDIS_URL set but Redis unavailable - CSRF tokens are process-local")
    logger.info("🔐 Using in-memory CSRF token store")
    return InMemoryCsrfTokenStore(
        max_tokens=settings.CSRF_MAX_TOKENS_PER_SESSION,
        ttl_seconds=settings.CSRF_TOKEN_TTL_SECONDS,
    )
