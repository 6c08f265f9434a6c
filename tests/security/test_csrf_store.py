"""
Tests for the in-memory CSRF token store.
"""

import asyncio
import re

import pytest

from storefront.core.exceptions import CsrfInvalidError
from storefront.core.security.csrf import InMemoryCsrfTokenStore, generate_csrf_token


@pytest.fixture
def store():
    return InMemoryCsrfTokenStore()


class TestTokenGeneration:

    def test_token_is_64_hex_chars(self):
        token = generate_csrf_token()
        assert re.fullmatch(r"[0-9a-f]{64}", token)

    async def test_successive_tokens_are_distinct(self, store):
        first = await store.issue("s1")
        second = await store.issue("s1")
        assert first != second


class TestValidate:

    async def test_token_validates_exactly_once(self, store):
        token = await store.issue("s1")

        assert await store.validate("s1", token) is True
        assert await store.validate("s1", token) is False

    async def test_token_is_bound_to_its_session(self, store):
        token = await store.issue("session-a")
        await store.issue("session-b")

        assert await store.validate("session-b", token) is False
        # The failed cross-session attempt does not consume it
        assert await store.validate("session-a", token) is True

    @pytest.mark.parametrize("token", ["", None])
    async def test_empty_token_is_rejected(self, store, token):
        await store.issue("s1")
        assert await store.validate("s1", token) is False

    async def test_empty_token_rejected_for_unknown_session(self, store):
        assert await store.validate("never-issued", "") is False

    async def test_unknown_session_is_rejected(self, store):
        token = await store.issue("s1")
        assert await store.validate("s2", token) is False

    async def test_unknown_token_is_rejected(self, store):
        await store.issue("s1")
        assert await store.validate("s1", generate_csrf_token()) is False


class TestCapacity:

    async def test_eleventh_token_evicts_the_first(self, store):
        tokens = [await store.issue("s1") for _ in range(11)]

        assert await store.validate("s1", tokens[0]) is False
        for token in tokens[1:]:
            assert await store.validate("s1", token) is True

    async def test_eviction_is_fifo_not_lru(self, store):
        tokens = [await store.issue("s1") for _ in range(10)]
        # Consuming frees a slot; the next issue evicts nothing
        assert await store.validate("s1", tokens[1]) is True
        await store.issue("s1")

        assert store.token_count("s1") == 10
        assert await store.validate("s1", tokens[0]) is True

        # Back to nine live tokens, the oldest survivor is tokens[2]
        newer = await store.issue("s1")
        await store.issue("s1")

        assert await store.validate("s1", tokens[2]) is False
        assert await store.validate("s1", tokens[3]) is True
        assert await store.validate("s1", newer) is True

    async def test_capacity_is_per_session(self, store):
        a_first = await store.issue("a")
        for _ in range(15):
            await store.issue("b")

        assert store.token_count("b") == 10
        assert await store.validate("a", a_first) is True

    async def test_custom_capacity(self):
        store = InMemoryCsrfTokenStore(max_tokens=2)
        first = await store.issue("s1")
        second = await store.issue("s1")
        third = await store.issue("s1")

        assert await store.validate("s1", first) is False
        assert await store.validate("s1", second) is True
        assert await store.validate("s1", third) is True

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            InMemoryCsrfTokenStore(max_tokens=0)

    async def test_concurrent_issuance_respects_capacity(self, store):
        await asyncio.gather(*(store.issue("s1") for _ in range(50)))
        assert store.token_count("s1") == 10


class TestInvalidateAll:

    async def test_all_tokens_of_session_are_invalidated(self, store):
        tokens = [await store.issue("s1") for _ in range(3)]
        other = await store.issue("s2")

        await store.invalidate_all("s1")

        for token in tokens:
            assert await store.validate("s1", token) is False
        assert await store.validate("s2", other) is True

    async def test_unknown_session_is_a_noop(self, store):
        await store.invalidate_all("nobody")
        assert store.token_count("nobody") == 0

    async def test_reset_clears_every_session(self, store):
        a = await store.issue("a")
        b = await store.issue("b")

        await store.reset()

        assert await store.validate("a", a) is False
        assert await store.validate("b", b) is False


class TestRequireValid:

    async def test_valid_token_passes(self, store):
        token = await store.issue("s1")
        await store.require_valid("s1", token)

    async def test_replayed_token_raises(self, store):
        token = await store.issue("s1")
        await store.require_valid("s1", token)

        with pytest.raises(CsrfInvalidError) as exc_info:
            await store.require_valid("s1", token)
        assert exc_info.value.http_status == 403

    async def test_missing_token_raises(self, store):
        with pytest.raises(CsrfInvalidError):
            await store.require_valid("s1", None)


class FakeClock:

    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestExpiry:

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def store(self, clock):
        return InMemoryCsrfTokenStore(ttl_seconds=60, clock=clock)

    async def test_tokens_expire_after_ttl(self, store, clock):
        token = await store.issue("s1")
        clock.now += 60

        assert await store.validate("s1", token) is False
        assert store.token_count("s1") == 0

    async def test_issue_refreshes_ttl(self, store, clock):
        token = await store.issue("s1")
        clock.now += 50
        await store.issue("s1")
        clock.now += 50

        assert await store.validate("s1", token) is True

    async def test_expired_sessions_are_pruned_on_issue(self, store, clock):
        for session_id in ("a", "b", "c"):
            await store.issue(session_id)
        clock.now += 61

        await store.issue("d")

        assert store.session_count() == 1

    async def test_no_ttl_keeps_tokens(self, clock):
        store = InMemoryCsrfTokenStore(ttl_seconds=None, clock=clock)
        token = await store.issue("s1")
        clock.now += 10 ** 9

        assert await store.validate("s1", token) is True
