"""
Tests for session credential encoding and fail-closed decoding.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from storefront.core.security.session import (
    DEMO_USERS,
    Role,
    SessionCodec,
    SessionIdentity,
    create_session,
    get_demo_user_name,
)
from tests.conftest import TEST_SECRET


@pytest.fixture
def plain_codec():
    return SessionCodec()


class TestPlainCodec:

    def test_decodes_minimal_payload(self, plain_codec):
        identity = plain_codec.decode('{"role":"buyer"}')

        assert identity is not None
        assert identity.role == Role.BUYER
        assert identity.user_id is None

    def test_decodes_full_payload(self, plain_codec):
        identity = plain_codec.decode(
            json.dumps({"userId": "u1", "role": "admin", "sessionId": "abc"})
        )

        assert identity.user_id == "u1"
        assert identity.role == Role.ADMIN
        assert identity.csrf_key == "abc"

    @pytest.mark.parametrize("raw", [
        None,
        "",
        "{not valid json",
        "null",
        "[1, 2]",
        '"buyer"',
        "{}",
        '{"userId": "u1"}',
        '{"role": ""}',
        '{"role": "superuser"}',
    ])
    def test_malformed_credentials_mean_no_session(self, plain_codec, raw):
        assert plain_codec.decode(raw) is None

    @pytest.mark.parametrize("raw", ["[" * 3000, '{"a":' * 3000])
    def test_deeply_nested_json_means_no_session(self, plain_codec, raw):
        assert plain_codec.decode(raw) is None

    def test_encode_is_compact_json(self, plain_codec):
        identity = SessionIdentity(userId="u1", role=Role.BUYER)
        assert plain_codec.encode(identity) == '{"userId":"u1","role":"buyer"}'

    def test_round_trip(self, plain_codec):
        identity = create_session(Role.ADMIN)
        assert plain_codec.decode(plain_codec.encode(identity)) == identity


class TestSignedCodec:

    def test_round_trip(self):
        codec = SessionCodec(TEST_SECRET)
        identity = create_session(Role.BUYER)

        encoded = codec.encode(identity)

        assert codec.signed
        assert "{" not in encoded
        assert codec.decode(encoded) == identity

    def test_tampered_value_is_rejected(self):
        codec = SessionCodec(TEST_SECRET)
        encoded = codec.encode(SessionIdentity(userId="u1", role=Role.BUYER))
        tampered = encoded[:-2] + ("AA" if not encoded.endswith("AA") else "BB")

        assert codec.decode(tampered) is None

    def test_other_secret_is_rejected(self):
        encoded = SessionCodec("other-secret").encode(SessionIdentity(role=Role.ADMIN))
        assert SessionCodec(TEST_SECRET).decode(encoded) is None

    def test_unsigned_json_is_rejected(self):
        assert SessionCodec(TEST_SECRET).decode('{"role":"admin"}') is None


class TestExpiry:

    def test_expired_credential_is_no_session(self, plain_codec):
        identity = SessionIdentity(
            role=Role.BUYER,
            expiresAt=datetime.now(timezone.utc) - timedelta(seconds=1),
        )
        assert plain_codec.decode(plain_codec.encode(identity)) is None

    def test_naive_timestamp_is_treated_as_utc(self, plain_codec):
        raw = json.dumps({"role": "buyer", "expiresAt": "2000-01-01T00:00:00"})
        assert plain_codec.decode(raw) is None

    def test_future_expiry_is_accepted(self, plain_codec):
        identity = SessionIdentity(
            role=Role.BUYER,
            expiresAt=datetime.now(timezone.utc) + timedelta(hours=1),
        )
        assert plain_codec.decode(plain_codec.encode(identity)) is not None


class TestCreateSession:

    def test_uses_demo_account(self):
        identity = create_session(Role.ADMIN, max_age_seconds=60)

        assert identity.user_id == DEMO_USERS[Role.ADMIN]["user_id"]
        assert len(identity.session_id) == 64
        assert not identity.is_expired()
        assert identity.expires_at <= datetime.now(timezone.utc) + timedelta(seconds=60)

    def test_session_ids_are_unique(self):
        assert create_session(Role.BUYER).session_id != create_session(Role.BUYER).session_id

    def test_csrf_key_falls_back_to_user_id(self):
        assert SessionIdentity(userId="u1", role=Role.BUYER).csrf_key == "u1"

    def test_demo_user_names(self):
        assert get_demo_user_name(Role.BUYER) == "Demo Buyer"
        assert get_demo_user_name(Role.ADMIN) == "Demo Admin"
