"""
Tests for the shared route dependencies.
"""

import pytest

from storefront.api.dependencies import get_current_session, require_use_case
from storefront.core.exceptions import ForbiddenError, UnauthorizedError


class TestGetCurrentSession:

    def test_missing_session_is_unauthorized(self):
        with pytest.raises(UnauthorizedError) as exc_info:
            get_current_session(None)
        assert exc_info.value.http_status == 401

    def test_returns_identity(self, buyer_identity):
        assert get_current_session(buyer_identity) is buyer_identity


class TestRequireUseCase:

    def test_unknown_use_case_fails_at_definition(self):
        with pytest.raises(KeyError):
            require_use_case("launch_rockets")

    def test_enforces_roles(self, buyer_identity, admin_identity):
        dependency = require_use_case("delete_product")

        assert dependency(admin_identity) is admin_identity
        with pytest.raises(ForbiddenError):
            dependency(buyer_identity)
