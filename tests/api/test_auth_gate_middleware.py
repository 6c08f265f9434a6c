"""
Authorization gate over HTTP: redirects, forwarding and identity hand-off.
"""

import pytest

SESSION_HEADER = "session={}"


def cookie(value: str) -> dict:
    return {"Cookie": SESSION_HEADER.format(value)}


class TestGateRedirects:
    """Unsigned JSON cookies, as sent by the demo frontend"""

    def test_no_cookie_redirects_to_login(self, plain_client):
        """Admin page without a session goes to login with a callback"""
        response = plain_client.get("/admin/orders", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/login?callbackUrl=%2Fadmin%2Forders"

    def test_malformed_cookie_redirects_to_login(self, plain_client):
        response = plain_client.get("/admin/orders", headers=cookie("{not valid json"), follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"].startswith("/login?callbackUrl=")

    def test_deeply_nested_cookie_redirects_to_login(self, plain_client):
        """A cookie that blows the JSON parser's recursion limit is no session"""
        response = plain_client.get("/admin/orders", headers=cookie("[" * 3000), follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/login?callbackUrl=%2Fadmin%2Forders"

    def test_sample_section_uses_its_login_page(self, plain_client):
        response = plain_client.get("/sample/cart", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/sample/login?callbackUrl=%2Fsample%2Fcart"

    def test_buyer_on_admin_path_is_forbidden(self, plain_client):
        response = plain_client.get(
            "/admin/orders", headers=cookie('{"userId":"u1","role":"buyer"}'), follow_redirects=False
        )

        assert response.status_code == 307
        assert response.headers["location"] == "/forbidden"

    def test_admin_on_admin_path_is_forwarded(self, plain_client):
        """Forwarded to routing; no page exists so routing answers 404"""
        response = plain_client.get(
            "/admin/orders", headers=cookie('{"userId":"u2","role":"admin"}'), follow_redirects=False
        )

        assert response.status_code == 404

    def test_api_routes_are_gated_too(self, plain_client):
        response = plain_client.get("/api/cart", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/login?callbackUrl=%2Fapi%2Fcart"


class TestPublicPaths:

    @pytest.mark.parametrize("path", ["/login", "/sample/login", "/favicon.ico", "/_next/static/app.js"])
    def test_public_paths_are_not_redirected(self, plain_client, path):
        response = plain_client.get(path, follow_redirects=False)
        assert response.status_code == 404

    def test_health_is_public(self, plain_client):
        response = plain_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["csrf_store"] == "InMemoryCsrfTokenStore"


class TestIdentityHandOff:

    def test_gate_identity_reaches_routes(self, plain_client):
        response = plain_client.get(
            "/api/auth/session", headers=cookie('{"userId":"550e8400-e29b-41d4-a716-446655440101","role":"admin"}')
        )

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"
        assert response.json()["data"]["name"] == "Demo Admin"

    def test_signed_app_rejects_unsigned_cookie(self, client):
        response = client.get("/api/cart", headers=cookie('{"role":"buyer"}'), follow_redirects=False)
        assert response.status_code == 307


class TestSecurityHeaders:

    def test_headers_on_every_response(self, plain_client):
        response = plain_client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "X-Process-Time" in response.headers
        assert "Strict-Transport-Security" not in response.headers

    def test_headers_on_redirects(self, plain_client):
        response = plain_client.get("/admin", follow_redirects=False)
        assert response.headers["X-Frame-Options"] == "DENY"
