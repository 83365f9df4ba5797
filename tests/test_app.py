"""Tests for application wiring: health, errors and middleware."""

from techpinik.core.middleware import AdminGateMiddleware


class TestHealth:
    """Tests for the health and root endpoints."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["message"] == "Welcome to TechPinik API"

    def test_metrics(self, client):
        client.get("/api/health")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text


class TestMiddleware:
    """Tests for the middleware stack."""

    def test_security_headers(self, client):
        response = client.get("/api/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert "Strict-Transport-Security" in response.headers

    def test_request_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        response = client.get("/api/health")

        assert response.headers["X-Request-ID"]

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}


class TestAdminGate:
    """Tests for the admin cookie gate."""

    def test_protected_paths(self):
        gate = AdminGateMiddleware(app=None, cookie_name="token")

        assert gate.is_protected("/api/admin/stats")
        assert gate.is_protected("/api/admin/auth/me")
        assert not gate.is_protected("/api/admin/auth/login")
        assert not gate.is_protected("/api/products")
        assert not gate.is_protected("/api/stats")

    def test_login_reachable_without_cookie(self, client):
        response = client.post("/api/admin/auth/login", json={})

        # Reaches request validation rather than the gate
        assert response.status_code == 422

    def test_preflight_not_blocked(self, client):
        response = client.options(
            "/api/admin/stats",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 200
