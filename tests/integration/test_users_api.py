"""
Integration tests for users, login and the operational endpoints.

Tests cover:
- User creation rules (unique username, minimum lengths)
- User listing with owned blogs and no password hashes
- Login success and failure
- Test-only reset endpoint
- Health, readiness and metrics
"""

from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from server.src.config import Settings
from server.src import main as server_main
from server.src.main import create_app
from tests.conftest import INITIAL_BLOGS, ROOT_USER, TEST_SECRET


class TestCreatingUsers:
    """Tests for POST /api/users."""

    def test_creation_succeeds_with_fresh_username(self, client):
        response = client.post(
            "/api/users",
            json={"username": "mluukkai", "name": "Matti Luukkainen", "password": "salainen"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "mluukkai"
        assert body["blogs"] == []
        assert "password" not in body
        assert "password_hash" not in body

    def test_duplicate_username_returns_400(self, client, token):
        """Test the root user cannot be registered twice."""
        response = client.post("/api/users", json=ROOT_USER)

        assert response.status_code == 400
        assert "expected `username` to be unique" in response.json()["error"]
        assert len(client.get("/api/users").json()) == 1

    def test_short_username_returns_400(self, client):
        response = client.post("/api/users", json={"username": "ro", "password": "sekret"})

        assert response.status_code == 400
        assert "username" in response.json()["error"]

    def test_short_password_returns_400(self, client):
        """Test a password under three characters is rejected and nothing stored."""
        response = client.post("/api/users", json={"username": "someone", "password": "pw"})

        assert response.status_code == 400
        assert "password" in response.json()["error"]
        assert client.get("/api/users").json() == []

    def test_missing_password_returns_400(self, client):
        response = client.post("/api/users", json={"username": "someone"})

        assert response.status_code == 400
        assert "password" in response.json()["error"]


class TestListingUsers:
    """Tests for GET /api/users."""

    def test_users_list_owned_blogs(self, client, seeded_blogs):
        users = client.get("/api/users").json()

        assert len(users) == 1
        titles = sorted(blog["title"] for blog in users[0]["blogs"])
        assert titles == sorted(blog["title"] for blog in INITIAL_BLOGS)

    def test_password_hash_is_never_exposed(self, client, token):
        user = client.get("/api/users").json()[0]

        assert "password_hash" not in user
        assert "passwordHash" not in user


class TestLogin:
    """Tests for POST /api/login."""

    def test_login_returns_token_and_user(self, client, token):
        response = client.post(
            "/api/login",
            json={"username": ROOT_USER["username"], "password": ROOT_USER["password"]}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["username"] == "root"
        assert body["name"] == "Superuser"

    def test_wrong_password_returns_401(self, client, token):
        response = client.post("/api/login", json={"username": "root", "password": "wrong"})

        assert response.status_code == 401
        assert response.json()["error"] == "invalid username or password"

    def test_unknown_user_returns_401(self, client):
        response = client.post("/api/login", json={"username": "nobody", "password": "sekret"})

        assert response.status_code == 401
        assert response.json()["error"] == "invalid username or password"


class TestTestingReset:
    """Tests for POST /api/testing/reset."""

    def test_reset_empties_every_collection(self, client, seeded_blogs):
        client.post("/api/persons", json={"name": "Arto Hellas", "number": "040-123456"})

        response = client.post("/api/testing/reset")

        assert response.status_code == 204
        assert client.get("/api/bloglist").json() == []
        assert client.get("/api/persons").json() == []
        assert client.get("/api/users").json() == []

    def test_reset_is_absent_outside_test_environment(self):
        """Test production apps do not mount the reset endpoint."""
        settings = Settings(
            _env_file=None,
            environment="production",
            jwt_secret_key=TEST_SECRET,
            log_level="WARNING",
            log_format="text",
            cors_enabled=False,
        )
        app = create_app(settings=settings, database=AsyncMongoMockClient()["bloglist_prod"])

        with TestClient(app) as client:
            response = client.post("/api/testing/reset")

        assert response.status_code == 404
        assert response.json()["error"] == "unknown endpoint"


class TestOperationalEndpoints:
    """Tests for health, readiness, metrics and unknown paths."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["environment"] == "test"

    def test_ready_pings_database(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "healthy"

    def test_unknown_endpoint(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"error": "unknown endpoint"}

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/api/bloglist", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_metrics_count_requests_and_mutations(self, client, seeded_blogs):
        """Test blog creations show up in the Prometheus exposition."""
        client.get("/api/bloglist")

        body = client.get("/metrics").text

        assert "http_requests_total" in body
        assert 'entry_mutations_total{collection="blogs",operation="create"} 2.0' in body
        assert 'endpoint="/api/bloglist"' in body

    def test_metrics_label_routes_by_template(self, client, seeded_blogs):
        """Test ids and unknown URLs do not create new endpoint labels."""
        for blog in seeded_blogs:
            client.get(f"/api/bloglist/{blog['id']}")
        for n in range(5):
            client.get(f"/scan-{n}")

        body = client.get("/metrics").text
        endpoints = {
            line.split('endpoint="')[1].split('"')[0]
            for line in body.splitlines()
            if line.startswith("http_requests_total{")
        }

        assert "/api/bloglist/{blog_id}" in endpoints
        assert "unmatched" in endpoints
        assert not any(endpoint.startswith("/scan-") for endpoint in endpoints)
        assert not any(blog["id"] in endpoint for blog in seeded_blogs for endpoint in endpoints)


class TestDebugMode:
    """Tests that debug and reload never reach a production deployment."""

    @staticmethod
    def _settings(environment):
        return Settings(
            _env_file=None,
            environment=environment,
            debug=True,
            jwt_secret_key=TEST_SECRET,
            log_level="WARNING",
            log_format="text",
        )

    def test_debug_is_ignored_in_production(self):
        app = create_app(settings=self._settings("production"), database=AsyncMongoMockClient()["debug"])

        assert app.debug is False

    def test_debug_is_honoured_in_development(self):
        app = create_app(settings=self._settings("development"), database=AsyncMongoMockClient()["debug"])

        assert app.debug is True

    def test_run_disables_reload_in_production(self, monkeypatch):
        calls = []
        monkeypatch.setattr(server_main, "get_settings", lambda: self._settings("production"))
        monkeypatch.setattr(server_main.uvicorn, "run", lambda *args, **kwargs: calls.append(kwargs))

        server_main.run()

        assert calls[0]["reload"] is False
        assert calls[0]["factory"] is True
