"""
End-to-end check against a real MongoDB started with Testcontainers.

Requires a Docker daemon; deselected by default (run with ``-m docker``).
"""

import pytest
from fastapi.testclient import TestClient
from testcontainers.mongodb import MongoDbContainer

from server.src.config import Settings
from server.src.main import create_app
from tests.conftest import ROOT_USER, TEST_SECRET


@pytest.fixture(scope="module")
def mongodb_url():
    with MongoDbContainer("mongo:7.0") as container:
        yield container.get_connection_url()


@pytest.mark.docker
class TestRealMongoDB:
    """Test the service lifecycle against a real server."""

    def test_blog_lifecycle(self, mongodb_url):
        settings = Settings(
            _env_file=None,
            environment="test",
            mongodb_url=mongodb_url,
            mongodb_database="bloglist_container_test",
            jwt_secret_key=TEST_SECRET,
            password_bcrypt_rounds=4,
            log_level="WARNING",
            cors_enabled=False,
        )

        with TestClient(create_app(settings=settings)) as client:
            assert client.get("/ready").json()["checks"]["database"] == "healthy"
            client.post("/api/testing/reset")

            assert client.post("/api/users", json=ROOT_USER).status_code == 201
            assert client.post("/api/users", json=ROOT_USER).status_code == 400

            token = client.post(
                "/api/login",
                json={"username": ROOT_USER["username"], "password": ROOT_USER["password"]}
            ).json()["token"]
            headers = {"Authorization": f"bearer {token}"}

            created = client.post(
                "/api/bloglist",
                json={"title": "Type wars", "author": "Robert C. Martin", "url": "http://blog.cleancoder.com/"},
                headers=headers
            )
            assert created.status_code == 201
            assert created.json()["likes"] == 0

            blog_id = created.json()["id"]
            liked = client.put(f"/api/bloglist/{blog_id}", json={"likes": 1})
            assert liked.json()["likes"] == 1

            assert client.delete(f"/api/bloglist/{blog_id}", headers=headers).status_code == 204
            assert client.get("/api/bloglist").json() == []
