"""
Shared fixtures for the bloglist and phonebook test suites.

The API runs against an in-memory MongoDB (mongomock-motor) through
FastAPI's TestClient, so the lifespan (index creation) runs for every test.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from server.src.config import Settings
from server.src.main import create_app
from server.src.repositories.blog_repo import BlogRepository


TEST_SECRET = "test-secret-key-do-not-use-in-production"

INITIAL_BLOGS = [
    {
        "title": "React patterns",
        "author": "Michael Chan",
        "url": "https://reactpatterns.com/",
        "likes": 7,
    },
    {
        "title": "Go To Statement Considered Harmful",
        "author": "Edsger W. Dijkstra",
        "url": "http://www.u.arizona.edu/~rubinson/copyright_violations/Go_To_Considered_Harmful.html",
        "likes": 5,
    },
]

ROOT_USER = {"username": "root", "name": "Superuser", "password": "sekret"}


@pytest.fixture
def settings() -> Settings:
    """Settings for the test environment (fast bcrypt, fixed secret)."""
    return Settings(
        _env_file=None,
        environment="test",
        jwt_secret_key=TEST_SECRET,
        password_bcrypt_rounds=4,
        log_level="WARNING",
        log_format="text",
        cors_enabled=False,
    )


@pytest.fixture
def database():
    """Fresh in-memory database per test."""
    return AsyncMongoMockClient()["bloglist_test"]


@pytest.fixture
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token(client) -> str:
    """Register the root user and log in."""
    response = client.post("/api/users", json=ROOT_USER)
    assert response.status_code == 201

    response = client.post(
        "/api/login",
        json={"username": ROOT_USER["username"], "password": ROOT_USER["password"]}
    )
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def auth_headers(token) -> dict:
    return {"Authorization": f"bearer {token}"}


@pytest.fixture
def seeded_blogs(client, auth_headers) -> list:
    """Store INITIAL_BLOGS, owned by the root user."""
    created = []
    for blog in INITIAL_BLOGS:
        response = client.post("/api/bloglist", json=blog, headers=auth_headers)
        assert response.status_code == 201
        created.append(response.json())
    return created


@pytest.fixture
def blogs_in_db(database):
    """Read blogs straight from the store, bypassing the API."""

    def read() -> list:
        return asyncio.run(BlogRepository(database).list_blogs())

    return read
