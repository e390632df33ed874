"""
Contract tests for the request and response schemas.

Tests verify:
- Required and defaulted fields of blogs and persons
- That user responses never carry password material
- The error envelope
- The OpenAPI document exposes every resource
"""

import pytest
from pydantic import ValidationError

from server.src.models.auth import ErrorResponse, TokenResponse, UserResponse
from server.src.models.blog import BlogCreate, BlogResponse, BlogUpdate
from server.src.models.person import PersonCreate, PersonUpdate


# ============================================================================
# BLOG CONTRACT
# ============================================================================


class TestBlogContract:
    """Test blog schemas."""

    def test_likes_default_to_zero(self):
        blog = BlogCreate(title="React patterns", url="https://reactpatterns.com/")

        assert blog.likes == 0
        assert blog.author is None

    def test_title_and_url_are_required(self):
        with pytest.raises(ValidationError) as exc_info:
            BlogCreate(author="Michael Chan")

        missing = {error["loc"][0] for error in exc_info.value.errors()}
        assert missing == {"title", "url"}

    def test_numeric_string_likes_are_coerced(self):
        assert BlogCreate(title="t", url="u", likes="8999").likes == 8999

    def test_negative_likes_are_rejected(self):
        with pytest.raises(ValidationError):
            BlogCreate(title="t", url="u", likes=-1)

    def test_update_ignores_server_owned_fields(self):
        """Test a fetched blog can be PUT back unchanged."""
        update = BlogUpdate(
            id="5a422a851b54a676234d17f7",
            title="React patterns",
            url="https://reactpatterns.com/",
            likes=8,
            user={"id": "x", "username": "root"}
        )

        assert update.model_dump(exclude_unset=True) == {
            "title": "React patterns",
            "url": "https://reactpatterns.com/",
            "likes": 8,
        }

    def test_update_rejects_explicit_null_likes(self):
        with pytest.raises(ValidationError):
            BlogUpdate(likes=None)

    def test_response_without_owner(self):
        blog = BlogResponse(id="1", title="t", url="u")

        assert blog.user is None
        assert blog.likes == 0


# ============================================================================
# PERSON CONTRACT
# ============================================================================


class TestPersonContract:
    """Test person schemas."""

    def test_name_and_number_are_required(self):
        with pytest.raises(ValidationError):
            PersonCreate(name="Arto Hellas")

    def test_empty_name_is_rejected(self):
        with pytest.raises(ValidationError):
            PersonCreate(name="", number="040-123456")

    def test_update_is_partial(self):
        assert PersonUpdate(number="050").model_dump(exclude_unset=True) == {"number": "050"}


# ============================================================================
# USER, TOKEN AND ERROR CONTRACT
# ============================================================================


class TestAuthContract:
    """Test user, token and error schemas."""

    def test_user_response_has_no_password_field(self):
        assert "password_hash" not in UserResponse.model_fields
        assert "password" not in UserResponse.model_fields

    def test_user_response_drops_password_hash(self):
        user = UserResponse(id="1", username="root", password_hash="$2b$...")

        assert "password_hash" not in user.model_dump()
        assert user.blogs == []

    def test_token_response_fields(self):
        assert set(TokenResponse.model_fields) == {"token", "username", "name"}

    def test_error_message_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            ErrorResponse(error="")


class TestOpenAPIDocument:
    """Test the generated OpenAPI document."""

    def test_every_resource_is_documented(self, app):
        paths = app.openapi()["paths"]

        for path in ("/api/bloglist", "/api/bloglist/{blog_id}", "/api/persons", "/api/users", "/api/login"):
            assert path in paths

    def test_blog_creation_documents_401(self, app):
        responses = app.openapi()["paths"]["/api/bloglist"]["post"]["responses"]

        assert "201" in responses
        assert "401" in responses
