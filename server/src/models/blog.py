"""
Blog schemas.

BlogCreate enforces the required ``title`` and ``url`` fields; a missing
field fails request validation and is answered with 400. BlogUpdate makes
every field optional so a client can PUT back an entry it fetched; unknown
keys such as ``id`` and ``user`` are ignored.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BlogCreate(BaseModel):
    """Blog creation request."""
    title: str = Field(..., min_length=1, description="Blog title")
    author: Optional[str] = Field(None, description="Blog author")
    url: str = Field(..., min_length=1, description="Blog URL")
    likes: int = Field(0, ge=0, description="Like count")

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "React patterns",
                "author": "Michael Chan",
                "url": "https://reactpatterns.com/",
                "likes": 7
            }
        }
    }


class BlogUpdate(BaseModel):
    """Blog update request. Only the supplied fields are replaced."""
    title: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = None
    url: Optional[str] = Field(None, min_length=1)
    likes: Optional[int] = Field(None, ge=0)

    @field_validator("title", "url", "likes")
    @classmethod
    def reject_null(cls, v):
        """Explicit nulls would erase required fields."""
        if v is None:
            raise ValueError("must not be null")
        return v


class BlogOwner(BaseModel):
    """Owner populated into blog responses."""
    id: str
    username: str
    name: Optional[str] = None


class BlogResponse(BaseModel):
    """Blog as returned by the API."""
    id: str
    title: str
    author: Optional[str] = None
    url: str
    likes: int = 0
    user: Optional[BlogOwner] = None
