"""Person (phonebook contact) schemas."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PersonCreate(BaseModel):
    """Person creation request."""
    name: str = Field(..., min_length=1, description="Unique contact name")
    number: str = Field(..., min_length=1, description="Phone number")

    model_config = {
        "json_schema_extra": {
            "example": {"name": "Arto Hellas", "number": "040-1234567"}
        }
    }


class PersonUpdate(BaseModel):
    """Person update request. Only the supplied fields are replaced."""
    name: Optional[str] = Field(None, min_length=1)
    number: Optional[str] = Field(None, min_length=1)

    @field_validator("name", "number")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class PersonResponse(BaseModel):
    """Person as returned by the API."""
    id: str
    name: str
    number: str
