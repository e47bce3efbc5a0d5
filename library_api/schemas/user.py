"""
User Pydantic Schemas

Validation rules for user writes:
- username: 3-50 characters after stripping whitespace
- favourite_genre: not blank
- password: not blank (only its hash is stored)
"""

from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    """
    Schema for createUser.

    The password is hashed by the credential service before the store
    sees it; this schema only carries the hash.
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Unique login name",
        examples=["mluukkai"],
    )

    favourite_genre: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Favourite genre",
        examples=["refactoring"],
    )

    password_hash: str = Field(
        ...,
        min_length=1,
        description="Bcrypt hash of the user's password",
    )

    @field_validator("username", "favourite_genre", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v
