"""
Author Pydantic Schemas

Validation rules for author writes:
- name: 4-255 characters after stripping whitespace
- born: a year between 0 and the current year
"""

from datetime import date

from pydantic import BaseModel, Field, field_validator


def validate_year(v: int | None) -> int | None:
    """Reject years in the future. Shared by author and book schemas."""
    if v is not None and v > date.today().year:
        raise ValueError("Year cannot be in the future")
    return v


class AuthorCreate(BaseModel):
    """
    Schema for creating a new author.

    Authors are created implicitly by addBook, usually with only a name.
    """

    name: str = Field(
        ...,
        min_length=4,
        max_length=255,
        description="Author's full name",
        examples=["Robert Martin", "F. Scott Fitzgerald"],
    )

    born: int | None = Field(
        default=None,
        ge=0,
        description="Year of birth",
        examples=[1952],
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        """Normalize by stripping whitespace before the length check."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("born")
    @classmethod
    def born_not_in_future(cls, v: int | None) -> int | None:
        return validate_year(v)


class AuthorBornUpdate(BaseModel):
    """Schema for editAuthor: only the birth year can change."""

    born: int = Field(
        ...,
        ge=0,
        description="Year of birth",
        examples=[1958],
    )

    @field_validator("born")
    @classmethod
    def born_not_in_future(cls, v: int) -> int:
        return validate_year(v)
