"""
Book Pydantic Schemas

Validation rules for book writes:
- title: 5-500 characters after stripping whitespace
- published: a year between 0 and the current year
- genres: a set of non-blank labels of at most 100 characters
"""

from pydantic import BaseModel, Field, field_validator

from library_api.schemas.author import validate_year


class BookCreate(BaseModel):
    """
    Schema for creating a new book.

    The author is resolved (or created) by the entity store before the
    book is validated, so only the scalar fields live here.
    """

    title: str = Field(
        ...,
        min_length=5,
        max_length=500,
        description="Book title",
        examples=["Clean Code", "The Great Gatsby"],
    )

    published: int = Field(
        ...,
        ge=0,
        description="Year of publication",
        examples=[2008],
    )

    genres: list[str] = Field(
        default_factory=list,
        description="Genre labels; duplicates are collapsed",
        examples=[["refactoring", "patterns"]],
    )

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("published")
    @classmethod
    def published_not_in_future(cls, v: int) -> int:
        return validate_year(v)

    @field_validator("genres")
    @classmethod
    def genres_must_be_labels(cls, v: list[str]) -> list[str]:
        """
        Strip, reject blanks and drop duplicates.

        The first occurrence of each label wins.
        """
        labels: list[str] = []
        for genre in v:
            label = genre.strip()
            if not label:
                raise ValueError("Genre cannot be empty or whitespace")
            if len(label) > 100:
                raise ValueError("Genre must be at most 100 characters")
            if label not in labels:
                labels.append(label)
        return labels
