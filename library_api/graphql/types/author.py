"""
GraphQL Author Type

Defines the Author type for GraphQL queries.
"""

import strawberry
from strawberry.types import Info

from library_api.models import Author


@strawberry.type(name="Author")
class AuthorType:
    """
    GraphQL type representing a book author.

    Maps to the Author SQLAlchemy model. bookCount is not stored; it is
    resolved per response through the context's data loader, so listing
    N authors costs one count query instead of N.
    """

    id: strawberry.ID
    name: str
    born: int | None = None

    @strawberry.field(description="Number of books referencing this author")
    async def book_count(self, info: Info) -> int:
        return await info.context.book_count_loader.load(int(self.id))

    @classmethod
    def from_model(cls, author: Author) -> "AuthorType":
        """Convert SQLAlchemy Author model to GraphQL AuthorType."""
        return cls(
            id=strawberry.ID(str(author.id)),
            name=author.name,
            born=author.born,
        )
