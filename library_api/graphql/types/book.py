"""
GraphQL Book Type

Defines the Book type for GraphQL queries.
"""

import strawberry

from library_api.graphql.types.author import AuthorType
from library_api.models import Book


@strawberry.type(name="Book")
class BookType:
    """
    GraphQL type representing a book.

    The author is always the resolved Author, never a bare reference.
    """

    id: strawberry.ID
    title: str
    published: int
    author: AuthorType
    genres: list[str] = strawberry.field(default_factory=list)

    @classmethod
    def from_model(cls, book: Book) -> "BookType":
        """Convert SQLAlchemy Book model to GraphQL BookType."""
        return cls(
            id=strawberry.ID(str(book.id)),
            title=book.title,
            published=book.published,
            author=AuthorType.from_model(book.author),
            genres=book.genre_names,
        )
