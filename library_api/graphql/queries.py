"""
GraphQL Query Resolvers

Defines all read operations (queries) for the GraphQL API.
Each resolver reads through the entity store in the context; nothing is
cached between requests.
"""

import strawberry
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import UserType


@strawberry.type
class Query:
    """
    GraphQL Query type containing all read operations.

    All resolvers receive an `info` parameter that contains the
    GraphQL context with the entity store and current user.
    """

    @strawberry.field(description="Number of books in the catalog")
    def book_count(self, info: Info[GraphQLContext, None]) -> int:
        return info.context.store.count_books()

    @strawberry.field(description="Number of authors in the catalog")
    def author_count(self, info: Info[GraphQLContext, None]) -> int:
        return info.context.store.count_authors()

    @strawberry.field(description="Books, optionally filtered by author name and genre")
    def all_books(
        self,
        info: Info[GraphQLContext, None],
        author: str | None = None,
        genre: str | None = None,
    ) -> list[BookType]:
        """
        Get books with optional filtering.

        Args:
            author: Exact author name; an unknown name matches no books
            genre: Genre the book's genre set must contain

        Empty strings count as "no filter".

        Returns:
            Matching books with their authors resolved
        """
        store = info.context.store

        author_id = None
        if author:
            found = store.find_author_by_name(author)
            if found is None:
                return []
            author_id = found.id

        books = store.find_books(author_id=author_id, genre=genre or None)
        return [BookType.from_model(book) for book in books]

    @strawberry.field(description="All authors in the catalog")
    def all_authors(self, info: Info[GraphQLContext, None]) -> list[AuthorType]:
        authors = info.context.store.list_authors()
        return [AuthorType.from_model(author) for author in authors]

    @strawberry.field(description="Get the currently authenticated user")
    def me(self, info: Info[GraphQLContext, None]) -> UserType | None:
        """
        Get the current authenticated user.

        Returns None if not authenticated.
        """
        user = info.context.user

        if user is None:
            return None

        return UserType.from_model(user)
