"""
GraphQL Mutation Resolvers

Defines all write operations (mutations) for the GraphQL API.

Authorization policy:
- addBook and editAuthor require a logged-in user while
  REQUIRE_AUTH_FOR_WRITES is on (the default)
- createUser and login never require one
"""

import logging

import strawberry
from strawberry.types import Info

from library_api.errors import AuthenticationError, ValidationError
from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import TokenType, UserType
from library_api.models import User
from library_api.services.security import (
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


def require_auth(info: Info[GraphQLContext, None]) -> User:
    """Helper to require authentication and return the user."""
    user = info.context.user
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


def require_writer(info: Info[GraphQLContext, None]) -> User | None:
    """Apply the catalog write policy from settings."""
    if info.context.settings.require_auth_for_writes:
        return require_auth(info)
    return info.context.user


@strawberry.type
class Mutation:
    """
    GraphQL Mutation type containing all write operations.

    Store failures are re-raised as ValidationError carrying the
    mutation's own arguments as invalidArgs.
    """

    # =========================================================================
    # Catalog Mutations
    # =========================================================================

    @strawberry.mutation(description="Add a book, creating its author if needed")
    def add_book(
        self,
        info: Info[GraphQLContext, None],
        title: str,
        published: int,
        author: str,
        genres: list[str] | None = None,
    ) -> BookType | None:
        """
        Add a new book.

        The author is looked up by name and created first when absent.
        The two writes are not atomic: if the book is rejected, an author
        created for it stays in the catalog.
        """
        require_writer(info)
        store = info.context.store
        args = {
            "title": title,
            "published": published,
            "author": author,
            "genres": genres or [],
        }

        try:
            author_model, created = store.find_or_create_author(author)
            if created:
                logger.info(f"Author '{author_model.name}' created by addBook")
            book = store.create_book(title, published, author_model, genres or [])
        except ValidationError as e:
            raise e.with_args(args) from e

        # Later fields in this request must see the new book
        info.context.book_count_loader.clear(author_model.id)

        return BookType.from_model(book)

    @strawberry.mutation(description="Set an author's birth year")
    def edit_author(
        self,
        info: Info[GraphQLContext, None],
        name: str,
        set_born_to: int,
    ) -> AuthorType | None:
        """
        Update the birth year of the named author.

        Returns None if no author has that name; no author is created.
        """
        require_writer(info)

        try:
            author = info.context.store.update_author_born(name, set_born_to)
        except ValidationError as e:
            raise e.with_args({"name": name, "setBornTo": set_born_to}) from e

        if author is None:
            return None

        return AuthorType.from_model(author)

    # =========================================================================
    # Authentication Mutations
    # =========================================================================

    @strawberry.mutation(description="Register a new user account")
    def create_user(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
        favourite_genre: str,
    ) -> UserType | None:
        """
        Create a new user account.

        Only a bcrypt hash of the password is stored.
        """
        args = {"username": username, "favouriteGenre": favourite_genre}

        if not password.strip():
            raise ValidationError("password: Password cannot be empty", args)

        user = info.context.store.create_user(
            username=username,
            favourite_genre=favourite_genre,
            password_hash=hash_password(password),
        )

        return UserType.from_model(user)

    @strawberry.mutation(description="Login with username and password")
    def login(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
    ) -> TokenType | None:
        """
        Authenticate with username and password.

        An unknown username and a wrong password fail the same way, so the
        error does not reveal which accounts exist.
        """
        user = info.context.store.find_user_by_username(username)

        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for username '{username}'")
            raise AuthenticationError("Wrong credentials")

        token = create_access_token({"sub": str(user.id), "username": user.username})
        logger.info(f"User logged in: {user.username} (id={user.id})")

        return TokenType(value=token)
