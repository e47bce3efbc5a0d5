"""
Entity Store

The only way resolvers touch the database. An EntityStore wraps the
request's SQLAlchemy session and exposes the catalog's read/write
contract for Book, Author and User records.

Rules every write follows:
1. Input is validated with the Pydantic schemas in library_api.schemas
2. Uniqueness is checked with a lookup first
3. The database unique indexes are the final guard: an IntegrityError
   (for example from a concurrent request that won the race) is rolled
   back and reported as a ValidationError, never as a duplicate row
4. Successful writes commit immediately; nothing is cached between calls

Usage:
    store = EntityStore(db)
    author, created = store.find_or_create_author("Robert Martin")
    book = store.create_book("Clean Code", 2008, author, ["refactoring"])
"""

import logging
from typing import Any, Sequence

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from library_api.errors import ValidationError
from library_api.models import Author, Book, Genre, User
from library_api.schemas import AuthorBornUpdate, AuthorCreate, BookCreate, UserCreate

logger = logging.getLogger(__name__)


def _validate(schema: type[BaseModel], **data: Any) -> BaseModel:
    """
    Build a schema instance, translating Pydantic errors.

    Raises:
        ValidationError: with every field error joined into one message
            and the raw input attached as invalid args
    """
    try:
        return schema(**data)
    except PydanticValidationError as e:
        message = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        logger.info(f"{schema.__name__} validation failed: {message}")
        raise ValidationError(message, data) from e


class EntityStore:
    """
    Read/write contract for the catalog's collections.

    One instance per request, built from the request-scoped session.
    """

    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _commit(self, invalid_args: dict[str, Any]) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Constraint violation on write: {e.orig}")
            raise ValidationError(
                "Write violates a uniqueness or integrity constraint",
                invalid_args,
            ) from e

    # =========================================================================
    # Counts
    # =========================================================================

    def count_books(self) -> int:
        return self.db.execute(select(func.count(Book.id))).scalar_one()

    def count_authors(self) -> int:
        return self.db.execute(select(func.count(Author.id))).scalar_one()

    def count_books_by_author(self, author_id: int) -> int:
        stmt = select(func.count(Book.id)).where(Book.author_id == author_id)
        return self.db.execute(stmt).scalar_one()

    def count_books_by_authors(self, author_ids: Sequence[int]) -> dict[int, int]:
        """
        Batched book counts in one grouped query.

        Authors without books are present with a count of 0.
        """
        counts = {author_id: 0 for author_id in author_ids}
        if not counts:
            return counts

        stmt = (
            select(Book.author_id, func.count(Book.id))
            .where(Book.author_id.in_(list(counts)))
            .group_by(Book.author_id)
        )
        for author_id, count in self.db.execute(stmt).all():
            counts[author_id] = count
        return counts

    # =========================================================================
    # Authors
    # =========================================================================

    def find_author_by_name(self, name: str) -> Author | None:
        """Look up an author; surrounding whitespace in name is ignored."""
        stmt = select(Author).where(Author.name == name.strip())
        return self.db.execute(stmt).scalar_one_or_none()

    def list_authors(self) -> list[Author]:
        stmt = select(Author).order_by(Author.id)
        return list(self.db.execute(stmt).scalars().all())

    def create_author(self, name: str, born: int | None = None) -> Author:
        """
        Create an author.

        Raises:
            ValidationError: name too short/long, born out of range, or an
                author with that name already exists
        """
        data = _validate(AuthorCreate, name=name, born=born)

        if self.find_author_by_name(data.name) is not None:
            raise ValidationError(
                f"Author '{data.name}' already exists",
                {"name": name},
            )

        author = Author(name=data.name, born=data.born)
        self.db.add(author)
        self._commit({"name": name, "born": born})
        self.db.refresh(author)

        logger.info(f"Created author: {author.name} (id={author.id})")
        return author

    def find_or_create_author(self, name: str) -> tuple[Author, bool]:
        """
        Return the author with this name, creating it if absent.

        The lookup and the insert are two separate steps and are not
        atomic. If a concurrent request creates the same author in
        between, the unique index on authors.name makes this call fail
        with ValidationError.

        Returns:
            (author, created)
        """
        author = self.find_author_by_name(name)
        if author is not None:
            return author, False
        return self.create_author(name), True

    def update_author_born(self, name: str, year: int) -> Author | None:
        """
        Set an author's birth year.

        Returns:
            The updated author, or None if no author has that name. Never
            creates an author.

        Raises:
            ValidationError: if year is out of range
        """
        data = _validate(AuthorBornUpdate, born=year)

        author = self.find_author_by_name(name)
        if author is None:
            return None

        author.born = data.born
        self._commit({"name": name, "born": year})
        self.db.refresh(author)

        logger.info(f"Updated author {author.name}: born={author.born}")
        return author

    # =========================================================================
    # Books
    # =========================================================================

    def find_books(
        self,
        author_id: int | None = None,
        genre: str | None = None,
    ) -> list[Book]:
        """
        Books filtered by author and/or genre.

        - both filters: author matches AND the genre set contains genre
        - one filter: that filter alone
        - no filter: every book

        Each book comes back with its author and genres loaded.
        """
        stmt = (
            select(Book)
            .options(selectinload(Book.author), selectinload(Book.genres))
            .order_by(Book.id)
        )

        if author_id is not None:
            stmt = stmt.where(Book.author_id == author_id)

        if genre is not None:
            stmt = stmt.where(Book.genres.any(Genre.name == genre))

        return list(self.db.execute(stmt).scalars().all())

    def _resolve_genres(self, labels: list[str]) -> list[Genre]:
        """Return Genre rows for labels, creating the missing ones."""
        if not labels:
            return []

        stmt = select(Genre).where(Genre.name.in_(labels))
        existing = {genre.name: genre for genre in self.db.execute(stmt).scalars()}

        genres = []
        for label in labels:
            genre = existing.get(label)
            if genre is None:
                genre = Genre(name=label)
                self.db.add(genre)
            genres.append(genre)
        return genres

    def create_book(
        self,
        title: str,
        published: int,
        author: Author,
        genres: list[str],
    ) -> Book:
        """
        Create a book referencing an existing author.

        Raises:
            ValidationError: malformed fields or a duplicate title
        """
        invalid_args = {
            "title": title,
            "published": published,
            "author": author.name,
            "genres": genres,
        }
        data = _validate(BookCreate, title=title, published=published, genres=genres)

        stmt = select(Book.id).where(Book.title == data.title)
        if self.db.execute(stmt).scalar_one_or_none() is not None:
            raise ValidationError(f"Book '{data.title}' already exists", invalid_args)

        book = Book(
            title=data.title,
            published=data.published,
            author=author,
            genres=self._resolve_genres(data.genres),
        )
        self.db.add(book)
        self._commit(invalid_args)
        self.db.refresh(book)

        logger.info(f"Created book: {book.title} (id={book.id}) by {author.name}")
        return book

    # =========================================================================
    # Users
    # =========================================================================

    def find_user_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_user_by_id(self, user_id: int) -> User | None:
        """Load a user with friends resolved."""
        stmt = (
            select(User)
            .options(selectinload(User.friends))
            .where(User.id == user_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create_user(
        self,
        username: str,
        favourite_genre: str,
        password_hash: str,
    ) -> User:
        """
        Create a user from already-hashed credential material.

        Raises:
            ValidationError: username shorter than 3 characters, blank
                favourite genre, or a duplicate username
        """
        invalid_args = {"username": username, "favouriteGenre": favourite_genre}
        try:
            data = _validate(
                UserCreate,
                username=username,
                favourite_genre=favourite_genre,
                password_hash=password_hash,
            )
        except ValidationError as e:
            raise e.with_args(invalid_args) from e

        if self.find_user_by_username(data.username) is not None:
            raise ValidationError(
                f"Username '{data.username}' is already taken",
                invalid_args,
            )

        user = User(
            username=data.username,
            favourite_genre=data.favourite_genre,
            password_hash=data.password_hash,
        )
        self.db.add(user)
        self._commit(invalid_args)
        self.db.refresh(user)

        logger.info(f"Created user: {user.username} (id={user.id})")
        return user
