"""
SQLAlchemy Models Package

This package contains all database models for the Library Catalog API.

Model Relationships:
- Author <-> Book: One-to-Many (a book has exactly one author,
                   an author can write many books)
- Genre <-> Book: Many-to-Many (a book's genre set, stored by name)
- User <-> User: Many-to-Many (friends)

Import all models here to:
1. Make them available as: from library_api.models import Book, Author
2. Ensure Alembic discovers them for migrations
"""

# The order matters for SQLAlchemy to resolve relationships
from library_api.models.author import Author
from library_api.models.genre import Genre
from library_api.models.book import Book, book_genres
from library_api.models.user import User, user_friends

__all__ = [
    "Author",
    "Genre",
    "Book",
    "book_genres",
    "User",
    "user_friends",
]
