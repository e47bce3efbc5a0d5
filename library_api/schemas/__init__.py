"""
Pydantic Schemas Package

These schemas are the entity store's validators: every write is built
from one of them, so malformed input is rejected before it reaches the
database and reported as a ValidationError with the offending arguments.

Schema Naming Convention:
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating
"""

from library_api.schemas.author import AuthorBornUpdate, AuthorCreate
from library_api.schemas.book import BookCreate
from library_api.schemas.user import UserCreate

__all__ = [
    "AuthorCreate",
    "AuthorBornUpdate",
    "BookCreate",
    "UserCreate",
]
