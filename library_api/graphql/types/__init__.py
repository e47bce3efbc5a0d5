"""
GraphQL Types Package

Type definitions that map the SQLAlchemy models onto the public schema.

Types defined here:
- AuthorType (Author): Author with its computed book count
- BookType (Book): Book with its resolved author and genre set
- UserType (User): Public user information with friends
- TokenType (Token): Login result
"""

from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import TokenType, UserType

__all__ = [
    "AuthorType",
    "BookType",
    "UserType",
    "TokenType",
]
