"""
Library Catalog API Package

A GraphQL API for a library catalog: books, authors and users with
token-based authentication.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine/session lifecycle and the get_db dependency
- errors.py: Errors surfaced to GraphQL clients
- main.py: FastAPI application factory
- models/: SQLAlchemy ORM models
- schemas/: Pydantic validation schemas used by the entity store
- services/: Entity store and credential service
- graphql/: Strawberry schema, context and resolvers
"""

__version__ = "0.1.0"
