"""
GraphQL Package

This package provides the catalog's GraphQL API using Strawberry GraphQL.

Features:
- Book, Author, User and Token types backed by SQLAlchemy models
- Query resolvers: bookCount, authorCount, allBooks, allAuthors, me
- Mutation resolvers: addBook, editAuthor, createUser, login
- Authentication via JWT bearer token in context

Usage:
    The GraphQL endpoint is available at /graphql with an interactive
    in-browser IDE for development.

Example Query:
    query {
        allBooks(author: "Robert Martin", genre: "refactoring") {
            title
            published
            author { name bookCount }
        }
    }
"""

import strawberry
from strawberry.fastapi import GraphQLRouter

from library_api.config import Settings, get_settings
from library_api.graphql.context import get_context
from library_api.graphql.mutations import Mutation
from library_api.graphql.queries import Query

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
)


def create_graphql_router(settings: Settings | None = None) -> GraphQLRouter:
    """
    Create the GraphQL router for FastAPI.

    Returns:
        GraphQLRouter configured with schema and context
    """
    settings = settings or get_settings()
    graphql_ide = None if settings.graphql_ide == "none" else settings.graphql_ide

    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=graphql_ide,
    )


__all__ = ["schema", "create_graphql_router"]
