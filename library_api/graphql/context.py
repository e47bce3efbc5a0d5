"""
GraphQL Context

Provides request context to all GraphQL resolvers:
- Entity store bound to the request's database session
- Current authenticated user (if any)
- Per-request data loaders
- Application settings

The context is created fresh for each GraphQL request, before any
resolver runs, and passed to resolvers via the `info` parameter. This is
the single place where bearer tokens are checked.
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from strawberry.dataloader import DataLoader
from strawberry.fastapi import BaseContext

from library_api.config import Settings, get_settings
from library_api.database import get_db
from library_api.models import User
from library_api.services.security import decode_token
from library_api.services.store import EntityStore

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class GraphQLContext(BaseContext):
    """
    Context object available to all GraphQL resolvers.

    Attributes:
        store: Entity store for this request
        user: Currently authenticated user (None if not authenticated)
        settings: Application settings
        book_count_loader: Batches Author.bookCount lookups into one query
    """

    def __init__(
        self,
        store: EntityStore,
        user: User | None = None,
        settings: Settings | None = None,
    ):
        super().__init__()
        self.store = store
        self.user = user
        self.settings = settings or get_settings()
        self.book_count_loader = DataLoader(load_fn=self._load_book_counts)

    async def _load_book_counts(self, author_ids: list[int]) -> list[int]:
        counts = self.store.count_books_by_authors(author_ids)
        return [counts[author_id] for author_id in author_ids]


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Return the token from an Authorization header value.

    The scheme prefix is matched case-insensitively; any other scheme, or
    a missing header, yields None.
    """
    if not authorization:
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None


def get_user_from_token(store: EntityStore, token: str | None) -> User | None:
    """
    Extract and validate the user from a JWT token.

    An invalid token is not an error: the request simply continues
    unauthenticated and each operation decides whether it needs a user.

    Returns:
        User (friends resolved) if the token is valid and the user still
        exists, None otherwise
    """
    if not token:
        return None

    payload = decode_token(token)
    if payload is None:
        return None

    user_id = payload.get("sub")
    if user_id is None:
        return None

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        logger.warning(f"Token carries a malformed subject: {user_id!r}")
        return None

    user = store.find_user_by_id(user_id)
    if user is None:
        logger.info(f"Token refers to unknown user id={user_id}")
    return user


async def get_context(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> GraphQLContext:
    """
    Create GraphQL context for each request.

    Strawberry resolves this like any FastAPI dependency, so the session
    and settings come from get_db and get_settings (or from the test
    overrides when they are set).
    """
    store = EntityStore(db)

    token = extract_bearer_token(request.headers.get("Authorization"))
    user = get_user_from_token(store, token)

    return GraphQLContext(store=store, user=user, settings=settings)
