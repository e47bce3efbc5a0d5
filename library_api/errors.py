"""
Error classes surfaced to GraphQL clients.

graphql-core copies the `extensions` attribute of an exception raised in
a resolver onto the error payload, so clients receive a machine-readable
`code` next to the message, in the shape Apollo clients expect:

    {
        "message": "Wrong credentials",
        "extensions": {"code": "UNAUTHENTICATED"}
    }

Lookups of optional entities (editAuthor on an unknown name, me without
a token) are not errors; those resolvers return null.
"""

from typing import Any

# Arguments that must never be echoed back in error payloads
SECRET_ARGUMENTS = frozenset({"password"})


class LibraryError(Exception):
    """Base class for errors with a GraphQL error code."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.extensions: dict[str, Any] = {"code": self.code}


class ValidationError(LibraryError):
    """
    Raised when write input is malformed or violates a store constraint.

    The offending arguments are attached as `invalidArgs` so the caller
    can correct and retry.
    """

    code = "BAD_USER_INPUT"

    def __init__(self, message: str, invalid_args: dict[str, Any] | None = None):
        super().__init__(message)
        self.invalid_args = {
            key: value
            for key, value in (invalid_args or {}).items()
            if key not in SECRET_ARGUMENTS
        }
        self.extensions["invalidArgs"] = self.invalid_args

    def with_args(self, invalid_args: dict[str, Any]) -> "ValidationError":
        """Return a copy carrying the resolver's arguments instead."""
        return ValidationError(self.message, invalid_args)


class AuthenticationError(LibraryError):
    """
    Raised when login fails or a gated mutation runs without identity.

    Login failures never say whether the username or the password was
    wrong.
    """

    code = "UNAUTHENTICATED"
