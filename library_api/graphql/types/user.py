"""
GraphQL User Type

Defines the User and Token types.
Only exposes public/safe fields; the password hash never leaves the store.
"""

import strawberry

from library_api.models import User


@strawberry.type(name="User")
class UserType:
    """
    GraphQL type representing a user.

    Maps to the User SQLAlchemy model; the model itself is kept private
    so friends are only loaded when a query asks for them.
    """

    id: strawberry.ID
    username: str
    favourite_genre: str
    model: strawberry.Private[User]

    @strawberry.field(description="Users this user has befriended")
    def friends(self) -> list["UserType"]:
        return [UserType.from_model(friend) for friend in self.model.friends]

    @classmethod
    def from_model(cls, user: User) -> "UserType":
        """Convert SQLAlchemy User model to GraphQL UserType."""
        return cls(
            id=strawberry.ID(str(user.id)),
            username=user.username,
            favourite_genre=user.favourite_genre,
            model=user,
        )


@strawberry.type(name="Token")
class TokenType:
    """
    Response type for the login mutation.

    Send the value back as `Authorization: Bearer <value>`.
    """

    value: str
