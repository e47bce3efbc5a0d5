"""
User Model

Represents a registered user. Users log in with username and password
and receive a bearer token; passwords are only ever stored as bcrypt
hashes.
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base


# Self-referential many-to-many: each row says "user_id has friend_id"
user_friends = Table(
    "user_friends",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "friend_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Association table linking users to their friends",
)


class User(Base):
    """
    User model representing registered users in the system.

    Table: users

    Relationships:
    - friends: Many-to-Many relationship with other users

    Indexes:
    - username: Unique index for login lookups
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique login name"
    )

    favourite_genre: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Genre used for recommendations"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    friends: Mapped[list["User"]] = relationship(
        "User",
        secondary=user_friends,
        primaryjoin="User.id == user_friends.c.user_id",
        secondaryjoin="User.id == user_friends.c.friend_id",
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, username='{self.username}')"
