"""
User registry and role-based authorization.

Authorization is consulted by the API before a transition is requested;
the state machine itself is unaware of users.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, Field


class AuthenticationError(Exception):
    """Raised when a user id is unknown."""

    def __init__(self, user_id: Optional[str]):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class User(BaseModel):
    """A known user and their roles."""

    id: str = Field(..., min_length=1)
    roles: list[str] = Field(default_factory=list)


class AuthManager:
    """Holds users and answers role checks."""

    def __init__(self, users: Optional[Iterable[User]] = None):
        self._users: dict[str, User] = {}
        for user in users or []:
            self.add_user(user)

    @classmethod
    def from_mapping(cls, users: dict[str, list[str]]) -> "AuthManager":
        """Build from a ``{user_id: [roles]}`` mapping, as found in settings."""
        return cls(User(id=user_id, roles=roles) for user_id, roles in users.items())

    def add_user(self, user: User) -> None:
        self._users[user.id] = user

    def authenticate(self, user_id: Optional[str]) -> User:
        """
        Resolve a user id.

        Raises:
            AuthenticationError: If the id is missing or unknown
        """
        user = self._users.get(user_id) if user_id else None
        if user is None:
            raise AuthenticationError(user_id)
        return user

    @staticmethod
    def authorize(user: User, roles: Iterable[str]) -> bool:
        """True if ``user`` holds at least one of ``roles``."""
        return any(role in user.roles for role in roles)
