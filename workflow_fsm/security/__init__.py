"""Authentication and authorization."""

from workflow_fsm.security.auth import AuthenticationError, AuthManager, User

__all__ = ["AuthenticationError", "AuthManager", "User"]
