"""User session seam.

Authentication itself belongs to an external identity provider; the tracker
only needs the id of the signed-in user to scope its records.
"""

from typing import Optional, Protocol

from .errors import NotAuthenticatedError

GUEST_USER_ID = "local"


class SessionProvider(Protocol):
    """Anything that can report the signed-in user's id."""

    def current_user_id(self) -> Optional[str]:
        ...


class StaticSession:
    """Session provider with a fixed user id (guest mode, CLI, tests)."""

    def __init__(self, user_id: Optional[str] = GUEST_USER_ID):
        self.user_id = user_id

    def current_user_id(self) -> Optional[str]:
        return self.user_id


def require_user_id(provider: SessionProvider) -> str:
    """Return the current user id or raise NotAuthenticatedError."""
    user_id = provider.current_user_id()
    if not user_id:
        raise NotAuthenticatedError("No authenticated user")
    return user_id
