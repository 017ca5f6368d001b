"""Session identity context using contextvars.

Holds the signed-in user for the current async task. The host application
sets it after authentication; ContextIdentityProvider reads it for
operations that require identity (page retrieval, sync registration).

Usage:
    set_current_user(user_id="user123")
    user_id = get_current_user_id()
"""

from contextvars import ContextVar

_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)


def set_current_user(user_id: str | None) -> None:
    """Set the signed-in user for this context.

    Args:
        user_id: Authenticated user ID, or None to sign out.

    Raises:
        ValueError: If user_id is an empty string.
    """
    if user_id is not None and not user_id:
        raise ValueError("user_id must be a non-empty string or None")
    _current_user_id.set(user_id)


def clear_current_user() -> None:
    """Clear the signed-in user."""
    _current_user_id.set(None)


def get_current_user_id() -> str | None:
    """Return the signed-in user ID, or None if not authenticated."""
    return _current_user_id.get()


class ContextIdentityProvider:
    """IIdentityProvider backed by the current_user_id contextvar."""

    def current_user_id(self) -> str | None:
        return get_current_user_id()
