"""Identity precondition: check the signed-in user before running an operation.

with_identity(provider, op) returns a callable that resolves the user id
first and passes it to op as the first argument, failing with
PreconditionFailedException before op runs when nobody is signed in.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from viewcache.application.interfaces.services import IIdentityProvider
from viewcache.core.constants import MSG_USER_NOT_FOUND
from viewcache.domain.exceptions import PreconditionFailedException


def require_identity(provider: IIdentityProvider) -> str:
    """Return the signed-in user id.

    Raises:
        PreconditionFailedException: If no user is signed in.
    """
    user_id = provider.current_user_id()
    if not user_id:
        raise PreconditionFailedException(MSG_USER_NOT_FOUND)
    return user_id


def with_identity(provider: IIdentityProvider, operation: Callable[..., Any]) -> Callable[..., Any]:
    """Compose the identity check in front of operation (sync or async)."""
    if inspect.iscoroutinefunction(operation):

        @wraps(operation)
        async def async_guarded(*args: Any, **kwargs: Any) -> Any:
            user_id = require_identity(provider)
            return await operation(user_id, *args, **kwargs)

        return async_guarded

    @wraps(operation)
    def guarded(*args: Any, **kwargs: Any) -> Any:
        user_id = require_identity(provider)
        return operation(user_id, *args, **kwargs)

    return guarded
