"""Application interfaces (ports) implemented by infrastructure."""

from viewcache.application.interfaces.services import (
    ICollabDocument,
    IEntityCache,
    IIdentityProvider,
    IPublishApi,
    ISyncBinding,
    ISyncTransport,
)

__all__ = [
    "ICollabDocument",
    "IEntityCache",
    "IIdentityProvider",
    "IPublishApi",
    "ISyncBinding",
    "ISyncTransport",
]
