"""Domain layer: enums and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from viewcache.domain.enums import CollabType, EntityClass, StrategyType
from viewcache.domain.exceptions import (
    ApiRequestException,
    FetchFailedException,
    NotFoundException,
    PreconditionFailedException,
    ValidationException,
    ViewCacheException,
)

__all__ = [
    # Enums
    "CollabType",
    "EntityClass",
    "StrategyType",
    # Exceptions
    "ApiRequestException",
    "FetchFailedException",
    "NotFoundException",
    "PreconditionFailedException",
    "ValidationException",
    "ViewCacheException",
]
