"""Entity key and storage key builders. Single place for key format.

Entity keys are deterministic: equal parameters always yield equal keys.
"""

from viewcache.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_ENTITY, ENTITY_KEY_SEP
from viewcache.domain.enums import EntityClass
from viewcache.domain.exceptions import ValidationException


def _validate_key_components(components: list[tuple[str, str]]) -> None:
    """Raise ValidationException on the first empty component.

    Args:
        components: List of (value, name) pairs to validate.

    Raises:
        ValidationException: If any value is empty.
    """
    for value, name in components:
        if not value:
            raise ValidationException(f"Key component {name!r} must be non-empty", field=name)


def publish_view_key(namespace: str, publish_name: str) -> str:
    """Entity key for a published view (namespace + publish name)."""
    _validate_key_components([(namespace, "namespace"), (publish_name, "publish_name")])
    return f"{namespace}{ENTITY_KEY_SEP}{publish_name}"


def page_view_key(user_id: str, workspace_id: str, view_id: str) -> str:
    """Entity key for a page document as seen by one user."""
    _validate_key_components(
        [(user_id, "user_id"), (workspace_id, "workspace_id"), (view_id, "view_id")]
    )
    return f"{user_id}{ENTITY_KEY_SEP}{workspace_id}{ENTITY_KEY_SEP}{view_id}"


def user_key(user_id: str) -> str:
    """Entity key for a user profile."""
    _validate_key_components([(user_id, "user_id")])
    return user_id


def storage_key(entity_class: EntityClass, key: str) -> str:
    """Redis key for a stored entity record."""
    return f"{CACHE_PREFIX_ENTITY}{CACHE_KEY_SEP}{entity_class.value}{CACHE_KEY_SEP}{key}"
