"""ID generators (session device id)."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()

DEVICE_ID_LENGTH = 8


def generate_device_id() -> str:
    """Generate a short per-session device identifier from a CUID2.

    Returns:
        An 8-character identifier.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result[:DEVICE_ID_LENGTH]
