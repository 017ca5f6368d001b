"""Utilities: datetime normalization and ID generators."""

from viewcache.shared.utils.datetime import ensure_utc, parse_timestamp_utc, utc_now
from viewcache.shared.utils.generators import generate_device_id

__all__ = ["ensure_utc", "generate_device_id", "parse_timestamp_utc", "utc_now"]
