"""HTTP transport: API client for publish, page and user endpoints."""

from viewcache.infrastructure.http.api_client import ApiClient

__all__ = ["ApiClient"]
