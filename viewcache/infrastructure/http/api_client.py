"""Async HTTP client for the workspace/publish API.

Every call is one request over a shared httpx.AsyncClient. Responses use
the envelope {"code": 0, "data": ..., "message": ...}; a non-zero code,
an HTTP error status or a transport error raises ApiRequestException.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from viewcache.core.config import Settings, get_settings
from viewcache.domain.exceptions import ApiRequestException

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


def _seg(value: str) -> str:
    """Quote a path segment."""
    return quote(value, safe="")


class ApiClient:
    """IPublishApi over httpx. Stateless apart from the HTTP connection pool."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        """Initialize client.

        Args:
            settings: Optional settings (defaults to get_settings()).
            http_client: Optional shared client; when omitted one is created and owned.
            token_provider: Optional callable returning the bearer token for requests.
        """
        self.settings = settings or get_settings()
        self._http = (
            http_client
            if http_client is not None
            else httpx.AsyncClient(
                base_url=self.settings.api_base_url,
                timeout=self.settings.api_timeout_seconds,
            )
        )
        self._owns_http = http_client is None
        self._token_provider = token_provider

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"client-version": f"{self.settings.app_name}/{self.settings.app_version}"}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and unwrap the response envelope.

        Returns:
            The envelope's "data" (None for empty bodies).

        Raises:
            ApiRequestException: On transport error, HTTP error or non-zero code.
        """
        try:
            resp = await self._http.request(
                method, path, json=json, params=params, headers=self._headers()
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiRequestException(f"{method} {path} failed: {e}") from e

        body: Any = {}
        if resp.content:
            try:
                body = resp.json()
            except ValueError:
                body = {}
        if not isinstance(body, dict):
            if resp.is_error:
                raise ApiRequestException(
                    resp.reason_phrase or "HTTP error", status_code=resp.status_code
                )
            raise ApiRequestException(
                f"{method} {path} returned an unexpected response body",
                status_code=resp.status_code,
            )
        if resp.is_error:
            message = body.get("message") or resp.reason_phrase or "HTTP error"
            raise ApiRequestException(
                message, status_code=resp.status_code, api_code=body.get("code")
            )
        code = body.get("code", 0)
        if code != 0:
            raise ApiRequestException(
                body.get("message") or "API error",
                status_code=resp.status_code,
                api_code=code,
            )
        return body.get("data")

    # ---- Published views ----

    async def fetch_publish_view_meta(self, namespace: str, publish_name: str) -> Any:
        return await self._request(
            "GET", f"/api/workspace/v1/published/{_seg(namespace)}/{_seg(publish_name)}"
        )

    async def fetch_publish_view(self, namespace: str, publish_name: str) -> Any:
        return await self._request(
            "GET",
            f"/api/workspace/v1/published/{_seg(namespace)}/{_seg(publish_name)}/blob",
        )

    async def fetch_view_info(self, view_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/api/workspace/v1/published-info/{_seg(view_id)}") or {}

    async def get_publish_outline(self, namespace: str) -> Any:
        return await self._request("GET", f"/api/workspace/published-outline/{_seg(namespace)}")

    # ---- Pages and user ----

    async def fetch_page_collab(self, workspace_id: str, view_id: str) -> Any:
        return await self._request(
            "GET", f"/api/workspace/v1/{_seg(workspace_id)}/collab/{_seg(view_id)}"
        )

    async def get_current_user(self) -> Any:
        return await self._request("GET", "/api/user/profile")

    async def get_user_workspace_info(self) -> dict[str, Any] | None:
        return await self._request("GET", "/api/user/workspace")

    # ---- Publish mutations ----

    async def publish_view(
        self, workspace_id: str, view_id: str, payload: dict[str, Any] | None = None
    ) -> Any:
        body = [{"view_id": view_id, **(payload or {})}]
        return await self._request(
            "POST", f"/api/workspace/{_seg(workspace_id)}/publish", json=body
        )

    async def unpublish_view(self, workspace_id: str, view_id: str) -> Any:
        return await self._request(
            "POST",
            f"/api/workspace/{_seg(workspace_id)}/unpublish",
            json={"view_ids": [view_id]},
        )

    async def get_publish_namespace(self, workspace_id: str) -> str:
        return await self._request(
            "GET", f"/api/workspace/{_seg(workspace_id)}/publish-namespace"
        )

    async def update_publish_namespace(
        self, workspace_id: str, payload: dict[str, Any]
    ) -> Any:
        return await self._request(
            "PUT", f"/api/workspace/{_seg(workspace_id)}/publish-namespace", json=payload
        )

    async def get_publish_homepage(self, workspace_id: str) -> Any:
        return await self._request(
            "GET", f"/api/workspace/{_seg(workspace_id)}/publish-default"
        )

    async def update_publish_homepage(self, workspace_id: str, view_id: str) -> Any:
        return await self._request(
            "PUT",
            f"/api/workspace/{_seg(workspace_id)}/publish-default",
            json={"view_id": view_id},
        )

    async def remove_publish_homepage(self, workspace_id: str) -> Any:
        return await self._request(
            "DELETE", f"/api/workspace/{_seg(workspace_id)}/publish-default"
        )

    async def update_publish_config(
        self, workspace_id: str, config: dict[str, Any]
    ) -> Any:
        return await self._request(
            "PATCH", f"/api/workspace/{_seg(workspace_id)}/publish", json=[config]
        )
