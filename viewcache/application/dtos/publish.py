"""DTOs for publish metadata and workspace info (no dependency on transport)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from viewcache.shared.utils.datetime import parse_timestamp_utc


@dataclass(frozen=True)
class PublishInfoRecord:
    """Last known publish metadata for a view.

    May be stale; PublishInfoCache purges it on every mutation that could
    change the view's publish state or configuration.
    """

    namespace: str
    publish_name: str
    publisher_email: str | None
    view_id: str
    published_at: datetime | None
    comment_enabled: bool
    duplicate_enabled: bool

    @classmethod
    def from_api(cls, info: dict[str, Any]) -> PublishInfoRecord:
        """Shape a view-info API response into a record. Caller checks namespace."""
        return cls(
            namespace=info["namespace"],
            publish_name=info.get("publish_name", ""),
            publisher_email=info.get("publisher_email"),
            view_id=info.get("view_id", ""),
            published_at=parse_timestamp_utc(info.get("publish_timestamp")),
            comment_enabled=bool(info.get("comments_enabled", False)),
            duplicate_enabled=bool(info.get("duplicate_enabled", False)),
        )


@dataclass(frozen=True)
class PublishConfigUpdate:
    """Payload for updating one view's publish configuration."""

    view_id: str
    comments_enabled: bool | None = None
    duplicate_enabled: bool | None = None

    def to_api(self) -> dict[str, Any]:
        """Serialize for the API, omitting unset flags."""
        data: dict[str, Any] = {"view_id": self.view_id}
        if self.comments_enabled is not None:
            data["comments_enabled"] = self.comments_enabled
        if self.duplicate_enabled is not None:
            data["duplicate_enabled"] = self.duplicate_enabled
        return data


@dataclass(frozen=True)
class WorkspaceInfo:
    """Signed-in user's workspace overview."""

    user_id: str
    selected_workspace: dict[str, Any]
    workspaces: list[dict[str, Any]]
