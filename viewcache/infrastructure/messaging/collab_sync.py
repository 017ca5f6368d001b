"""Redis Pub/Sub sync transport for collaborative documents.

CollabSyncPublisher publishes document updates per (workspace, object)
channel. CollabSyncBinding observes a live document and forwards its
updates through the publisher from a background task; delivery failures
are retried a bounded number of times and then logged.
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from dataclasses import asdict, dataclass
from typing import Any

import redis.asyncio as redis

from viewcache.application.dtos.retrieval import SyncContext
from viewcache.application.interfaces.services import ICollabDocument, ISyncTransport
from viewcache.core.config import Settings, get_settings
from viewcache.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class CollabUpdateMessage:
    """Document update payload for Redis."""

    user_id: str
    workspace_id: str
    object_id: str
    collab_type: int
    device_id: str
    update: str  # base64
    timestamp: str

    @classmethod
    def build(cls, context: SyncContext, update: bytes, device_id: str) -> CollabUpdateMessage:
        return cls(
            user_id=context.user_id,
            workspace_id=context.workspace_id,
            object_id=context.object_id,
            collab_type=int(context.collab_type),
            device_id=device_id,
            update=base64.b64encode(update).decode("ascii"),
            timestamp=utc_now().isoformat(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON publish."""
        return asdict(self)


class CollabSyncPublisher:
    """ISyncTransport that publishes updates to collab_sync:<workspace>:<object>."""

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
        device_id: str = "",
    ) -> None:
        """Initialize. Pass redis_client for DI/testing."""
        self.redis = redis_client
        self.settings = settings or get_settings()
        self.device_id = device_id
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self._connected:
            return
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value() if self.settings.redis_password else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                )
                await self.redis.ping()
                self._connected = True
                logger.info("Redis collab sync connected")
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning("Redis collab sync connection failed: %s", e)
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self._connected = False
            logger.info("Redis collab sync disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected."""
        return self._connected and self.redis is not None

    def channel_for(self, context: SyncContext) -> str:
        return f"{self.settings.sync_channel_prefix}:{context.workspace_id}:{context.object_id}"

    async def publish_update(self, context: SyncContext, update: bytes) -> bool:
        """Publish one update to the object's channel.

        Returns:
            True if published, False if Redis unavailable or the publish failed.
        """
        if not self.is_available() or self.redis is None:
            logger.debug("Redis not available, skipping collab publish")
            return False
        message = CollabUpdateMessage.build(context, update, self.device_id)
        try:
            receivers = await self.redis.publish(
                self.channel_for(context), json.dumps(message.to_dict())
            )
            logger.debug(
                "Published update for %s to %s subscriber(s)", context.object_id, receivers
            )
            return True
        except redis.RedisError:
            logger.exception("Failed to publish collab update for %s", context.object_id)
            return False


class CollabSyncBinding:
    """ISyncBinding: forwards document updates through a sync transport."""

    def __init__(
        self,
        document: ICollabDocument,
        context: SyncContext,
        transport: ISyncTransport,
        max_attempts: int = 3,
        retry_delay: float = 0.5,
    ) -> None:
        self.document = document
        self.context = context
        self._transport = transport
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._queue: asyncio.Queue[bytes] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None
        self._unobserve: Any = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def initialize(self) -> None:
        """Observe the document and start the forwarding task. Requires a running loop."""
        if self._task is not None:
            return
        self._unobserve = self.document.observe_updates(self._queue.put_nowait)
        self._task = asyncio.create_task(
            self._run(), name=f"collab-sync:{self.context.object_id}"
        )

    async def _run(self) -> None:
        while True:
            update = await self._queue.get()
            try:
                await self._deliver(update)
            except Exception:
                logger.exception("Collab sync delivery failed for %s", self.context.object_id)
            finally:
                self._queue.task_done()

    async def _deliver(self, update: bytes) -> None:
        for attempt in range(1, self._max_attempts + 1):
            if await self._transport.publish_update(self.context, update):
                return
            if attempt < self._max_attempts:
                await asyncio.sleep(self._retry_delay)
        logger.warning(
            "Dropping update for %s after %s attempts",
            self.context.object_id,
            self._max_attempts,
        )

    async def flush(self) -> None:
        """Wait until every queued update has been delivered or dropped."""
        await self._queue.join()

    async def close(self) -> None:
        """Stop observing the document and cancel the forwarding task."""
        if self._unobserve is not None:
            self._unobserve()
            self._unobserve = None
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
