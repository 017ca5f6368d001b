"""Pytest configuration and fixtures for viewcache.

Unit tests run against InMemoryEntityCache and an AsyncMock API client;
nothing here needs Redis or network access.
"""

import logging
from collections.abc import Callable, Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest

from viewcache.application.services.client_service import ClientService
from viewcache.application.services.retrieval_orchestrator import RetrievalOrchestrator
from viewcache.application.services.sync_registrar import SyncRegistrar
from viewcache.core.config import Settings, get_settings
from viewcache.infrastructure.cache.memory_cache import InMemoryEntityCache
from viewcache.shared.context import clear_current_user, set_current_user


class FakeDocument:
    """ICollabDocument that lets tests emit updates by hand."""

    def __init__(self) -> None:
        self.observers: list[Callable[[bytes], None]] = []

    def observe_updates(self, callback: Callable[[bytes], None]) -> Callable[[], None]:
        self.observers.append(callback)
        return lambda: self.observers.remove(callback)

    def emit(self, update: bytes) -> None:
        for callback in list(self.observers):
            callback(update)


class StaticIdentity:
    """IIdentityProvider returning a fixed user id."""

    def __init__(self, user_id: str | None) -> None:
        self.user_id = user_id

    def current_user_id(self) -> str | None:
        return self.user_id


@pytest.fixture(autouse=True)
def _reset_settings_and_identity() -> Iterator[None]:
    """Isolate settings cache, identity contextvar and package logger between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    clear_current_user()
    package_logger = logging.getLogger("viewcache")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings() -> Settings:
    """Settings that ignore any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def cache() -> InMemoryEntityCache:
    return InMemoryEntityCache()


@pytest.fixture
def orchestrator(cache: InMemoryEntityCache) -> RetrievalOrchestrator:
    """Fresh orchestrator per test (session state isolated)."""
    return RetrievalOrchestrator(cache, max_pending_invalidations=8)


@pytest.fixture
def api() -> AsyncMock:
    """Mock IPublishApi; tests set return values per call."""
    return AsyncMock()


def make_binding_mock(document=None, context=None) -> MagicMock:
    """ISyncBinding mock: sync initialize(), async close()."""
    binding = MagicMock()
    binding.close = AsyncMock()
    binding.document = document
    binding.context = context
    return binding


@pytest.fixture
def binding_factory() -> MagicMock:
    """Binding factory recording each (document, context) it is called with."""
    return MagicMock(side_effect=make_binding_mock)


@pytest.fixture
def identity() -> StaticIdentity:
    return StaticIdentity("user-1")


@pytest.fixture
def service(
    api: AsyncMock,
    cache: InMemoryEntityCache,
    identity: StaticIdentity,
    binding_factory: MagicMock,
) -> ClientService:
    registrar = SyncRegistrar(binding_factory)
    return ClientService(api, cache, identity, registrar, max_pending_invalidations=8)


@pytest.fixture
def signed_in() -> Iterator[str]:
    """Set the identity contextvar for tests using ContextIdentityProvider."""
    set_current_user("ctx-user")
    yield "ctx-user"
    clear_current_user()


@pytest.fixture
def document() -> FakeDocument:
    return FakeDocument()
