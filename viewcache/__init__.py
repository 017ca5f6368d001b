"""viewcache: load-state-aware retrieval cache for published views and page documents.

Entry point for applications is viewcache.core.session.create_client_session,
which wires settings, cache, HTTP transport and sync publisher into a
ClientService.
"""

from viewcache.application.services.client_service import ClientService
from viewcache.core.session import create_client_session

__all__ = ["ClientService", "create_client_session"]
