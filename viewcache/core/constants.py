"""Core constants: cache key prefixes and shared literal values.

Single source of truth for storage key structure and user-facing
not-found messages.
"""

# Storage key prefix for cached entities (entity:<class>:<key>)
CACHE_PREFIX_ENTITY = "entity"

# Delimiter for storage keys
CACHE_KEY_SEP = ":"

# Delimiter inside entity keys (namespace_publishname, user_workspace_view)
ENTITY_KEY_SEP = "_"

MSG_VIEW_NOT_PUBLISHED = "View has not been published yet"
MSG_VIEW_NOT_FOUND = "View not found"
MSG_DOCUMENT_NOT_FOUND = "Document not found"
MSG_USER_NOT_FOUND = "User not found"
MSG_WORKSPACE_INFO_NOT_FOUND = "Workspace info not found"
