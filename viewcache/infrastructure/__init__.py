"""Infrastructure: entity caches, HTTP transport, sync transport."""
