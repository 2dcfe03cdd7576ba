"""Domain Models: value objects and entities shared across the cache context."""
