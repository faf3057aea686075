"""Key-value store adapters - Redis and in-memory implementations."""

from .memory import InMemoryKeyValueStore
from .redis import RedisKeyValueStore, create_redis_client

__all__ = ["InMemoryKeyValueStore", "RedisKeyValueStore", "create_redis_client"]
