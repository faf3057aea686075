"""
Redis key-value store adapter - Implements KeyValueStore protocol.

This module provides the Redis implementation of the domain's store port
using redis-py with decoded (str) responses.

Atomicity Design:
-----------------
get_and_delete() runs as one server-side Lua script (GET, then DEL if a
value was found). Redis executes a script without interleaving other
commands, so two concurrent redemptions of the same key can never both
read the value. A client-side GET followed by DEL would not have this
property.

hash_set_if_exists() is also a script so that marking an expired session
as verified cannot resurrect it as a hash without a TTL.

Every RedisError is re-raised as StoreUnavailable so the domain and the
HTTP boundary never see redis-py types.
"""

import logging

import redis

from src.domain.exceptions import StoreUnavailable

logger = logging.getLogger(__name__)

# KEYS[1] = key; returns the value and deletes it, or nil
GET_AND_DELETE_SCRIPT = """
local value = redis.call('GET', KEYS[1])
if value then
  redis.call('DEL', KEYS[1])
  return value
else
  return nil
end
"""

# KEYS[1] = hash key, ARGV[1] = field, ARGV[2] = value; returns 1 if written
HASH_SET_IF_EXISTS_SCRIPT = """
if redis.call('EXISTS', KEYS[1]) == 1 then
  redis.call('HSET', KEYS[1], ARGV[1], ARGV[2])
  return 1
else
  return 0
end
"""


class RedisKeyValueStore:
    """
    Implements KeyValueStore protocol via redis-py.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The client must be created with decode_responses=True.
    """

    def __init__(self, client: redis.Redis) -> None:
        """
        Initialize store with a Redis client.

        Args:
            client: redis-py client (decode_responses=True)
        """
        self._client = client
        self._get_and_delete = client.register_script(GET_AND_DELETE_SCRIPT)
        self._hash_set_if_exists = client.register_script(HASH_SET_IF_EXISTS_SCRIPT)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except redis.RedisError as e:
            raise StoreUnavailable(f"SET failed for {key}") from e

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(key)
        except redis.RedisError as e:
            raise StoreUnavailable(f"GET failed for {key}") from e

    def get_and_delete(self, key: str) -> str | None:
        try:
            return self._get_and_delete(keys=[key])
        except redis.RedisError as e:
            raise StoreUnavailable(f"Atomic GET/DEL failed for {key}") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except redis.RedisError as e:
            raise StoreUnavailable(f"DEL failed for {key}") from e

    def hash_create(self, key: str, fields: dict[str, str], ttl_seconds: int) -> None:
        """Replace the hash and set its TTL in one MULTI/EXEC transaction."""
        try:
            with self._client.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                pipe.hset(key, mapping=fields)
                pipe.expire(key, ttl_seconds)
                pipe.execute()
        except redis.RedisError as e:
            raise StoreUnavailable(f"HSET failed for {key}") from e

    def hash_get_all(self, key: str) -> dict[str, str]:
        try:
            return self._client.hgetall(key)
        except redis.RedisError as e:
            raise StoreUnavailable(f"HGETALL failed for {key}") from e

    def hash_set_if_exists(self, key: str, field: str, value: str) -> bool:
        try:
            return self._hash_set_if_exists(keys=[key], args=[field, value]) == 1
        except redis.RedisError as e:
            raise StoreUnavailable(f"Conditional HSET failed for {key}") from e

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            raise StoreUnavailable("PING failed") from e


def create_redis_client(url: str) -> redis.Redis:
    """Create a redis-py client returning str values."""
    logger.info("Connecting to Redis...")
    return redis.Redis.from_url(url, decode_responses=True)
