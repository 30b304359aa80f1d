"""
Result store: async Redis, one string key per uploaded object.

Module-level singleton client so a single connection pool is reused per process.
"""
from __future__ import annotations

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from stream_relay.exceptions import ResultStoreError
from stream_relay.schemas import ResultRecord

logger = logging.getLogger(__name__)

_client: aioredis.Redis | None = None


def get_redis_client(redis_url: str) -> aioredis.Redis:
    """Return (and lazily create) the module-level async Redis client."""
    global _client
    if _client is None:
        _client = aioredis.from_url(redis_url, decode_responses=True)
    return _client


async def close_redis_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


class RedisResultStore:
    def __init__(self, client: aioredis.Redis) -> None:
        self.client = client

    async def put(self, object_key: str, record: ResultRecord) -> None:
        """Write the record under the object key. Last write wins."""
        try:
            # Absent playback is left out, not written as null.
            await self.client.set(object_key, record.model_dump_json(exclude_none=True))
        except RedisError as exc:
            logger.error("Redis SET failed for key %s: %s", object_key, exc)
            raise ResultStoreError(object_key) from exc
