"""
Aggregate Repository - cache for computed dashboard aggregates

Keys are built by the caller from content fingerprints; the aggregation
functions themselves never touch a cache.
"""
import json
import os
import time
from collections import OrderedDict
from typing import Any, Optional

import redis


class AggregateRepository:
    """Interface for aggregate caches"""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def store(self, key: str, value: Any, ttl: int = 3600):
        raise NotImplementedError

    def ping(self) -> bool:
        return True


class InMemoryAggregateRepository(AggregateRepository):
    """Process-local TTL cache, evicting least recently used entries"""

    def __init__(self, max_items: int = 256, clock=time.monotonic):
        self.max_items = max_items
        self._clock = clock
        self._items: "OrderedDict[str, tuple]" = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        item = self._items.get(key)
        if item is None:
            return None

        expires_at, value = item
        if expires_at < self._clock():
            self._items.pop(key, None)
            return None

        self._items.move_to_end(key)
        return value

    def store(self, key: str, value: Any, ttl: int = 3600):
        self._items[key] = (self._clock() + ttl, value)
        self._items.move_to_end(key)
        while len(self._items) > self.max_items:
            self._items.popitem(last=False)

    def __len__(self):
        return len(self._items)


class RedisAggregateRepository(AggregateRepository):
    """Aggregate cache in Redis, JSON values with TTL"""

    KEY_PREFIX = "aggregates:v1"

    def __init__(self, host: str = None, port: int = None, client=None):
        self.client = client or redis.Redis(
            host=host or os.getenv('REDIS_HOST', 'localhost'),
            port=int(port or os.getenv('REDIS_PORT', '6379')),
            decode_responses=True
        )

    def _key(self, key: str) -> str:
        return f"{self.KEY_PREFIX}:{key}"

    def get(self, key: str) -> Optional[Any]:
        """Retrieve an aggregate from Redis"""
        data = self.client.get(self._key(key))
        if data:
            return json.loads(data)
        return None

    def store(self, key: str, value: Any, ttl: int = 3600):
        """Store an aggregate in Redis with TTL"""
        self.client.setex(self._key(key), ttl, json.dumps(value, default=str))

    def ping(self) -> bool:
        return bool(self.client.ping())
