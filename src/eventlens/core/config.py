"""
EventLens runtime configuration

Read from the environment once at startup and handed to the app factory.
"""

import logging
import os
from typing import Optional

from eventlens.core.reference_data import MAX_EVENT_COUNT

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _pick(value, env_name: str, default: str):
    """Explicit argument wins, including falsy ones like 0"""
    return value if value is not None else os.getenv(env_name, default)


class Settings:
    """Typed view over the EVENTLENS_* / REDIS_* environment variables"""

    def __init__(
        self,
        log_level: Optional[str] = None,
        cache_backend: Optional[str] = None,
        cache_ttl_seconds: Optional[int] = None,
        cache_max_items: Optional[int] = None,
        redis_host: Optional[str] = None,
        redis_port: Optional[int] = None,
        max_event_count: Optional[int] = None,
    ):
        self.log_level = _pick(log_level, 'EVENTLENS_LOG_LEVEL', 'INFO').upper()
        self.cache_backend = _pick(cache_backend, 'EVENTLENS_CACHE_BACKEND', 'memory').lower()
        self.cache_ttl_seconds = int(_pick(cache_ttl_seconds, 'EVENTLENS_CACHE_TTL', '3600'))
        self.cache_max_items = int(_pick(cache_max_items, 'EVENTLENS_CACHE_MAX_ITEMS', '256'))
        self.redis_host = _pick(redis_host, 'REDIS_HOST', 'localhost')
        self.redis_port = int(_pick(redis_port, 'REDIS_PORT', '6379'))
        self.max_event_count = int(_pick(max_event_count, 'EVENTLENS_MAX_EVENT_COUNT', str(MAX_EVENT_COUNT)))

        if self.cache_backend not in ('memory', 'redis'):
            raise ValueError(f"EVENTLENS_CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}")


def configure_logging(level: str = 'INFO'):
    """Process-wide logging setup; call from entry points only"""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
