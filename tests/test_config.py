import pytest

from eventlens.core.config import Settings
from eventlens.core.reference_data import MAX_EVENT_COUNT


def test_explicit_zero_is_kept(monkeypatch):
    monkeypatch.setenv('EVENTLENS_MAX_EVENT_COUNT', '500')
    settings = Settings(cache_ttl_seconds=0, max_event_count=0)

    assert settings.cache_ttl_seconds == 0
    assert settings.max_event_count == 0


def test_environment_fills_missing_values(monkeypatch):
    monkeypatch.setenv('EVENTLENS_CACHE_BACKEND', 'REDIS')
    monkeypatch.setenv('EVENTLENS_CACHE_TTL', '120')
    monkeypatch.delenv('EVENTLENS_MAX_EVENT_COUNT', raising=False)
    settings = Settings()

    assert settings.cache_backend == 'redis'
    assert settings.cache_ttl_seconds == 120
    assert settings.max_event_count == MAX_EVENT_COUNT


def test_unknown_cache_backend():
    with pytest.raises(ValueError):
        Settings(cache_backend='memcached')
