"""Tests for the redis-backed refresh token store."""

from seed_mission.core.settings import settings
from seed_mission.services.token_store import RefreshTokenStore, refresh_key
from tests.factories import FakeRedis


def test_save_get_and_match() -> None:
    client = FakeRedis()
    store = RefreshTokenStore(client)

    store.save(7, "token-a")

    assert store.get(7) == "token-a"
    assert store.matches(7, "token-a") is True
    assert store.matches(7, "token-b") is False
    assert client.expiry[refresh_key(7)] == settings.refresh_token_ttl_seconds


def test_save_overwrites_previous_token() -> None:
    store = RefreshTokenStore(FakeRedis())
    store.save(1, "old")
    store.save(1, "new", ttl_seconds=60)
    assert store.get(1) == "new"
    assert store.matches(1, "old") is False


def test_delete_reports_presence() -> None:
    store = RefreshTokenStore(FakeRedis())
    store.save(3, "token")
    assert store.delete(3) is True
    assert store.delete(3) is False
    assert store.get(3) is None
    assert store.matches(3, "token") is False


def test_bytes_values_are_decoded() -> None:
    client = FakeRedis()
    client.set(refresh_key(9), b"raw-bytes")
    assert RefreshTokenStore(client).get(9) == "raw-bytes"
