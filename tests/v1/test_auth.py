# tests/v1/test_auth.py
"""Tests for access-token reissue and logout."""

from datetime import timedelta

from fastapi import status
from jose import jwt

from seed_mission.core.security import (
    _encode,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from seed_mission.core.settings import settings
from seed_mission.services.token_store import refresh_key


def test_reissue_with_stored_refresh_token(client, member, token_store) -> None:
    refresh = create_refresh_token(member.id)
    token_store.save(member.id, refresh)

    response = client.post("/api/v1/auth/reissue", json={"refresh_token": refresh})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token_type"] == "bearer"

    payload = decode_token(data["access_token"])
    assert payload["sub"] == str(member.id)
    assert payload["nickname"] == member.nickname

    me = client.get("/api/v1/members/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == status.HTTP_200_OK


def test_reissue_with_revoked_token(client, member, token_store) -> None:
    token_store.save(member.id, create_refresh_token(member.id))
    stale = create_refresh_token(member.id)

    response = client.post("/api/v1/auth/reissue", json={"refresh_token": stale})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_reissue_rejects_access_tokens(client, member, token_store) -> None:
    access = create_access_token(member.id, member.nickname)
    token_store.save(member.id, access)

    response = client.post("/api/v1/auth/reissue", json={"refresh_token": access})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_reissue_with_garbage(client) -> None:
    response = client.post("/api/v1/auth/reissue", json={"refresh_token": "garbage"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_logout_revokes_refresh_token(client, member, auth_headers, token_store, fake_redis) -> None:
    refresh = create_refresh_token(member.id)
    token_store.save(member.id, refresh)

    response = client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert refresh_key(member.id) not in fake_redis.data

    again = client.post("/api/v1/auth/reissue", json={"refresh_token": refresh})
    assert again.status_code == status.HTTP_401_UNAUTHORIZED


def test_refresh_token_cannot_authenticate_requests(client, member) -> None:
    refresh = create_refresh_token(member.id)
    response = client.get("/api/v1/members/me", headers={"Authorization": f"Bearer {refresh}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_expired_access_token(client, member) -> None:
    expired = _encode({"sub": str(member.id), "type": "access"}, timedelta(minutes=-5))
    response = client.get("/api/v1/members/me", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_unknown_member(client) -> None:
    token = create_access_token(123456789, "ghost")
    response = client.get("/api/v1/members/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_signed_with_other_key(client, member) -> None:
    forged = jwt.encode(
        {"sub": str(member.id), "type": "access"},
        "not-the-secret",
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/api/v1/members/me", headers={"Authorization": f"Bearer {forged}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_refresh_tokens_are_distinct(member) -> None:
    assert create_refresh_token(member.id) != create_refresh_token(member.id)
