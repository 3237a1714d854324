"""Tests for member profile, privacy and mission endpoints."""

import datetime

from fastapi import status

from seed_mission.db.time import today
from seed_mission.models import Member, Participant
from seed_mission.services.token_store import refresh_key
from tests.factories import make_community


def test_my_page(client, member, auth_headers) -> None:
    response = client.get("/api/v1/members/me", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == member.id
    assert data["nickname"] == "tester"
    assert (data["level"], data["total_clear"], data["current_exp"]) == (1, 0, 0)
    assert data["needed_exp_for_next_level"] == 5
    assert data["is_secret"] is False


def test_my_page_requires_valid_token(client) -> None:
    response = client.get("/api/v1/members/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_public_profile_is_visible(client, member, other_auth_headers) -> None:
    response = client.get(f"/api/v1/members/{member.id}", headers=other_auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["nickname"] == "tester"


def test_secret_profile_is_hidden_from_others(
    client, db_session, member, auth_headers, other_auth_headers
) -> None:
    toggled = client.patch("/api/v1/members/me/secret", headers=auth_headers)
    assert toggled.json() == {"is_secret": True}

    hidden = client.get(f"/api/v1/members/{member.id}", headers=other_auth_headers)
    assert hidden.status_code == status.HTTP_403_FORBIDDEN
    assert hidden.json()["detail"] == "This user's profile is closed"

    anonymous = client.get(f"/api/v1/members/{member.id}")
    assert anonymous.status_code == status.HTTP_403_FORBIDDEN

    own = client.get(f"/api/v1/members/{member.id}", headers=auth_headers)
    assert own.status_code == status.HTTP_200_OK

    reopened = client.patch("/api/v1/members/me/secret", headers=auth_headers)
    assert reopened.json() == {"is_secret": False}


def test_unknown_member(client) -> None:
    assert client.get("/api/v1/members/987654").status_code == status.HTTP_404_NOT_FOUND


def test_nickname_check(client, member) -> None:
    taken = client.get("/api/v1/members/nickname/check", params={"nickname": "tester"})
    free = client.get("/api/v1/members/nickname/check", params={"nickname": "newbie"})
    assert taken.json() == {"nickname": "tester", "available": False}
    assert free.json() == {"nickname": "newbie", "available": True}


def test_update_nickname(client, db_session, member, auth_headers) -> None:
    response = client.patch(
        "/api/v1/members/me/nickname",
        json={"nickname": "runner"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"nickname": "runner", "success": True}
    assert db_session.get(Member, member.id).nickname == "runner"


def test_update_nickname_to_taken_one(client, other_member, auth_headers) -> None:
    response = client.patch(
        "/api/v1/members/me/nickname",
        json={"nickname": other_member.nickname},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


def test_update_nickname_keeping_current_is_noop(client, auth_headers) -> None:
    response = client.patch(
        "/api/v1/members/me/nickname",
        json={"nickname": "tester"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK


def test_update_nickname_with_banned_word(client, auth_headers) -> None:
    response = client.patch(
        "/api/v1/members/me/nickname",
        json={"nickname": "superAdmin"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_change_profile_image(client, db_session, member, auth_headers, storage) -> None:
    response = client.put(
        "/api/v1/members/me/profile-image",
        files={"file": ("me.jpg", b"jpeg-bytes", "image/jpeg")},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    url = response.json()["profile_image"]
    assert url.startswith("/uploads/") and url.endswith("me.jpg")
    assert db_session.get(Member, member.id).profile_image == url
    assert any(path.name.endswith("me.jpg") for path in storage.root.iterdir())


def test_change_profile_image_requires_file(client, auth_headers) -> None:
    response = client.put("/api/v1/members/me/profile-image", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_withdraw(client, db_session, member, community, auth_headers, token_store, fake_redis) -> None:
    token_store.save(member.id, "refresh-token")

    response = client.delete("/api/v1/members/me", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert db_session.get(Member, member.id) is None
    assert db_session.query(Participant).filter_by(member_id=member.id).count() == 0
    assert refresh_key(member.id) not in fake_redis.data
    assert client.get("/api/v1/members/me", headers=auth_headers).status_code == (
        status.HTTP_401_UNAUTHORIZED
    )


def test_list_group_missions(client, db_session, member, other_member, auth_headers) -> None:
    joined = make_community(db_session, member, capacity=4, limit_score=2)
    make_community(db_session, other_member)

    response = client.get("/api/v1/members/me/communities", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    rows = response.json()
    assert [row["community_id"] for row in rows] == [joined.id]
    assert rows[0]["current_percent"] == 25.0
    assert rows[0]["success_percent"] == 0.0
    assert rows[0]["date_status"] == "ongoing"
    assert rows[0]["is_writer"] is True


def test_record_and_list_missions(client, auth_headers) -> None:
    for name in ("push-ups", "reading"):
        created = client.post(
            "/api/v1/members/me/missions",
            json={"mission_name": name},
            headers=auth_headers,
        )
        assert created.status_code == status.HTTP_201_CREATED

    day = client.get(
        "/api/v1/members/me/missions",
        params={"day": today().isoformat()},
        headers=auth_headers,
    ).json()
    assert day["count"] == 2
    assert [m["mission_name"] for m in day["missions"]] == ["push-ups", "reading"]

    yesterday = (today() - datetime.timedelta(days=1)).isoformat()
    empty = client.get("/api/v1/members/me/missions", params={"day": yesterday}, headers=auth_headers)
    assert empty.json()["count"] == 0

    me = client.get("/api/v1/members/me", headers=auth_headers).json()
    assert (me["total_clear"], me["level"], me["current_exp"]) == (2, 1, 2)


def test_missions_with_malformed_day(client, auth_headers) -> None:
    response = client.get("/api/v1/members/me/missions", params={"day": "31-12-2024"}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_mission_stats_default_window(client, auth_headers) -> None:
    client.post("/api/v1/members/me/missions", json={"mission_name": "walk"}, headers=auth_headers)

    stats = client.get("/api/v1/members/me/missions/stats", headers=auth_headers).json()
    assert len(stats) == 7
    assert stats[-1] == {"clear_date": today().isoformat(), "count": 1}
    assert sum(row["count"] for row in stats) == 1


def test_missions_on_last_calendar_day(client, auth_headers) -> None:
    response = client.get("/api/v1/members/me/missions", params={"day": "9999-12-31"}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["count"] == 0


def test_mission_stats_at_calendar_edges(client, auth_headers) -> None:
    latest = client.get(
        "/api/v1/members/me/missions/stats", params={"end": "9999-12-31"}, headers=auth_headers
    )
    assert latest.status_code == status.HTTP_200_OK
    assert [row["clear_date"] for row in latest.json()][-1] == "9999-12-31"
    assert len(latest.json()) == 7

    earliest = client.get(
        "/api/v1/members/me/missions/stats", params={"end": "0001-01-02"}, headers=auth_headers
    )
    assert earliest.status_code == status.HTTP_200_OK
    assert [row["clear_date"] for row in earliest.json()] == ["0001-01-01", "0001-01-02"]


def test_mission_stats_rejects_huge_range(client, auth_headers) -> None:
    response = client.get(
        "/api/v1/members/me/missions/stats",
        params={"start": "0001-01-01", "end": today().isoformat()},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "366" in response.json()["detail"]


def test_replacing_profile_image_removes_old_file(client, auth_headers, storage) -> None:
    for name in ("first.jpg", "second.jpg"):
        client.put(
            "/api/v1/members/me/profile-image",
            files={"file": (name, b"jpeg-bytes", "image/jpeg")},
            headers=auth_headers,
        )
    assert [path.name.split("_", 1)[1] for path in storage.root.iterdir()] == ["second.jpg"]
