"""Tests for completion percentages, certified-proof rules and levels."""

from __future__ import annotations

import datetime

import pytest

from seed_mission.core.errors import InvalidInputError
from seed_mission.models import Heart
from seed_mission.services import progress
from tests.factories import make_community, make_member, make_proof


def test_completion_percent_examples() -> None:
    assert progress.completion_percent(3, 10) == pytest.approx(30.0)
    assert progress.completion_percent(0, 4) == 0.0
    assert progress.completion_percent(6, 4) == pytest.approx(150.0)


@pytest.mark.parametrize("whole", [0, -3])
def test_percent_rejects_non_positive_base(whole: int) -> None:
    with pytest.raises(InvalidInputError):
        progress.percent(1, whole)


def test_fill_percent() -> None:
    assert progress.fill_percent(2, 8) == pytest.approx(25.0)


@pytest.mark.parametrize(
    ("participants", "threshold"),
    [(1, 1), (2, 1), (3, 1), (4, 2), (5, 2), (6, 3)],
)
def test_group_heart_threshold(participants: int, threshold: int) -> None:
    assert progress.group_heart_threshold(participants) == threshold


def test_solo_counter_only_counts_proofs_inside_window(db_session, member) -> None:
    community = make_community(db_session, member)
    make_proof(db_session, community, member, title="inside")
    outside = make_proof(db_session, community, member, title="too early")
    outside.created_at = datetime.datetime.combine(
        community.start_date - datetime.timedelta(days=2),
        datetime.time(12),
        datetime.UTC,
    )
    db_session.flush()

    assert progress.count_solo_certified(db_session, community) == 1


def test_group_counter_needs_hearts_from_other_participants(db_session, member) -> None:
    teammate = make_member(db_session, nickname="mate")
    outsider = make_member(db_session, nickname="outsider")
    community = make_community(db_session, member, participants=(teammate,))

    hearted = make_proof(db_session, community, member, title="hearted")
    self_hearted = make_proof(db_session, community, member, title="self")
    outsider_hearted = make_proof(db_session, community, member, title="outsider")
    db_session.add_all(
        [
            Heart(proof_id=hearted.id, member_id=teammate.id),
            Heart(proof_id=self_hearted.id, member_id=member.id),
            Heart(proof_id=outsider_hearted.id, member_id=outsider.id),
        ]
    )
    db_session.flush()

    assert progress.count_group_certified(db_session, community) == 1


def test_group_counter_threshold_grows_with_roster(db_session, member) -> None:
    mates = [make_member(db_session, nickname=f"mate{i}") for i in range(3)]
    community = make_community(db_session, member, participants=tuple(mates))
    one_heart = make_proof(db_session, community, member, title="one")
    two_hearts = make_proof(db_session, community, member, title="two")
    db_session.add_all(
        [
            Heart(proof_id=one_heart.id, member_id=mates[0].id),
            Heart(proof_id=two_hearts.id, member_id=mates[0].id),
            Heart(proof_id=two_hearts.id, member_id=mates[1].id),
        ]
    )
    db_session.flush()

    # Four participants: each proof needs hearts from two of the other three.
    assert progress.count_group_certified(db_session, community) == 1


def test_certified_count_picks_rule_by_roster_size(db_session, member, other_member) -> None:
    calls: list[str] = []

    def solo(_db, _community) -> int:
        calls.append("solo")
        return 1

    def group(_db, _community) -> int:
        calls.append("group")
        return 2

    solo_community = make_community(db_session, member)
    group_community = make_community(db_session, member, participants=(other_member,))

    assert progress.certified_proof_count(
        db_session, solo_community, solo_counter=solo, group_counter=group
    ) == 1
    assert progress.certified_proof_count(
        db_session, group_community, solo_counter=solo, group_counter=group
    ) == 2
    assert calls == ["solo", "group"]


@pytest.mark.parametrize(
    ("total", "level", "current", "needed"),
    [
        (0, 1, 0, 5),
        (4, 1, 4, 5),
        (5, 2, 0, 5),
        (7, 2, 2, 5),
        (49, 10, 4, 5),
        (50, 11, 0, 0),
        (63, 11, 13, 0),
    ],
)
def test_level_progress(total: int, level: int, current: int, needed: int) -> None:
    result = progress.level_progress(total)
    assert (result.level, result.current_exp, result.needed_exp) == (level, current, needed)


def test_level_progress_rejects_negative_experience() -> None:
    with pytest.raises(InvalidInputError):
        progress.level_progress(-1)


def test_custom_level_table() -> None:
    table = progress.build_level_table(exp_per_level=3, max_level=3)
    assert table == {1: 3, 2: 3, 3: 0}
    result = progress.level_progress(4, table)
    assert (result.level, result.current_exp, result.remaining_exp) == (2, 1, 2)
    assert progress.needed_exp_for_level(3, table) == 0


def test_solo_counter_includes_the_whole_last_day(db_session, member) -> None:
    community = make_community(db_session, member, end_date=datetime.date.max)
    late = make_proof(db_session, community, member, title="last minute")
    late.created_at = datetime.datetime.combine(datetime.date.max, datetime.time(23, 59), datetime.UTC)
    db_session.flush()

    assert progress.count_solo_certified(db_session, community) == 1
    assert progress.certified_proof_count(db_session, community) == 1
