import datetime
import uuid

import pytest

from app.gamification import rules
from app.gamification.db import get_unlocked_achievements
from app.gamification.schemas import ActivityStats, PointsSnapshot
from app.gamification.service import build_summary, evaluate_and_unlock, grant_points
from app.profiles.models import Profile

TODAY = datetime.date(2026, 3, 10)


def test_level_is_floor_of_hundreds_plus_one():
    assert rules.level_for(0) == 1
    assert rules.level_for(99) == 1
    assert rules.level_for(100) == 2
    assert rules.level_for(320) == 4


def test_level_never_decreases_as_points_grow():
    levels = [rules.level_for(p) for p in range(0, 2000, 7)]
    assert levels == sorted(levels)


def test_points_to_next_level():
    assert rules.points_to_next_level(0) == 100
    assert rules.points_to_next_level(320) == 80
    assert rules.points_to_next_level(400) == 100


def test_add_points_reports_level_up_only_when_level_rises():
    assert rules.add_points(90, 1, 10) == (100, 2, True)
    assert rules.add_points(100, 2, 10) == (110, 2, False)


def test_add_points_rejects_negative_grants():
    with pytest.raises(ValueError):
        rules.add_points(50, 1, -5)


def test_streak_progression():
    assert rules.next_streak(0, None, TODAY) == 1
    assert rules.next_streak(3, TODAY, TODAY) == 3
    assert rules.next_streak(3, TODAY - datetime.timedelta(days=1), TODAY) == 4
    assert rules.next_streak(3, TODAY - datetime.timedelta(days=2), TODAY) == 1


def test_effective_streak_drops_to_zero_after_a_gap():
    assert rules.effective_streak(5, TODAY - datetime.timedelta(days=1), TODAY) == 5
    assert rules.effective_streak(5, TODAY - datetime.timedelta(days=2), TODAY) == 0
    assert rules.effective_streak(0, None, TODAY) == 0


def test_consistent_tracker_unlocks_exactly_at_seven_days():
    six = rules.evaluate_achievements(ActivityStats(streak_days=6), [])
    seven = rules.evaluate_achievements(ActivityStats(streak_days=7), [])
    assert "consistent-tracker" not in [a.id for a in six]
    assert "consistent-tracker" in [a.id for a in seven]


def test_unlocked_achievement_is_never_returned_again():
    unlocked = ["consistent-tracker"]
    assert rules.evaluate_achievements(ActivityStats(streak_days=0), unlocked) == []
    assert "consistent-tracker" not in [
        a.id for a in rules.evaluate_achievements(ActivityStats(streak_days=12), unlocked)
    ]


def test_grant_points_updates_total_streak_and_ledger(db):
    user_id = uuid.uuid4()
    result = grant_points(db, user_id, "chat_exchange", today=TODAY)
    assert result.points_awarded == 10
    assert result.total_points == 10
    assert result.level == 1
    assert result.streak_days == 1
    assert not result.leveled_up

    result = grant_points(db, user_id, "chat_exchange", today=TODAY + datetime.timedelta(days=1))
    assert result.total_points == 20
    assert result.streak_days == 2


def test_grant_points_unknown_action(db):
    with pytest.raises(ValueError):
        grant_points(db, uuid.uuid4(), "walked_the_dog")


def test_first_steps_bonus_is_added_once(db):
    user_id = uuid.uuid4()
    db.add(Profile(id=user_id, nickname="Amani", age_range="25-34", primary_concerns=[]))
    db.commit()

    first = grant_points(db, user_id, "mood_entry", today=TODAY)
    assert [a.id for a in first.unlocked] == ["first-steps"]
    assert first.total_points == 5 + 50

    second = grant_points(db, user_id, "mood_entry", today=TODAY)
    assert second.unlocked == []
    assert second.total_points == 5 + 50 + 5
    assert [u.achievement_id for u in get_unlocked_achievements(db, user_id)] == ["first-steps"]



def test_onboarding_after_a_mood_entry_unlocks_first_steps(db):
    user_id = uuid.uuid4()
    result = grant_points(db, user_id, "mood_entry", today=TODAY)
    assert result.unlocked == []

    db.add(Profile(id=user_id, nickname="Amani", age_range="25-34", primary_concerns=[]))
    db.commit()
    assert [a.id for a in evaluate_and_unlock(db, user_id)] == ["first-steps"]
    assert evaluate_and_unlock(db, user_id) == []
    assert [u.achievement_id for u in get_unlocked_achievements(db, user_id)] == ["first-steps"]

def test_seven_day_streak_unlocks_consistent_tracker_and_keeps_it(db):
    user_id = uuid.uuid4()
    unlocked_on = None
    for day in range(7):
        result = grant_points(db, user_id, "journal_entry", today=TODAY + datetime.timedelta(days=day))
        if "consistent-tracker" in [a.id for a in result.unlocked]:
            unlocked_on = day
    assert unlocked_on == 6

    # a gap resets the streak but not the achievement
    result = grant_points(db, user_id, "journal_entry", today=TODAY + datetime.timedelta(days=10))
    assert result.streak_days == 1
    assert "consistent-tracker" in [u.achievement_id for u in get_unlocked_achievements(db, user_id)]


def test_bonus_can_trigger_level_up(db):
    user_id = uuid.uuid4()
    for _ in range(5):
        result = grant_points(db, user_id, "chat_exchange", today=TODAY)
    # 5 x 10 points plus the 100 point Mindfulness Explorer bonus
    assert result.total_points == 150
    assert result.level == 2
    assert result.leveled_up


def test_summary_marks_achievements_and_live_streak():
    snapshot = PointsSnapshot(total_points=320, level=4, streak_days=7, last_activity_date=TODAY)
    achieved_at = datetime.datetime(2026, 3, 1, tzinfo=datetime.timezone.utc)
    summary = build_summary(snapshot, {"first-steps": achieved_at}, today=TODAY + datetime.timedelta(days=3))

    assert summary.level == 4
    assert summary.points_to_next_level == 80
    assert summary.streak_days == 0
    assert summary.achieved_count == 1
    assert summary.completion_percent == round(100 / len(rules.ACHIEVEMENTS))
    first = next(a for a in summary.achievements if a.id == "first-steps")
    assert first.achieved and first.achieved_at == achieved_at


def test_summary_endpoint_serves_sample_progress_to_anonymous_callers(client):
    response = client.get("/gamification/me")
    assert response.status_code == 200
    body = response.json()
    assert body["total_points"] == 320
    assert body["level"] == 4
    assert body["achieved_count"] == 3


def test_summary_endpoint_for_new_user(client, user_headers):
    response = client.get("/gamification/me", headers=user_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total_points"] == 0
    assert body["level"] == 1
    assert body["achieved_count"] == 0


def test_onboarding_completes_first_steps_through_the_api(client, user_headers):
    client.post("/moods", json={"mood_value": 7}, headers=user_headers)
    response = client.post(
        "/profiles",
        json={"nickname": "Amani", "age_range": "25-34", "terms_accepted": True},
        headers=user_headers,
    )
    assert response.status_code == 201

    body = client.get("/gamification/me", headers=user_headers).json()
    first = next(a for a in body["achievements"] if a["id"] == "first-steps")
    assert first["achieved"] is True
    assert body["total_points"] == 5 + 50
