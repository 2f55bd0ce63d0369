import datetime
import uuid
from types import SimpleNamespace

import pytest

from app.moderation.db import get_chat_rules
from app.moderation.service import (
    FlagAlreadyResolved,
    ModerationError,
    SEVERITY_ACTIONS,
    dismiss_flag,
    filter_flags,
    review_flag,
)

NOW = datetime.datetime(2026, 6, 1, 9, 0, tzinfo=datetime.timezone.utc)


def flag(content="hello", user_name="User123", reason="Spam", status="pending"):
    return SimpleNamespace(
        id=uuid.uuid4(), user_id=uuid.uuid4(), content=content, user_name=user_name, reason=reason, status=status
    )


FLAGS = [
    flag(content="Buy cheap pills here", reason="Spam"),
    flag(content="You are worthless", user_name="HealthSeeker", reason="Harassment"),
    flag(content="Try this untested remedy", reason="Harmful advice"),
]


def test_filter_matches_content_name_and_reason_case_insensitively():
    assert filter_flags(FLAGS, "PILLS") == [FLAGS[0]]
    assert filter_flags(FLAGS, "healthseeker") == [FLAGS[1]]
    assert filter_flags(FLAGS, "advice") == [FLAGS[2]]


def test_filter_is_order_preserving_and_idempotent():
    once = filter_flags(FLAGS, "e")
    assert once == [f for f in FLAGS if f in once]
    assert filter_flags(once, "e") == once
    assert filter_flags(FLAGS, "") == FLAGS


def test_review_requires_rule_and_reason():
    rule = SimpleNamespace(id=uuid.uuid4(), severity=2)
    with pytest.raises(ModerationError):
        review_flag(flag(), None, "spam link", uuid.uuid4(), NOW)
    with pytest.raises(ModerationError):
        review_flag(flag(), rule, "   ", uuid.uuid4(), NOW)


def test_review_records_action_for_rule_severity():
    target = flag()
    moderator = uuid.uuid4()
    rule = SimpleNamespace(id=uuid.uuid4(), severity=3)
    outcome = review_flag(target, rule, "Threatening another member", moderator, NOW)
    assert outcome["flag"] == {"status": "reviewed", "reviewed_at": NOW, "reviewed_by": moderator}
    assert outcome["violation"]["action"] == "ban"
    assert outcome["violation"]["rule_id"] == rule.id
    assert outcome["violation"]["flagged_message_id"] == target.id
    assert SEVERITY_ACTIONS == {1: "warning", 2: "suspension", 3: "ban"}


def test_dismiss_needs_no_rule():
    updates = dismiss_flag(flag(), uuid.uuid4(), NOW)
    assert updates["status"] == "dismissed"


def test_dismiss_is_idempotent_but_reviewed_flags_stay_reviewed():
    assert dismiss_flag(flag(status="dismissed"), uuid.uuid4(), NOW) is None
    with pytest.raises(FlagAlreadyResolved):
        dismiss_flag(flag(status="reviewed"), uuid.uuid4(), NOW)


def test_resolved_flag_cannot_be_reviewed():
    rule = SimpleNamespace(id=uuid.uuid4(), severity=1)
    with pytest.raises(FlagAlreadyResolved):
        review_flag(flag(status="dismissed"), rule, "late", uuid.uuid4(), NOW)


def report(client, headers, **overrides):
    payload = {
        "message_id": "msg-42",
        "content": "This message contains spam",
        "reason": "Spam",
        **overrides,
    }
    return client.post("/moderation/flags", json=payload, headers=headers)


def test_rules_are_public(client):
    response = client.get("/moderation/rules")
    assert response.status_code == 200
    assert {r["title"] for r in response.json()} >= {"No Harassment", "No Spam"}


def test_queue_is_admin_only(client, user_headers):
    assert client.get("/moderation/flags").status_code == 401
    assert client.get("/moderation/flags", headers=user_headers).status_code == 403


def test_review_flow(client, db, user_headers, admin_headers):
    flag_id = report(client, user_headers).json()["id"]
    report(client, user_headers, content="Kind words", reason="Mistake")

    queue = client.get("/moderation/flags", params={"search": "spam"}, headers=admin_headers).json()
    assert [f["id"] for f in queue["items"]] == [flag_id]
    assert queue["pending_count"] == 2

    response = client.post(f"/moderation/flags/{flag_id}/review", json={"reason": "spam"}, headers=admin_headers)
    assert response.status_code == 400

    spam_rule = next(r for r in get_chat_rules(db) if r.title == "No Spam")
    response = client.post(
        f"/moderation/flags/{flag_id}/review",
        json={"rule_id": str(spam_rule.id), "reason": "Promotional link"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["flag"]["status"] == "reviewed"
    assert body["violation"]["action"] == "warning"
    assert body["violation"]["severity"] == 1

    assert client.post(f"/moderation/flags/{flag_id}/dismiss", headers=admin_headers).status_code == 409

    violations = client.get("/moderation/violations", headers=admin_headers).json()
    assert len(violations) == 1


def test_dismiss_flow(client, user_headers, admin_headers):
    flag_id = report(client, user_headers).json()["id"]
    first = client.post(f"/moderation/flags/{flag_id}/dismiss", headers=admin_headers)
    assert first.status_code == 200
    assert first.json()["status"] == "dismissed"
    again = client.post(f"/moderation/flags/{flag_id}/dismiss", headers=admin_headers)
    assert again.status_code == 200
    assert again.json()["status"] == "dismissed"

    pending = client.get("/moderation/flags", params={"status": "pending"}, headers=admin_headers).json()
    assert pending["items"] == []


def test_flag_belongs_to_the_caller(client, user_id, user_headers, admin_headers):
    someone_else = uuid.uuid4()
    client.post(
        "/profiles",
        json={"nickname": "Baraka", "age_range": "25-34", "terms_accepted": True},
        headers=user_headers,
    )
    response = report(client, user_headers, user_id=str(someone_else), user_name="Someone Else")
    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == str(user_id)
    assert body["user_name"] == "Baraka"

    rules = client.get("/moderation/rules").json()
    rule_id = next(r["id"] for r in rules if r["title"] == "No Spam")
    client.post(
        f"/moderation/flags/{body['id']}/review",
        json={"rule_id": rule_id, "reason": "Promotional link"},
        headers=admin_headers,
    )
    violations = client.get("/moderation/violations", headers=admin_headers).json()
    assert [v["user_id"] for v in violations] == [str(user_id)]


def test_flag_without_profile_uses_anonymous_name(client, user_headers):
    assert report(client, user_headers).json()["user_name"] == "Anonymous User"
