import uuid

import app.core.dependency as dependency
from conftest import bearer, make_token


def test_anonymous_context(client):
    body = client.get("/auth/me").json()
    assert body["is_authenticated"] is False
    assert body["user_id"] is None


def test_token_claims_become_the_context(client, user_id):
    body = client.get("/auth/me", headers=bearer(user_id, user_type="therapist")).json()
    assert body["user_id"] == str(user_id)
    assert body["user_type"] == "therapist"
    assert body["is_admin"] is False


def test_admin_by_email_or_type(client):
    by_email = client.get("/auth/me", headers=bearer(uuid.uuid4(), email="Admin@MindCare.test")).json()
    by_type = client.get("/auth/me", headers=bearer(uuid.uuid4(), user_type="admin")).json()
    assert by_email["is_admin"] and by_type["is_admin"]


def test_bad_tokens_are_rejected(client):
    forged = make_token(uuid.uuid4(), secret="someone-else")
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {forged}"}).status_code == 401
    not_uuid = make_token("not-a-uuid")
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {not_uuid}"}).status_code == 401


def test_onboarding_once(client, user_headers):
    payload = {
        "nickname": "  Baraka ",
        "age_range": "25-34",
        "primary_concerns": ["Anxiety", "Sleep"],
        "terms_accepted": True,
    }
    response = client.post("/profiles", json=payload, headers=user_headers)
    assert response.status_code == 201
    assert response.json()["nickname"] == "Baraka"
    assert response.json()["preferred_language"] == "Swahili"
    assert client.post("/profiles", json=payload, headers=user_headers).status_code == 409

    response = client.put("/profiles/me", json={"preferred_language": "English"}, headers=user_headers)
    assert response.json()["preferred_language"] == "English"


def test_onboarding_validation(client, user_headers):
    missing_age = {"nickname": "Baraka", "terms_accepted": True}
    no_terms = {"nickname": "Baraka", "age_range": "25-34", "terms_accepted": False}
    blank_name = {"nickname": "   ", "age_range": "25-34", "terms_accepted": True}
    for payload in (missing_age, no_terms, blank_name):
        assert client.post("/profiles", json=payload, headers=user_headers).status_code == 422


def test_settings_defaults_and_update(client, user_headers):
    settings = client.get("/profiles/me/settings", headers=user_headers).json()
    assert settings["theme"] == "system"
    assert settings["mood_reminders"] is True

    updated = client.put("/profiles/me/settings", json={"theme": "dark"}, headers=user_headers).json()
    assert updated["theme"] == "dark"
    assert updated["mood_reminders"] is True


def test_fixture_mode_serves_samples_and_blocks_writes(client, user_headers, monkeypatch):
    monkeypatch.setattr(dependency, "DATA_SOURCE", "fixtures")
    moods = client.get("/moods", params={"timeframe": "year"}, headers=user_headers).json()
    assert moods["entry_count"] == 7
    therapists = client.get("/therapists").json()
    assert [t["name"] for t in therapists][0] == "Dr. Sarah Mwangi"
    assert client.post("/moods", json={"mood_value": 5}, headers=user_headers).status_code == 503
