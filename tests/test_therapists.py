import datetime
import uuid

import pytest

from conftest import bearer
from app.core.fixtures import sample_therapists
from app.therapists.schemas import TherapistFilter
from app.therapists.service import apply_review, collect_facets, filter_therapists

DIRECTORY = sample_therapists(datetime.datetime(2026, 1, 1, tzinfo=datetime.timezone.utc))


def names(therapists):
    return [t.name for t in therapists]


def test_search_covers_name_title_location_and_specialty():
    assert names(filter_therapists(DIRECTORY, TherapistFilter(search="fatima"))) == ["Fatima Hassan"]
    assert names(filter_therapists(DIRECTORY, TherapistFilter(search="psychiatrist"))) == ["Dr. James Omondi"]
    assert names(filter_therapists(DIRECTORY, TherapistFilter(search="ARUSHA"))) == ["Dr. James Omondi"]
    assert names(filter_therapists(DIRECTORY, TherapistFilter(search="anxiety"))) == [
        "Dr. Sarah Mwangi", "Dr. James Omondi",
    ]


def test_any_selected_specialty_or_language_matches():
    criteria = TherapistFilter(specialties=["Trauma", "Stress"])
    assert names(filter_therapists(DIRECTORY, criteria)) == ["Dr. Sarah Mwangi", "Fatima Hassan"]
    assert names(filter_therapists(DIRECTORY, TherapistFilter(languages=["Arabic"]))) == ["Fatima Hassan"]


def test_session_type_filter():
    in_person = filter_therapists(DIRECTORY, TherapistFilter(session_type="in_person"))
    assert names(in_person) == ["Dr. Sarah Mwangi", "Dr. James Omondi"]
    assert len(filter_therapists(DIRECTORY, TherapistFilter(session_type="all"))) == 3


def test_filters_combine():
    criteria = TherapistFilter(search="dr.", languages=["Swahili"], session_type="online", specialties=["PTSD"])
    assert names(filter_therapists(DIRECTORY, criteria)) == ["Dr. James Omondi"]


def test_facets_are_distinct_and_sorted():
    facets = collect_facets(DIRECTORY)
    assert facets.languages == ["Arabic", "English", "Swahili"]
    assert facets.specialties.count("Anxiety") == 1


def test_running_mean_rating():
    assert apply_review(0.0, 0, 4) == (4.0, 1)
    rating, count = apply_review(4.0, 1, 5)
    assert (rating, count) == (4.5, 2)
    with pytest.raises(ValueError):
        apply_review(4.0, 1, 6)


ONBOARDING = {
    "name": "Neema Mushi",
    "title": "Counseling Psychologist",
    "specialties": ["Grief", " Stress "],
    "languages": ["Swahili"],
    "location": "Moshi",
    "bio": "Supports clients through loss and life transitions.",
    "education": "M.A. Counseling, University of Dodoma",
    "price": "TSh 35,000 per session",
    "online": True,
    "in_person": False,
    "terms_accepted": True,
}


def test_onboarding_creates_unapproved_profile_once(client):
    headers = bearer(uuid.uuid4(), user_type="therapist")
    response = client.post("/therapists", json=ONBOARDING, headers=headers)
    assert response.status_code == 201
    body = response.json()
    assert body["approved"] is False
    assert body["specialties"] == ["Grief", "Stress"]

    assert client.post("/therapists", json=ONBOARDING, headers=headers).status_code == 409
    assert client.get("/therapists/me", headers=headers).json()["name"] == "Neema Mushi"
    # not visible until approved
    assert client.get("/therapists", params={"search": "neema"}).json() == []


def test_onboarding_validation(client):
    headers = bearer(uuid.uuid4(), user_type="therapist")
    no_mode = {**ONBOARDING, "online": False, "in_person": False}
    no_terms = {**ONBOARDING, "terms_accepted": False}
    no_languages = {**ONBOARDING, "languages": []}
    for payload in (no_mode, no_terms, no_languages):
        assert client.post("/therapists", json=payload, headers=headers).status_code == 422


def test_regular_users_cannot_onboard_as_therapists(client, user_headers):
    assert client.post("/therapists", json=ONBOARDING, headers=user_headers).status_code == 403


def test_update_cannot_remove_every_session_mode(client):
    headers = bearer(uuid.uuid4(), user_type="therapist")
    client.post("/therapists", json=ONBOARDING, headers=headers)
    assert client.put("/therapists/me", json={"online": False}, headers=headers).status_code == 400
    response = client.put("/therapists/me", json={"in_person": True, "location": "Arusha"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["location"] == "Arusha"


def test_approval_review_and_directory(client, user_headers, admin_headers):
    headers = bearer(uuid.uuid4(), user_type="therapist")
    therapist_id = client.post("/therapists", json=ONBOARDING, headers=headers).json()["id"]

    pending = client.get("/admin/therapists/pending", headers=admin_headers).json()
    assert [t["id"] for t in pending] == [therapist_id]
    response = client.put(f"/admin/therapists/{therapist_id}/approval", json={"approved": True}, headers=admin_headers)
    assert response.status_code == 200

    listed = client.get("/therapists", params={"specialties": ["Grief"], "session_type": "online"}).json()
    assert [t["id"] for t in listed] == [therapist_id]
    facets = client.get("/therapists/facets").json()
    assert facets["languages"] == ["Swahili"]

    response = client.post(f"/therapists/{therapist_id}/reviews", json={"rating": 5}, headers=user_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["therapist"]["rating"] == 5.0
    assert body["therapist"]["reviews"] == 1
    assert body["points"]["points_awarded"] == 5

    assert client.post(
        f"/therapists/{therapist_id}/reviews", json={"rating": 0}, headers=user_headers
    ).status_code == 422

    options = client.get(f"/therapists/{therapist_id}/booking-options").json()
    assert options["session_types"] == ["online"]
    assert "17:00" in options["time_slots"]


def test_unknown_therapist_is_404(client):
    assert client.get(f"/therapists/{uuid.uuid4()}").status_code == 404


def approved_therapist(client, admin_headers):
    therapist_user = uuid.uuid4()
    headers = bearer(therapist_user, user_type="therapist")
    therapist_id = client.post("/therapists", json=ONBOARDING, headers=headers).json()["id"]
    client.put(f"/admin/therapists/{therapist_id}/approval", json={"approved": True}, headers=admin_headers)
    return therapist_id, headers


def test_one_review_per_user(client, user_headers, admin_headers):
    therapist_id, _ = approved_therapist(client, admin_headers)
    first = client.post(f"/therapists/{therapist_id}/reviews", json={"rating": 2}, headers=user_headers)
    assert first.status_code == 200

    again = client.post(f"/therapists/{therapist_id}/reviews", json={"rating": 5}, headers=user_headers)
    assert again.status_code == 409

    other = client.post(f"/therapists/{therapist_id}/reviews", json={"rating": 4}, headers=bearer(uuid.uuid4()))
    body = other.json()["therapist"]
    assert (body["rating"], body["reviews"]) == (3.0, 2)

    summary = client.get("/gamification/me", headers=user_headers).json()
    assert summary["total_points"] == 5 + 75


def test_therapists_cannot_review_themselves(client, admin_headers):
    therapist_id, headers = approved_therapist(client, admin_headers)
    response = client.post(f"/therapists/{therapist_id}/reviews", json={"rating": 5}, headers=headers)
    assert response.status_code == 403
    assert client.get(f"/therapists/{therapist_id}").json()["reviews"] == 0
