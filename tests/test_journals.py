import base64
import os
import uuid

import pytest

from conftest import bearer
from app.journals.recorder import SIMULATED_TRANSCRIPT, RecordingError, RecordingTooLarge

AUDIO = base64.b64encode(b"RIFF....WAVEfmt fake audio").decode()


def test_staging_replaces_the_previous_recording(recording_store):
    user_id = uuid.uuid4()
    first = recording_store.stage(user_id, AUDIO)
    second = recording_store.stage(user_id, AUDIO)
    assert first.transcript == SIMULATED_TRANSCRIPT
    assert recording_store.pending_recording(user_id) == second.recording_id


def test_discard_releases_the_recording(recording_store):
    user_id = uuid.uuid4()
    recording_store.stage(user_id, AUDIO)
    assert recording_store.discard(user_id) is True
    assert recording_store.pending_recording(user_id) is None
    assert recording_store.discard(user_id) is False


def test_claim_keeps_the_file(recording_store):
    user_id = uuid.uuid4()
    staged = recording_store.stage(user_id, AUDIO)
    url = recording_store.claim(user_id, staged.recording_id)
    assert url == f"recordings/{user_id}/{staged.recording_id}"
    assert recording_store.pending_recording(user_id) is None
    assert os.path.isfile(os.path.join(recording_store.root, str(user_id), staged.recording_id))

    # staging again must not touch the kept file
    recording_store.stage(user_id, AUDIO)
    assert os.path.isfile(os.path.join(recording_store.root, str(user_id), staged.recording_id))


def test_claim_rejects_unknown_or_foreign_ids(recording_store):
    owner, other = uuid.uuid4(), uuid.uuid4()
    staged = recording_store.stage(owner, AUDIO)
    with pytest.raises(RecordingError):
        recording_store.claim(other, staged.recording_id)
    with pytest.raises(RecordingError):
        recording_store.claim(owner, "../" + staged.recording_id)


def test_invalid_or_oversized_audio(recording_store):
    with pytest.raises(RecordingError):
        recording_store.stage(uuid.uuid4(), "not base64!!")
    with pytest.raises(RecordingTooLarge):
        recording_store.stage(uuid.uuid4(), base64.b64encode(b"x" * 2048).decode())


def test_journal_requires_text(client, user_headers):
    assert client.post("/journals", json={"notes": "  "}, headers=user_headers).status_code == 422


def test_save_and_list_journals(client, user_headers):
    response = client.post("/journals", json={"notes": "Went for a walk."}, headers=user_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["entry"]["notes"] == "Went for a walk."
    assert body["entry"]["audio_url"] is None
    assert body["points"]["points_awarded"] == 10

    client.post("/journals", json={"transcript": "Second entry"}, headers=user_headers)
    entries = client.get("/journals", headers=user_headers).json()
    assert [e["transcript"] for e in entries] == ["Second entry", None]

    entry_id = body["entry"]["id"]
    assert client.get(f"/journals/{entry_id}", headers=user_headers).status_code == 200
    # other users cannot see it
    assert client.get(f"/journals/{entry_id}", headers=bearer(uuid.uuid4())).status_code == 404


def test_recording_upload_and_save(client, user_headers):
    staged = client.post("/journals/recordings", json={"audio_base64": AUDIO}, headers=user_headers)
    assert staged.status_code == 201
    recording = staged.json()
    assert recording["transcript"] == SIMULATED_TRANSCRIPT

    response = client.post(
        "/journals",
        json={"transcript": recording["transcript"], "recording_id": recording["recording_id"]},
        headers=user_headers,
    )
    assert response.status_code == 201
    assert response.json()["entry"]["audio_url"].endswith(recording["recording_id"])

    # already claimed
    response = client.post(
        "/journals",
        json={"notes": "again", "recording_id": recording["recording_id"]},
        headers=user_headers,
    )
    assert response.status_code == 400


def test_discard_endpoint(client, user_headers):
    client.post("/journals/recordings", json={"audio_base64": AUDIO}, headers=user_headers)
    assert client.delete("/journals/recordings", headers=user_headers).json() == {"discarded": True}
    assert client.delete("/journals/recordings", headers=user_headers).json() == {"discarded": False}


def test_oversized_upload_is_413(client, user_headers):
    big = base64.b64encode(b"x" * 4096).decode()
    assert client.post("/journals/recordings", json={"audio_base64": big}, headers=user_headers).status_code == 413


def test_anonymous_callers_see_sample_journals(client):
    entries = client.get("/journals").json()
    assert len(entries) == 2
    assert entries[0]["notes"].startswith("Remember to continue practicing mindfulness")
