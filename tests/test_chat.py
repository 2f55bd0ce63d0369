import pytest
import requests

from conftest import FakeChatProvider
from app.chat.providers.base import ChatProviderError
from app.chat.providers.together import TogetherChatProvider
from app.chat.schemas import ChatMessage
from app.chat.service import APOLOGY, GREETING, build_prompt, respond
from app.core.dependency import get_chat_provider
from main import app


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def test_prompt_alternates_roles_and_ends_with_assistant():
    history = [
        ChatMessage(role="assistant", content="Hello!"),
        ChatMessage(role="user", content="I can't sleep."),
        ChatMessage(role="assistant", content="That sounds hard."),
    ]
    prompt = build_prompt(history, "Any tips?")
    assert prompt == (
        "Assistant: Hello!\n"
        "User: I can't sleep.\n"
        "Assistant: That sounds hard.\n"
        "User: Any tips?\n"
        "Assistant:"
    )


def test_respond_falls_back_to_apology():
    text, ok = respond(FakeChatProvider(fail=True), [], "hi")
    assert (text, ok) == (APOLOGY, False)


def test_together_provider_posts_completion_request(monkeypatch):
    captured = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        captured.update(url=url, json=json, headers=headers)
        return FakeResponse(payload={"choices": [{"text": "  Take a slow breath.  "}]})

    monkeypatch.setattr(requests, "post", fake_post)
    provider = TogetherChatProvider(api_url="https://chat.test/v1/completions", api_key="k", model="m")
    assert provider.complete("User: hi\nAssistant:") == "Take a slow breath."
    assert captured["headers"]["Authorization"] == "Bearer k"
    assert captured["json"]["max_tokens"] == 500
    assert captured["json"]["temperature"] == 0.7
    assert captured["json"]["top_p"] == 0.9
    assert captured["json"]["stop"] == ["User:", "\n\n"]


@pytest.mark.parametrize("response", [
    FakeResponse(status_code=500, text="boom"),
    FakeResponse(payload={"unexpected": True}),
    FakeResponse(payload={"choices": [{"text": "   "}]}),
])
def test_together_provider_failures(monkeypatch, response):
    monkeypatch.setattr(requests, "post", lambda *args, **kwargs: response)
    provider = TogetherChatProvider(api_url="https://chat.test", api_key="k", model="m")
    with pytest.raises(ChatProviderError):
        provider.complete("User: hi\nAssistant:")


def test_together_provider_timeout(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(requests, "post", fake_post)
    with pytest.raises(ChatProviderError):
        TogetherChatProvider(api_url="https://chat.test", api_key="k", model="m").complete("x")


def test_greeting(client):
    assert client.get("/chat/greeting").json() == {"role": "assistant", "content": GREETING}


def test_successful_exchange_earns_points(client, user_headers, chat_provider):
    response = client.post(
        "/chat/messages",
        json={"message": "I feel anxious", "history": [{"role": "assistant", "content": GREETING}]},
        headers=user_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["reply"] == {"role": "assistant", "content": "I'm here for you."}
    assert body["points"]["points_awarded"] == 10
    assert chat_provider.prompts[0].endswith("User: I feel anxious\nAssistant:")


def test_failed_exchange_returns_apology_without_points(client, user_headers):
    app.dependency_overrides[get_chat_provider] = lambda: FakeChatProvider(fail=True)
    response = client.post("/chat/messages", json={"message": "hello"}, headers=user_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is False
    assert body["reply"]["content"] == APOLOGY
    assert body["points"] is None


def test_chat_requires_sign_in(client):
    assert client.post("/chat/messages", json={"message": "hello"}).status_code == 401


def test_feedback_points_only_for_helpful(client, user_headers):
    helpful = client.post("/chat/feedback", json={"message_id": "m1", "helpful": True}, headers=user_headers)
    assert helpful.json()["points"]["points_awarded"] == 5
    unhelpful = client.post("/chat/feedback", json={"message_id": "m2", "helpful": False}, headers=user_headers)
    assert unhelpful.json() == {"recorded": True, "points": None}


def test_prompt_without_history():
    assert build_prompt([], "hi") == "User: hi\nAssistant:"
