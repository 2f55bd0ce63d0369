import logging
from typing import Any, Dict, Optional

import requests

from app.chat.providers.base import ChatProvider, ChatProviderError
from app.core.config import CHAT_API_KEY, CHAT_API_URL, CHAT_MODEL, CHAT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

COMPLETION_PARAMS: Dict[str, Any] = {
    "max_tokens": 500,
    "temperature": 0.7,
    "top_p": 0.9,
    "stop": ["User:", "\n\n"],
}


class TogetherChatProvider(ChatProvider):
    """Raw completions endpoint (Together-compatible) called over HTTP."""

    def __init__(
        self,
        api_url: str = CHAT_API_URL,
        api_key: Optional[str] = CHAT_API_KEY,
        model: str = CHAT_MODEL,
        timeout: float = CHAT_TIMEOUT_SECONDS,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.model_tag = f"together:{model}"

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {"model": self.model, "prompt": prompt, **COMPLETION_PARAMS}

    def complete(self, prompt: str) -> str:
        if not self.api_key:
            raise ChatProviderError("CHAT_API_KEY is not configured")
        try:
            resp = requests.post(
                self.api_url,
                json=self.build_payload(prompt),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ChatProviderError(f"Chat API request failed: {e}") from e

        if resp.status_code != 200:
            logger.error("Chat API returned %s: %s", resp.status_code, resp.text[:500])
            raise ChatProviderError(f"Chat API returned status {resp.status_code}")

        try:
            text = resp.json()["choices"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ChatProviderError("Chat API returned an unexpected payload") from e

        text = (text or "").strip()
        if not text:
            raise ChatProviderError("Chat API returned an empty completion")
        return text
