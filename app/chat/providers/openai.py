import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from app.chat.providers.base import ChatProvider, ChatProviderError
from app.chat.providers.together import COMPLETION_PARAMS
from app.core.config import CHAT_TIMEOUT_SECONDS, OPENAI_API_KEY, OPENAI_CHAT_MODEL

logger = logging.getLogger(__name__)


class OpenAIChatProvider(ChatProvider):
    def __init__(self, api_key: Optional[str] = OPENAI_API_KEY, model: str = OPENAI_CHAT_MODEL):
        self.client = OpenAI(api_key=api_key, timeout=CHAT_TIMEOUT_SECONDS) if api_key else None
        self.model = model
        self.model_tag = f"openai:{model}"
        if self.client is None:
            logger.warning("OPENAI_API_KEY is not set; chat replies will fall back to the apology")

    def complete(self, prompt: str) -> str:
        if self.client is None:
            raise ChatProviderError("Missing OPENAI_API_KEY in environment")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=COMPLETION_PARAMS["max_tokens"],
                temperature=COMPLETION_PARAMS["temperature"],
                top_p=COMPLETION_PARAMS["top_p"],
                stop=COMPLETION_PARAMS["stop"],
            )
        except OpenAIError as e:
            raise ChatProviderError(f"OpenAI request failed: {e}") from e

        text = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not text:
            raise ChatProviderError("OpenAI returned an empty completion")
        return text
