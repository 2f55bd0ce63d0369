import logging
from typing import Sequence, Tuple

from app.chat.providers.base import ChatProvider, ChatProviderError
from app.chat.schemas import ChatMessage

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I'm your AI mental health assistant. How are you feeling today? "
    "Remember, I'm here to listen and support you, but I'm not a replacement for professional help."
)
APOLOGY = "I'm sorry, I'm having trouble responding right now. Please try again in a moment."

ROLE_LABELS = {"user": "User", "assistant": "Assistant"}


def build_prompt(history: Sequence[ChatMessage], message: str) -> str:
    """
    Flattens the conversation into the completion prompt:

        User: ...
        Assistant: ...
        User: <message>
        Assistant:
    """
    lines = [f"{ROLE_LABELS[m.role]}: {m.content}" for m in history]
    lines += [f"User: {message}", "Assistant:"]
    return "\n".join(lines)


def respond(provider: ChatProvider, history: Sequence[ChatMessage], message: str) -> Tuple[str, bool]:
    """
    Asks the provider for the next assistant turn.

    Returns:
        Tuple[str, bool]: The reply text and whether it came from the provider.
        Provider failures yield the fixed apology and False.
    """
    prompt = build_prompt(history, message)
    try:
        return provider.complete(prompt), True
    except ChatProviderError as e:
        logger.error(f"Chat provider {provider.model_tag} failed: {e}")
    except Exception as e:
        logger.error(f"Unexpected chat provider error from {provider.model_tag}: {e}")
    return APOLOGY, False
