from abc import ABC, abstractmethod


class ChatProviderError(RuntimeError):
    """The completion backend failed or returned something unusable."""


class ChatProvider(ABC):
    model_tag: str

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Returns the assistant's reply to a fully built prompt.

        Raises:
            ChatProviderError: On any transport, status or payload failure.
        """
