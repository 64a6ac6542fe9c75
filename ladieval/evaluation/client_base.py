from abc import ABC, abstractmethod


class BaseEvaluationClient(ABC):
    """Contract for provider-specific evaluation AI clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        """Return provider response as plain text."""

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if any."""
