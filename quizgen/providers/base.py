from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    @abstractmethod
    async def generate(
        self,
        prompt: str,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        model: str | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ) -> str:
        """Return the generated text, or raise once every attempt has failed."""

    @abstractmethod
    def name(self) -> str:
        ...
