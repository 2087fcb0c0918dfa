from __future__ import annotations

import asyncio
import logging
import os
import time

import httpx

from quizgen.config import Settings
from quizgen.errors import (
    ApiError,
    ConfigurationError,
    EmptyGenerationError,
    GenerationError,
    GenerationFailedError,
    TransportError,
    UnexpectedResponseShape,
)
from quizgen.providers.base import LLMProvider

log = logging.getLogger("quizgen.llm")


def _endpoint(model: str) -> str:
    # Accept both "gemini-2.0-flash" and "gemini-2.0-flash:generateContent"
    if ":generateContent" in model:
        return f"/models/{model}"
    return f"/models/{model}:generateContent"


def _extract_text(data) -> str:
    """Pull ``candidates[0].content.parts[0].text`` out of a response envelope."""
    try:
        part = data["candidates"][0]["content"]["parts"][0]
        text = part.get("text")
    except (KeyError, IndexError, TypeError, AttributeError):
        raise UnexpectedResponseShape(
            f"Unexpected response structure from Gemini API: {str(data)[:200]}"
        ) from None
    if text is not None and not isinstance(text, str):
        raise UnexpectedResponseShape(
            f"Generated text has unexpected type {type(text).__name__}"
        )
    if not text or not text.strip():
        finish = data["candidates"][0].get("finishReason", "?")
        raise EmptyGenerationError(f"Gemini API returned no text (finishReason={finish})")
    return text


class GeminiProvider(LLMProvider):
    """Google Gemini ``generateContent`` over plain HTTP, with retry and backoff."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-2.0-flash",
        temperature: float = 0.7,
        max_output_tokens: int = 8192,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else os.environ.get("GEMINI_API_KEY", "")
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> GeminiProvider:
        return cls(
            base_url=settings.base_url,
            model=settings.model,
            temperature=settings.temperature,
            max_output_tokens=settings.max_output_tokens,
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay,
            timeout=settings.request_timeout,
            **kwargs,
        )

    async def generate(
        self,
        prompt: str,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        model: str | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ) -> str:
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured in environment variables")

        model = model or self.model
        temperature = self.temperature if temperature is None else temperature
        max_output_tokens = max_output_tokens or self.max_output_tokens
        attempts = max(1, self.max_retries if max_retries is None else max_retries)
        base_delay = self.retry_delay if retry_delay is None else retry_delay

        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }
        log.info("── PROMPT (%s) ──\n%s", model, prompt)

        last_error: GenerationError | None = None
        for attempt in range(1, attempts + 1):
            try:
                return await self._request_once(model, body)
            except GenerationError as e:
                last_error = e
                log.warning("Attempt %d/%d failed: %s", attempt, attempts, e)
            if attempt < attempts:
                delay = base_delay * 2 ** (attempt - 1)
                log.info("Retrying in %.2fs", delay)
                await asyncio.sleep(delay)

        raise GenerationFailedError(last_error, model, max_output_tokens, attempts) from last_error

    async def _request_once(self, model: str, body: dict) -> str:
        t0 = time.monotonic()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.post(
                    f"{self.base_url}{_endpoint(model)}",
                    params={"key": self.api_key},
                    json=body,
                )
            except httpx.TransportError as e:
                raise TransportError(f"Request to Gemini API failed: {e!r}") from e

        if not resp.is_success:
            raise ApiError(
                f"API request failed with status {resp.status_code}: {resp.text[:500]}",
                status_code=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError(f"Failed to parse API response: {e}", status_code=resp.status_code) from e

        text = _extract_text(data)
        elapsed = time.monotonic() - t0
        tokens = "?"
        if isinstance(data.get("usageMetadata"), dict):
            tokens = data["usageMetadata"].get("candidatesTokenCount", "?")
        log.info("── RESPONSE (%.1fs, %s tokens) ──\n%s", elapsed, tokens, text)
        return text

    def name(self) -> str:
        return f"gemini/{self.model}"
