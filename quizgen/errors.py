"""Exception hierarchy for the generation pipeline."""
from __future__ import annotations

PREVIEW_CHARS = 200


class QuizGenError(Exception):
    """Base class for every error raised by quizgen."""


class ConfigurationError(QuizGenError):
    pass


# ── Generation client (retried) ─────────────────────────────────────────────


class GenerationError(QuizGenError):
    """A single failed attempt against the generation service."""


class TransportError(GenerationError):
    pass


class ApiError(GenerationError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UnexpectedResponseShape(ApiError):
    pass


class EmptyGenerationError(GenerationError):
    pass


class GenerationFailedError(QuizGenError):
    """All attempts failed. Carries the last underlying cause."""

    def __init__(
        self,
        last_error: Exception | None,
        model: str,
        max_output_tokens: int,
        attempts: int,
    ):
        self.last_error = last_error
        self.model = model
        self.max_output_tokens = max_output_tokens
        self.attempts = attempts
        super().__init__(
            f"Failed to generate content after {attempts} attempt(s): {last_error} "
            f"(model={model}, maxOutputTokens={max_output_tokens})"
        )


# ── Content processing (never retried) ──────────────────────────────────────


class ContentError(QuizGenError):
    """Generated text could not be turned into entries.

    ``preview`` holds the start of the offending text for diagnosis.
    """

    def __init__(self, message: str, content: str = ""):
        self.message = message
        self.preview = content[:PREVIEW_CHARS] if isinstance(content, str) else ""
        if self.preview:
            super().__init__(f"{message}. Content: {self.preview}...")
        else:
            super().__init__(message)


class ParseError(ContentError):
    pass


class ShapeError(ContentError):
    pass


class ValidationError(QuizGenError):
    """A field violation in strict mode (or a hard-required field in any mode)."""

    def __init__(self, index: int, field: str | None, message: str):
        self.index = index
        self.field = field
        super().__init__(f"Question {index + 1}: {message}")
