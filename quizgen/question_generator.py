"""Orchestrate the LLM to generate quiz questions and turn its text into records."""
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from quizgen.errors import ContentError, GenerationFailedError, ParseError
from quizgen.models import GenerationRequest, ValidationOutcome
from quizgen.parsers.content_extractor import extract_array_like, extract_content
from quizgen.parsers.json_parser import parse_json_content
from quizgen.parsers.shape_normalizer import normalize_entries
from quizgen.prompts import build_prompt
from quizgen.validator import validate_questions

if TYPE_CHECKING:
    from quizgen.providers.base import LLMProvider

_log = logging.getLogger("quizgen.qgen")


def process_generated_content(content: str, strict: bool = False) -> ValidationOutcome:
    """Run extraction, parsing, shape normalization and validation on raw text.

    Deterministic for a given input, so failures here are never retried.
    """
    if not isinstance(content, str) or not content.strip():
        raise ParseError("Content is empty or not a string")

    original = content.strip()
    _log.info("Original content (first 200 chars): %.200s", original)

    candidate = extract_array_like(extract_content(original))
    _log.info("Cleaned content (first 200 chars): %.200s", candidate)

    tree = parse_json_content(candidate, original)
    entries = normalize_entries(tree, strict=strict)
    return validate_questions(entries, strict=strict)


async def generate_questions(
    llm: LLMProvider,
    request: GenerationRequest,
    template: str | None = None,
    question_format: dict | None = None,
    strict: bool = False,
) -> ValidationOutcome:
    """Generate one batch of questions for *request*.

    Raises GenerationFailedError when the service cannot be reached or keeps
    returning nothing, ContentError subclasses when the text cannot be parsed
    into entries, and ValidationError for strict-mode field violations.
    """
    request_id = uuid.uuid4().hex[:8]
    _log.info(
        "[%s] Starting generation: topic=%s, language=%s, position=%s (level %s), difficulty=%s, "
        "%d excluded, provider=%s",
        request_id, request.topic, request.language, request.position, request.position_level,
        request.difficulty_text, len(request.exclusions), llm.name(),
    )

    prompt = build_prompt(
        template,
        topic=request.topic,
        language=request.language,
        position=request.position,
        difficulty_text=request.difficulty_text,
        position_instruction=request.position_instruction,
        existing_questions=request.exclusions,
        question_format=question_format,
        count=request.question_count,
    )

    try:
        content = await llm.generate(
            prompt,
            temperature=request.temperature,
            max_output_tokens=request.max_output_tokens,
            model=request.model,
            max_retries=request.max_retries,
            retry_delay=request.retry_delay,
        )
    except GenerationFailedError as e:
        _log.error("[%s] Generation failed: %s", request_id, e)
        raise

    try:
        outcome = process_generated_content(content, strict=strict)
    except ContentError as e:
        _log.error("[%s] Content processing failed: %s", request_id, e.message)
        _log.error("[%s] Content preview: %s", request_id, e.preview)
        raise

    _log.info(
        "[%s] Generated %d questions (%d warnings)",
        request_id, len(outcome.questions), len(outcome.warnings),
    )
    return outcome
