"""Parse extracted content, recovering from prose the extractor left behind."""
from __future__ import annotations

import json
import logging

from quizgen.errors import ParseError

_log = logging.getLogger("quizgen.parse")

OPENERS = "[{"
CLOSERS = "]}"


def find_balanced_span(text: str) -> tuple[int, int] | None:
    """Locate the first balanced ``[…]`` / ``{…}`` span in *text*.

    Returns ``(start, end)`` with *end* exclusive, or ``None``. Brackets inside
    double-quoted strings are ignored; a backslash escapes the next character.
    """
    depth = 0
    in_str = False
    escape = False
    start = -1
    for i, ch in enumerate(text):
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch == '"':
            in_str = not in_str
            continue
        if in_str:
            continue
        if ch in OPENERS:
            if depth == 0:
                start = i
            depth += 1
        elif ch in CLOSERS:
            if depth == 0:
                # Stray closer before any opener
                continue
            depth -= 1
            if depth == 0:
                return start, i + 1
    return None


def find_json_by_bracket_matching(text: str) -> str | None:
    span = find_balanced_span(text)
    if span is None:
        return None
    candidate = text[span[0]:span[1]]
    _log.info("Found potential JSON by bracket matching: %.100s", candidate)
    return candidate


def parse_json_content(content: str, original: str):
    """Parse *content*; on failure retry on the first balanced span of *original*.

    The recovery scan runs over the original response rather than *content*
    and, if it fails too, the error from the first attempt is raised.
    """
    try:
        parsed = json.loads(content)
        _log.info("Successfully parsed JSON content")
        return parsed
    except json.JSONDecodeError as e:
        first_error = e
        _log.error("JSON parsing failed: %s", e)
        _log.debug("Content that failed to parse: %s", content)

    _log.info("Attempting to find valid JSON by bracket matching")
    candidate = find_json_by_bracket_matching(original)
    if candidate is not None:
        try:
            parsed = json.loads(candidate)
            _log.info("Successfully parsed JSON using bracket matching")
            return parsed
        except json.JSONDecodeError as e:
            _log.error("Second parsing attempt failed: %s", e)

    raise ParseError(f"Failed to parse generated content: {first_error}", original) from first_error
