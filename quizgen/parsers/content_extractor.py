"""Isolate the structured-data part of a generated response.

Generators wrap their answer in markdown fences and surround it with prose.
``extract_content`` runs an ordered list of strategies, each returning the
candidate text or ``None``; the first non-empty result wins.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable

_log = logging.getLogger("quizgen.extract")

FENCE = "```"
DATA_LABELS = ("json", "javascript", "js")


def extract_labeled_block(text: str, label: str) -> str | None:
    """Interior of the first fenced block labeled *label* (case-insensitive)."""
    m = re.search(rf"```{re.escape(label)}\b\s*(.*?)\s*```", text, re.DOTALL | re.IGNORECASE)
    if m and m.group(1):
        return m.group(1).strip()
    return None


def extract_data_block(text: str) -> str | None:
    for label in DATA_LABELS:
        content = extract_labeled_block(text, label)
        if content:
            _log.info("Extracted content from %s code block", label)
            return content
    return None


def extract_any_block(text: str) -> str | None:
    m = re.search(r"```\s*(.*?)\s*```", text, re.DOTALL)
    if m and m.group(1):
        _log.info("Extracted content from generic code block")
        return m.group(1).strip()
    return None


def extract_by_split(text: str) -> str | None:
    """Middle segment of ``text.split(FENCE)``, minus a language label line."""
    parts = text.split(FENCE)
    if len(parts) < 3:
        return None
    lines = parts[1].strip().split("\n")
    if lines and lines[0].strip().lower() in DATA_LABELS:
        lines = lines[1:]
    content = "\n".join(lines).strip()
    if content:
        _log.info("Extracted content using split method")
    return content or None


STRATEGIES: tuple[Callable[[str], str | None], ...] = (
    extract_data_block,
    extract_any_block,
    extract_by_split,
)


def extract_content(text: str) -> str:
    """Return the candidate structured-data substring of *text*.

    Text without fences is returned unchanged, as is fenced text none of the
    strategies can make sense of.
    """
    if FENCE not in text:
        return text
    _log.info("Detected code block in response, attempting to extract content")
    for strategy in STRATEGIES:
        content = strategy(text)
        if content:
            return content
    _log.warning("No extraction strategy matched, using raw content")
    return text


def extract_array_like(text: str) -> str:
    """Trim prose around a list when *text* does not already start with one.

    Text that starts with an object is left alone: cutting it down to its
    first nested list would throw away the wrapper the shape normalizer needs.
    """
    if text.startswith(("[", "{")) or "[" not in text or "]" not in text:
        return text
    start = text.index("[")
    end = text.rindex("]") + 1
    if start < end:
        _log.info("Content does not start with [, extracted array portion")
        return text[start:end]
    return text
