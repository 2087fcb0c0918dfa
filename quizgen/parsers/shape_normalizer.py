"""Find the list of question entries inside a parsed response.

Shapes are tried in a fixed priority order; each detector returns the entry
list or ``None``.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Callable

from quizgen.errors import ShapeError

_log = logging.getLogger("quizgen.shape")


def looks_like_entry(value) -> bool:
    return isinstance(value, dict) and bool(value.get("question"))


def _starts_with_entry(value) -> bool:
    return isinstance(value, list) and len(value) > 0 and looks_like_entry(value[0])


def from_list(tree, strict: bool) -> list | None:
    if isinstance(tree, list):
        return tree
    return None


def from_questions_property(tree, strict: bool) -> list | None:
    if isinstance(tree, dict) and isinstance(tree.get("questions"), list):
        _log.info("Found questions array property in parsed content")
        return tree["questions"]
    return None


def from_single_entry(tree, strict: bool) -> list | None:
    if not strict and looks_like_entry(tree):
        _log.info("Found single question object, wrapping in array")
        return [tree]
    return None


def from_items(tree, strict: bool) -> list | None:
    if isinstance(tree, dict) and _starts_with_entry(tree.get("items")):
        _log.info("Found items array property with questions in parsed content")
        return tree["items"]
    return None


def from_schema_wrapper(tree, strict: bool) -> list | None:
    """A JSON-schema-like object (``type: "array"``) with the data mixed in."""
    if not (
        isinstance(tree, dict)
        and tree.get("type") == "array"
        and isinstance(tree.get("items"), (dict, list))
    ):
        return None
    _log.info("Found schema definition, looking for actual questions")
    for key, value in tree.items():
        if key != "type" and _starts_with_entry(value):
            _log.info("Found questions in property %r", key)
            return value
    return None


SHAPES: tuple[Callable[[object, bool], list | None], ...] = (
    from_list,
    from_questions_property,
    from_single_entry,
    from_items,
    from_schema_wrapper,
)


def normalize_entries(tree, strict: bool = False) -> list[dict]:
    """Return the ordered entry list contained in *tree*.

    Raises ShapeError when no shape matches or the list holds non-objects.
    """
    for shape in SHAPES:
        entries = shape(tree, strict)
        if entries is not None:
            break
    else:
        raise ShapeError(
            "Generated content is not an array or valid questions object",
            json.dumps(tree)[:500],
        )

    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ShapeError(
                f"Entry {i + 1} is not an object (got {type(entry).__name__})",
                json.dumps(entries)[:500],
            )
    return entries
