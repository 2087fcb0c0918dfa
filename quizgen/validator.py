"""Validate generated question entries and, in lenient mode, repair them.

Every field rule is either hard (the entry is unusable without it, fails in
both modes) or soft (lenient mode substitutes a repaired value and records a
warning, strict mode fails). Both modes share the same pass.
"""
from __future__ import annotations

import logging
import re

from quizgen.errors import ValidationError
from quizgen.models import DIFFICULTIES, QuestionRecord, ValidationOutcome, ValidationWarning

_log = logging.getLogger("quizgen.validate")

OPTION_COUNT = 4
# Leading ASCII integer, as models write "2", " 2 " or "1.0"
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
DEFAULT_DIFFICULTY = "medium"
DEFAULT_CATEGORY = "General"


class _EntryCheck:
    """Field-rule helpers bound to one entry."""

    def __init__(self, index: int, strict: bool, warnings: list[ValidationWarning]):
        self.index = index
        self.strict = strict
        self.warnings = warnings

    def hard(self, field: str, message: str) -> ValidationError:
        return ValidationError(self.index, field, message)

    def soft(self, field: str, message: str, repaired):
        if self.strict:
            raise ValidationError(self.index, field, message)
        warning = ValidationWarning(self.index, field, message)
        _log.warning("%s", warning)
        self.warnings.append(warning)
        return repaired


def _as_index(value) -> int | None:
    """*value* as an answer index, if it already is one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and 0 <= value < OPTION_COUNT:
        return value
    return None


def _check_options(entry: dict, check: _EntryCheck) -> list[str]:
    options = entry.get("options")
    if not isinstance(options, list):
        raise check.hard("options", "invalid or missing 'options' array")
    options = list(options)

    if not all(isinstance(o, str) for o in options):
        options = check.soft(
            "options", "non-text option values", ["" if o is None else str(o) for o in options]
        )

    if len(options) != OPTION_COUNT:
        repaired = options[:OPTION_COUNT]
        while len(repaired) < OPTION_COUNT:
            repaired.append(f"Option {len(repaired) + 1} (placeholder)")
        options = check.soft(
            "options", f"has {len(options)} options instead of {OPTION_COUNT}", repaired
        )
    return options


def _check_correct_answer(entry: dict, check: _EntryCheck) -> int:
    raw = entry.get("correctAnswer")
    index = _as_index(raw)
    if index is not None:
        return index

    if isinstance(raw, str):
        m = _LEADING_INT.match(raw)
        if m and 0 <= int(m.group(1)) < OPTION_COUNT:
            repaired = int(m.group(1))
            return check.soft("correctAnswer", f"text value {raw!r} converted to {repaired}", repaired)
    return check.soft(
        "correctAnswer", f"invalid value {raw!r} (must be 0-3), defaulted to 0", 0
    )


def _check_explanation(entry: dict, check: _EntryCheck, correct_answer: int) -> str:
    explanation = entry.get("explanation")
    if isinstance(explanation, str) and explanation.strip():
        return explanation
    return check.soft(
        "explanation",
        "missing the 'explanation' field",
        f"The correct answer is option {correct_answer + 1}.",
    )


def _check_difficulty(entry: dict, check: _EntryCheck) -> str:
    difficulty = entry.get("difficulty")
    if isinstance(difficulty, str) and difficulty.strip().lower() in DIFFICULTIES:
        return difficulty.strip().lower()
    return check.soft(
        "difficulty",
        f"invalid value {difficulty!r} (must be easy, medium, or hard)",
        DEFAULT_DIFFICULTY,
    )


def _check_category(entry: dict, check: _EntryCheck) -> str:
    category = entry.get("category")
    if isinstance(category, str) and category.strip():
        return category
    return check.soft("category", "missing the 'category' field", DEFAULT_CATEGORY)


def validate_entry(
    entry: dict, index: int, strict: bool, warnings: list[ValidationWarning]
) -> QuestionRecord:
    check = _EntryCheck(index, strict, warnings)
    if not isinstance(entry, dict):
        raise check.hard("question", f"expected an object, got {type(entry).__name__}")

    question = entry.get("question")
    if not isinstance(question, str) or not question.strip():
        raise check.hard("question", "missing the 'question' field")

    options = _check_options(entry, check)
    correct_answer = _check_correct_answer(entry, check)
    return QuestionRecord(
        question=question,
        options=tuple(options),
        correct_answer=correct_answer,
        explanation=_check_explanation(entry, check, correct_answer),
        difficulty=_check_difficulty(entry, check),
        category=_check_category(entry, check),
    )


def validate_questions(entries: list[dict], strict: bool = False) -> ValidationOutcome:
    """Validate every entry in order.

    Lenient mode returns all repaired records plus the warnings raised; strict
    mode raises ValidationError at the first violation. Input entries are not
    modified.
    """
    _log.info("Validating %d questions (%s)", len(entries), "strict" if strict else "lenient")
    warnings: list[ValidationWarning] = []
    questions = [validate_entry(entry, i, strict, warnings) for i, entry in enumerate(entries)]
    _log.info("Validated %d questions with %d warnings", len(questions), len(warnings))
    return ValidationOutcome(questions=questions, warnings=warnings)
