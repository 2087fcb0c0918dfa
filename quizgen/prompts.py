"""Prompt template and question format for quiz generation."""
from __future__ import annotations

import json
import re
from pathlib import Path

from quizgen.errors import ConfigurationError

DEFAULT_PROMPT_TEMPLATE = """\
Generate {count} unique multiple-choice technical interview questions for software \
developers on {topic}.
{language}{positionInstruction}The questions should demonstrate {difficultyText}.

Each question must have exactly 4 options and exactly one correct answer. \
correctAnswer is the 0-based index of the correct option. difficulty is one of \
"easy", "medium" or "hard". category names the sub-area the question tests.

Do NOT repeat or closely paraphrase any of these existing questions:
{existingQuestions}

The response must follow this JSON schema:
{schema}

Example:
{example}

Respond with a JSON array of question objects only, with no other text.
"""

QUESTION_FORMAT = {
    "schema": {
        "type": "array",
        "items": {
            "type": "object",
            "required": [
                "question",
                "options",
                "correctAnswer",
                "explanation",
                "difficulty",
                "category",
            ],
            "properties": {
                "question": {"type": "string"},
                "options": {
                    "type": "array",
                    "items": {"type": "string"},
                    "minItems": 4,
                    "maxItems": 4,
                },
                "correctAnswer": {"type": "integer", "minimum": 0, "maximum": 3},
                "explanation": {"type": "string"},
                "difficulty": {"type": "string", "enum": ["easy", "medium", "hard"]},
                "category": {"type": "string"},
            },
        },
    },
    "example": [
        {
            "question": "What does the `finally` block guarantee in a try statement?",
            "options": [
                "It runs only when an exception is raised",
                "It runs whether or not an exception is raised",
                "It runs only when no exception is raised",
                "It suppresses any exception raised in the try block",
            ],
            "correctAnswer": 1,
            "explanation": "A finally block always executes on the way out of the try statement.",
            "difficulty": "easy",
            "category": "Error Handling",
        }
    ],
}


def format_existing_questions(questions: list[str] | tuple[str, ...]) -> str:
    return "\n".join(f"- {q}" for q in questions)


def load_question_format(path: Path | None) -> dict:
    """Read a ``{schema, example}`` document, or return the built-in one."""
    if path is None:
        return QUESTION_FORMAT
    try:
        return json.loads(Path(path).read_text())
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to load question format: {e}") from e


def build_prompt(
    template: str | None,
    topic: str | None = None,
    language: str | None = None,
    position: str | None = None,
    difficulty_text: str | None = None,
    position_instruction: str | None = None,
    existing_questions: list[str] | tuple[str, ...] = (),
    question_format: dict | None = None,
    count: int = 10,
) -> str:
    """Render a generation prompt.

    Placeholders are replaced literally rather than with ``str.format`` so that
    user-supplied templates may contain JSON braces. Missing optional values
    render as generic phrasing or nothing at all.
    """
    fmt = question_format if question_format is not None else QUESTION_FORMAT
    values = {
        "{topic}": f'the topic of "{topic}"' if topic else "various software development topics",
        "{language}": f'Focus on the "{language}" programming language. ' if language else "",
        "{position}": position or "",
        "{positionInstruction}": f"{position_instruction}. " if position_instruction else "",
        "{difficultyText}": difficulty_text or "various difficulty levels",
        "{existingQuestions}": format_existing_questions(existing_questions),
        "{schema}": json.dumps(fmt.get("schema", {})),
        "{example}": json.dumps(fmt.get("example", []), indent=2),
        "{count}": str(count),
    }
    template = template or DEFAULT_PROMPT_TEMPLATE
    # Single pass, so substituted values are never re-scanned for placeholders
    return re.sub(r"\{\w+\}", lambda m: values.get(m.group(0), m.group(0)), template)
