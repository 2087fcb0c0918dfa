from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from quizgen.config import get_position_metadata

DIFFICULTIES = ("easy", "medium", "hard")


@dataclass(frozen=True)
class GenerationRequest:
    """Parameters for one pipeline run. Controls left as None use provider defaults."""

    topic: str | None = None
    language: str | None = None
    position: str | None = None  # seniority label, e.g. "junior"
    position_level: float | None = None
    difficulty_text: str | None = None
    position_instruction: str | None = None
    exclusions: tuple[str, ...] = ()
    question_count: int = 10
    model: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None
    max_retries: int | None = None
    retry_delay: float | None = None  # seconds

    @classmethod
    def from_params(
        cls, params: Mapping, exclusions: Iterable[str] = ()
    ) -> GenerationRequest:
        """Build a request from the host's camelCase parameter object.

        When a position is given without difficulty text or instruction, the
        missing pieces come from the position metadata table.
        """
        position = params.get("position")
        difficulty_text = params.get("difficultyText")
        instruction = params.get("positionInstruction")
        level = None
        if position:
            position = str(position).lower()
            meta = get_position_metadata(position)
            level = meta.level
            if difficulty_text is None:
                difficulty_text = meta.difficulty_text
            if instruction is None:
                instruction = meta.instruction
        return cls(
            topic=params.get("topic"),
            language=params.get("language"),
            position=position,
            position_level=level,
            difficulty_text=difficulty_text,
            position_instruction=instruction,
            exclusions=tuple(q for q in exclusions if q and q.strip()),
            question_count=params.get("count", 10),
            model=params.get("model"),
            temperature=params.get("temperature"),
            max_output_tokens=params.get("maxOutputTokens"),
            max_retries=params.get("maxRetries"),
            retry_delay=params.get("retryDelay"),
        )


@dataclass(frozen=True)
class QuestionRecord:
    question: str
    options: tuple[str, str, str, str]
    correct_answer: int
    explanation: str
    difficulty: str  # easy | medium | hard
    category: str

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer]

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
            "difficulty": self.difficulty,
            "category": self.category,
        }


@dataclass(frozen=True)
class ValidationWarning:
    index: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"Question {self.index + 1} '{self.field}': {self.message}"


@dataclass
class ValidationOutcome:
    questions: list[QuestionRecord]
    warnings: list[ValidationWarning] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "questions": [q.to_dict() for q in self.questions],
            "warnings": [str(w) for w in self.warnings],
        }
