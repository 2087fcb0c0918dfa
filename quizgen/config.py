from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path

log = logging.getLogger("quizgen.config")

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "model": "gemini-2.0-flash",
    "base_url": "https://generativelanguage.googleapis.com/v1beta",
    "temperature": 0.7,
    "max_output_tokens": 8192,
    "max_retries": 3,
    "retry_delay": 1.0,
    "request_timeout": 60.0,
    "prompt_template": None,
    "question_format_path": None,
    "question_count": 10,
    "strict_validation": False,
    "log_dir": None,
    "log_level": "INFO",
}

# Environment variable -> (settings field, converter)
ENV_OVERRIDES = {
    "GEMINI_MODEL": ("model", str),
    "GEMINI_API_BASE_URL": ("base_url", str),
    "GEMINI_TEMPERATURE": ("temperature", float),
    "GEMINI_MAX_OUTPUT_TOKENS": ("max_output_tokens", int),
    "AI_QUIZ_PROMPT_TEMPLATE": ("prompt_template", str),
    "QUIZGEN_LOG_DIR": ("log_dir", str),
}


@dataclass
class Settings:
    model: str = DEFAULTS["model"]
    base_url: str = DEFAULTS["base_url"]
    temperature: float = DEFAULTS["temperature"]
    max_output_tokens: int = DEFAULTS["max_output_tokens"]
    max_retries: int = DEFAULTS["max_retries"]
    retry_delay: float = DEFAULTS["retry_delay"]
    request_timeout: float = DEFAULTS["request_timeout"]
    prompt_template: str | None = DEFAULTS["prompt_template"]
    question_format_path: str | None = DEFAULTS["question_format_path"]
    question_count: int = DEFAULTS["question_count"]
    strict_validation: bool = DEFAULTS["strict_validation"]
    log_dir: str | None = DEFAULTS["log_dir"]
    log_level: str = DEFAULTS["log_level"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def log_dir_full_path(self) -> Path | None:
        if not self.log_dir:
            return None
        return self.project_root / self.log_dir

    @property
    def question_format_full_path(self) -> Path | None:
        if not self.question_format_path:
            return None
        return self.project_root / self.question_format_path

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _apply_env(settings: Settings) -> Settings:
    for var, (name, convert) in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if not value:
            continue
        try:
            setattr(settings, name, convert(value))
        except ValueError:
            log.warning("Ignoring invalid %s=%r", var, value)
    return settings


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in fields(Settings)}
        filtered = {k: v for k, v in raw.items() if k in known}
        return _apply_env(Settings(**filtered))
    return _apply_env(Settings())


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")


# ── Position metadata ────────────────────────────────────────────────────────

POSITION_DIFFICULTY_TEXT = {
    "intern": "basic understanding of programming concepts",
    "fresher": "fundamental programming knowledge",
    "junior": "practical application of programming concepts",
    "middle": "intermediate understanding of software development",
    "senior": "deep understanding of scalable systems and best practices",
    "expert": "advanced architectural thinking and system design expertise",
}

POSITION_INSTRUCTION = {
    "intern": "suitable for an intern-level candidate",
    "fresher": "appropriate for a fresher with limited experience",
    "junior": "targeted at a junior developer with some experience",
    "middle": "designed for a mid-level developer with solid experience",
    "senior": "targeted at a senior developer with extensive experience",
    "expert": "challenging for expert-level developers and architects",
}

POSITION_LEVELS = {
    "intern": 1,
    "fresher": 2,
    "junior": 3,
    "middle": 4,
    "senior": 5,
    "expert": 6,
}

GENERIC_DIFFICULTY_TEXT = "various difficulty levels"
GENERIC_INSTRUCTION = "suitable for developers of different experience levels"
DEFAULT_LEVEL = 3


@dataclass(frozen=True)
class PositionMetadata:
    difficulty_text: str
    instruction: str
    level: float


def get_position_metadata(position: str) -> PositionMetadata:
    """Look up difficulty text, instruction and level for a seniority label.

    ``POSITION_DIFFICULTY_TEXT_<POS>``, ``POSITION_INSTRUCTION_<POS>`` and
    ``POSITION_LEVEL_<POS>`` environment variables take precedence over the
    built-in tables. Unknown positions get generic phrasing and level 3.
    """
    key = position.lower()
    suffix = key.upper()

    difficulty_text = os.environ.get(f"POSITION_DIFFICULTY_TEXT_{suffix}") or POSITION_DIFFICULTY_TEXT.get(key)
    if difficulty_text is None:
        log.warning("No difficulty text for position %r, using generic value", position)
        difficulty_text = GENERIC_DIFFICULTY_TEXT

    instruction = os.environ.get(f"POSITION_INSTRUCTION_{suffix}") or POSITION_INSTRUCTION.get(key)
    if instruction is None:
        log.warning("No position instruction for position %r, using generic value", position)
        instruction = GENERIC_INSTRUCTION

    level: float | None = None
    env_level = os.environ.get(f"POSITION_LEVEL_{suffix}")
    if env_level:
        try:
            level = float(env_level)
        except ValueError:
            log.warning("Invalid POSITION_LEVEL_%s=%r, using default", suffix, env_level)
    if level is None:
        level = POSITION_LEVELS.get(key, DEFAULT_LEVEL)

    return PositionMetadata(difficulty_text, instruction, level)
