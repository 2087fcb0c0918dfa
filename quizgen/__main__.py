"""CLI entry point for quizgen.

Usage:
  python -m quizgen generate [--topic T] [--language L] [--position P]
                             [--existing FILE] [--count N] [--strict] [--output FILE]
  python -m quizgen parse FILE [--strict]
  python -m quizgen config
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from quizgen.config import Settings, load_settings
from quizgen.errors import ConfigurationError, QuizGenError

CONVERSATION_LOG = "quizgen-conversations.log"


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = sys.argv[1:] if argv is None else argv
    command = args[0] if args else "help"

    settings = load_settings()
    _setup_logging(settings)

    try:
        if command == "generate":
            return _generate(settings, args[1:])
        elif command == "parse":
            return _parse(settings, args[1:])
        elif command == "config":
            print(json.dumps(settings.to_dict(), indent=2))
            return 0
        else:
            print(f"Unknown command: {command}")
            print("Commands: generate, parse, config")
            return 1
    except QuizGenError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _setup_logging(settings: Settings) -> None:
    level = getattr(logging, str(settings.log_level).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(name)s | %(message)s")
    log_dir = settings.log_dir_full_path
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / CONVERSATION_LOG, encoding="utf-8")
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(name)s %(levelname)s: %(message)s"))
        logging.getLogger("quizgen").addHandler(handler)


def _parse_flag(args: list[str], name: str, default: str | None) -> str | None:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _parse_count(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        count = int(raw)
    except ValueError:
        raise ConfigurationError(f"--count must be a positive integer, got {raw!r}") from None
    if count < 1:
        raise ConfigurationError(f"--count must be a positive integer, got {raw!r}")
    return count


def _read_existing(path: str | None) -> list[str]:
    """One question per line; blank lines ignored. A missing file means none."""
    if not path:
        return []
    p = Path(path)
    if not p.exists():
        return []
    return [line.strip() for line in p.read_text().splitlines() if line.strip()]


def _emit(payload: dict, output: str | None) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(text + "\n")
        print(f"Wrote {len(payload['questions'])} questions to {output}")
    else:
        print(text)


def _generate(settings: Settings, args: list[str]) -> int:
    from quizgen.models import GenerationRequest
    from quizgen.prompts import load_question_format
    from quizgen.providers.llm_gemini import GeminiProvider
    from quizgen.question_generator import generate_questions

    params = {
        "topic": _parse_flag(args, "--topic", None),
        "language": _parse_flag(args, "--language", None),
        "position": _parse_flag(args, "--position", None),
        "count": _parse_count(_parse_flag(args, "--count", None), settings.question_count),
    }
    exclusions = _read_existing(_parse_flag(args, "--existing", None))
    strict = "--strict" in args or settings.strict_validation

    request = GenerationRequest.from_params(params, exclusions)
    llm = GeminiProvider.from_settings(settings)
    question_format = load_question_format(settings.question_format_full_path)

    outcome = asyncio.run(
        generate_questions(
            llm,
            request,
            template=settings.prompt_template,
            question_format=question_format,
            strict=strict,
        )
    )
    _emit(outcome.to_dict(), _parse_flag(args, "--output", None))
    return 0


def _parse(settings: Settings, args: list[str]) -> int:
    from quizgen.question_generator import process_generated_content

    paths = [a for a in args if not a.startswith("--")]
    if not paths:
        print("Usage: python -m quizgen parse FILE [--strict]")
        return 1
    strict = "--strict" in args or settings.strict_validation
    outcome = process_generated_content(Path(paths[0]).read_text(), strict=strict)
    _emit(outcome.to_dict(), None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
