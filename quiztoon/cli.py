#!/usr/bin/env python3
"""quiztoon - convert quizzes between TOON and JSON.

Usage:
    quiztoon parse <quiz.toon> [-o quiz.json] [-b]
    quiztoon stringify <quiz.json> [-o quiz.toon]
    quiztoon format <quiz.toon> [-o out.toon | --in-place]
    quiztoon lint <quiz.toon>
    quiztoon example
    quiztoon generate <material.txt> [-n 10] [--provider anthropic|openai] [-o quiz.toon]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from . import log
from .agent import QuizGenerator
from .config import GeneratorConfig
from .editor import format_toon, lint
from .errors import ToonError
from .parser import parse
from .schema import ParsedQuiz
from .stringifier import example_toon, stringify

if TYPE_CHECKING:
    import tiktoken as _tiktoken

__all__ = ["main", "count_tokens"]

# Lazy-load tiktoken for token counting
_tiktoken_enc: _tiktoken.Encoding | None = None


def count_tokens(text: str) -> int:
    """Count tokens with the cl100k_base encoding."""
    global _tiktoken_enc
    if _tiktoken_enc is None:
        import tiktoken
        _tiktoken_enc = tiktoken.get_encoding("cl100k_base")
    return len(_tiktoken_enc.encode(text))


def _write(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text if text.endswith("\n") else text + "\n")


def _cmd_parse(args: argparse.Namespace) -> int:
    toon = args.input.read_text(encoding="utf-8")
    parsed = parse(toon)
    as_json = parsed.model_dump_json(by_alias=True, indent=2)
    _write(as_json, args.output)

    if args.benchmark:
        toon_tokens = count_tokens(toon)
        json_tokens = count_tokens(as_json)
        savings = f"{(json_tokens - toon_tokens) / json_tokens * 100:.1f}%" if json_tokens else "N/A"
        print(f"Tokens: {json_tokens} JSON → {toon_tokens} TOON ({savings} savings)", file=sys.stderr)
    return 0


def _cmd_stringify(args: argparse.Namespace) -> int:
    data = json.loads(args.input.read_text(encoding="utf-8"))
    quiz = ParsedQuiz.model_validate(data)
    _write(stringify(quiz.header, quiz.questions), args.output)
    return 0


def _cmd_format(args: argparse.Namespace) -> int:
    formatted = format_toon(args.input.read_text(encoding="utf-8"))
    _write(formatted, args.input if args.in_place else args.output)
    return 0


def _cmd_lint(args: argparse.Namespace) -> int:
    diagnostics = lint(args.input.read_text(encoding="utf-8"))
    for d in diagnostics:
        print(f"{args.input}:{d.line}: {d.severity}: {d.message}")
    return 1 if diagnostics else 0


def _cmd_example(args: argparse.Namespace) -> int:
    _write(example_toon(), None)
    return 0


def _cmd_generate(args: argparse.Namespace) -> int:
    config = GeneratorConfig.from_env()
    generator = QuizGenerator(provider=args.provider, model=args.model, config=config)
    quiz = generator.generate(args.input.read_text(encoding="utf-8"), question_count=args.count)
    _write(stringify(quiz.header, quiz.questions), args.output)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    p = argparse.ArgumentParser(
        prog="quiztoon",
        description="Convert quizzes between TOON and JSON",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    cmd = sub.add_parser("parse", help="TOON → JSON")
    cmd.add_argument("input", type=Path, help="TOON file")
    cmd.add_argument("-o", "--output", type=Path, help="Output file")
    cmd.add_argument("-b", "--benchmark", action="store_true", help="Show token savings")
    cmd.set_defaults(func=_cmd_parse)

    cmd = sub.add_parser("stringify", help="JSON → TOON")
    cmd.add_argument("input", type=Path, help="JSON file with header and questions")
    cmd.add_argument("-o", "--output", type=Path, help="Output file")
    cmd.set_defaults(func=_cmd_stringify)

    cmd = sub.add_parser("format", help="Rewrite a TOON file in canonical form")
    cmd.add_argument("input", type=Path, help="TOON file")
    cmd.add_argument("-o", "--output", type=Path, help="Output file")
    cmd.add_argument("--in-place", action="store_true", help="Overwrite the input file")
    cmd.set_defaults(func=_cmd_format)

    cmd = sub.add_parser("lint", help="Report the first problem in a TOON file")
    cmd.add_argument("input", type=Path, help="TOON file")
    cmd.set_defaults(func=_cmd_lint)

    cmd = sub.add_parser("example", help="Print an example TOON document")
    cmd.set_defaults(func=_cmd_example)

    cmd = sub.add_parser("generate", help="Generate a quiz from learning material")
    cmd.add_argument("input", type=Path, help="Text file with the material")
    cmd.add_argument("-n", "--count", type=int, default=10, help="Number of questions")
    cmd.add_argument("-o", "--output", type=Path, help="Output file")
    cmd.add_argument("--provider", choices=["anthropic", "openai"], help="LLM provider")
    cmd.add_argument("--model", help="Model name override")
    cmd.set_defaults(func=_cmd_generate)
    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)
    log.init(logging.DEBUG if args.verbose else logging.INFO)

    try:
        return args.func(args)
    except (ToonError, ValueError) as e:
        print(f"{args.input}: {e}" if hasattr(args, "input") else str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
