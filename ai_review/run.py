from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown

from ai_review.config import env_int, load_config
from ai_review.errors import InvalidInputError, ReviewError, TransportError
from ai_review.llm import build_service
from ai_review.llm.factory import PROVIDERS
from ai_review.schema import ReviewRun
from ai_review.utils.diff_digest import budget_diff
from ai_review.utils.files import read_diff, write_review
from ai_review.utils.git import git_diff
from ai_review.utils.logging import configure_logging
from ai_review.utils.retry import call_with_retries
from ai_review.utils.run_log import append_run, init_run_log, make_run_id

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REVIEW_FAILED = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ai-review", description="Review a code diff with an LLM.")
    src = parser.add_mutually_exclusive_group()
    src.add_argument("diff_file", nargs="?", help="diff file to review, '-' for stdin")
    src.add_argument(
        "--git",
        nargs="?",
        const="",
        metavar="REF",
        help="review `git diff [REF]` of the current repository",
    )
    parser.add_argument("--staged", action="store_true", help="with --git: review staged changes")
    parser.add_argument("--provider", choices=PROVIDERS, help="override AI_REVIEW_PROVIDER")
    parser.add_argument("--model", help="override AI_REVIEW_MODEL")
    parser.add_argument("--timeout", type=float, help="override AI_REVIEW_TIMEOUT_S (seconds)")
    parser.add_argument(
        "--stream",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="request a streamed (SSE) response; default from AI_REVIEW_STREAM",
    )
    parser.add_argument(
        "--max-diff-chars",
        type=int,
        default=None,
        help="clip the diff to about this many characters before review (0 = no limit); default from AI_REVIEW_MAX_DIFF_CHARS",
    )
    parser.add_argument("--retries", type=int, default=0, help="retry timeouts / 429 / 5xx this many times")
    parser.add_argument("-o", "--output", type=Path, help="write the review to this file")
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="directory for the JSONL run log; default from AI_REVIEW_LOG_DIR, else logs/",
    )
    parser.add_argument("--no-log", action="store_true", help="do not append to the run log")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _load_diff(args: argparse.Namespace) -> str:
    if args.git is not None or args.staged:
        return git_diff(args.git or None, staged=args.staged)
    if args.diff_file:
        return read_diff(args.diff_file)
    if not sys.stdin.isatty():
        return read_diff("-")
    raise InvalidInputError("no diff given: pass a file, '-', or --git")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.staged and args.diff_file:
        parser.error("--staged reviews git changes and cannot be combined with a diff file")
    console = Console()
    configure_logging(args.verbose)

    try:
        config = load_config(provider=args.provider)
        max_diff_chars = (
            args.max_diff_chars if args.max_diff_chars is not None else env_int("AI_REVIEW_MAX_DIFF_CHARS", 0)
        )
    except ValueError as exc:
        console.print(f"[bold red]bad configuration[/bold red]: {exc}")
        return EXIT_BAD_INPUT
    overrides = {
        k: v
        for k, v in {"model": args.model, "timeout_s": args.timeout, "stream": args.stream}.items()
        if v is not None
    }
    config = replace(config, **overrides)

    try:
        diff = _load_diff(args)
    except (OSError, RuntimeError, InvalidInputError) as exc:
        console.print(f"[bold red]cannot read diff[/bold red]: {exc}")
        return EXIT_BAD_INPUT

    budgeted = budget_diff(diff, max_diff_chars)
    if len(budgeted) != len(diff):
        log.warning("diff clipped from %d to %d chars", len(diff), len(budgeted))

    run = ReviewRun(
        provider=config.provider,
        model=config.model,
        streaming=config.stream,
        diff_chars=len(diff),
        diff_budgeted=budgeted != diff,
    )
    attempts = 0

    def attempt() -> str:
        nonlocal attempts
        attempts += 1
        return service.review(budgeted)

    started = time.monotonic()
    try:
        service = build_service(config)
        with console.status(f"Reviewing with {config.provider}:{config.model} ..."):
            review = call_with_retries(attempt, retries=args.retries)
    except (ReviewError, RuntimeError, ValueError) as exc:
        run.status = "failed"
        run.error_type = type(exc).__name__
        if isinstance(exc, TransportError):
            run.status_code = exc.status_code
        console.print(f"[bold red]review failed[/bold red] ({type(exc).__name__}): {exc}")
        code = EXIT_BAD_INPUT if isinstance(exc, InvalidInputError) else EXIT_REVIEW_FAILED
    else:
        run.review_chars = len(review)
        code = EXIT_OK
        if args.output:
            try:
                write_review(args.output, review)
            except OSError as exc:
                console.print(f"[bold red]cannot write review[/bold red]: {exc}")
                code = EXIT_BAD_INPUT
            else:
                console.print(f"[bold]review written[/bold]: {args.output}")
        else:
            console.rule("AI Review")
            console.print(Markdown(review))

    run.attempts = max(attempts, 1)
    run.duration_s = round(time.monotonic() - started, 3)
    if not args.no_log:
        log_dir = args.log_dir or Path(os.getenv("AI_REVIEW_LOG_DIR") or "logs")
        paths = init_run_log(log_dir, make_run_id())
        append_run(paths, run)
        log.debug("run log: %s", paths.jsonl_path)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
