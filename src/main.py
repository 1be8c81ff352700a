# src/main.py — v1
"""CLI entry point — check, submit, add commands.

Usage:
    reqintake check --title T --category C (--body B | --body-file F)
    reqintake submit --title T --department D --type X (--content B | --content-file F)
    reqintake add --title T --category C --body B [--status S] [--created-at ISO]

Exit codes: 0 success, 1 error, 2 duplicate found by ``check`` or ``submit``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from reqintake.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DUPLICATE = 2


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_ERROR

    from reqintake.core.errors import ReqIntakeError

    try:
        settings = _load_settings(args)
        _setup_logging(settings, args.verbose)
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except ReqIntakeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="reqintake",
        description=f"reqintake v{__version__} - request intake with duplicate screening",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="Submission database (default: DATABASE_PATH setting)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- check ---
    p_check = subparsers.add_parser(
        "check", help="Check a request for duplicates without storing it",
    )
    p_check.add_argument("--title", required=True)
    p_check.add_argument("--category", required=True)
    body = p_check.add_mutually_exclusive_group(required=True)
    body.add_argument("--body")
    body.add_argument("--body-file", type=Path)
    p_check.add_argument(
        "--json", action="store_true", help="Print the verdict as JSON",
    )
    p_check.set_defaults(func=_cmd_check)

    # --- submit ---
    p_submit = subparsers.add_parser(
        "submit", help="Screen, analyze and store a new request",
    )
    p_submit.add_argument("--title", required=True)
    p_submit.add_argument("--department", required=True)
    p_submit.add_argument("--type", dest="request_type", required=True)
    content = p_submit.add_mutually_exclusive_group(required=True)
    content.add_argument("--content")
    content.add_argument("--content-file", type=Path)
    p_submit.add_argument(
        "--no-analysis", action="store_true",
        help="Store without calling the text analysis provider",
    )
    p_submit.set_defaults(func=_cmd_submit)

    # --- add ---
    p_add = subparsers.add_parser(
        "add", help="Store a submission directly (no screening)",
    )
    p_add.add_argument("--title", required=True)
    p_add.add_argument("--category", required=True)
    p_add.add_argument("--body", required=True)
    p_add.add_argument("--type", dest="request_type", default=None)
    p_add.add_argument("--status", default="processed")
    p_add.add_argument("--id", dest="submission_id", default=None)
    p_add.add_argument(
        "--created-at", type=_parse_timestamp, default=None,
        help="ISO-8601 creation time (default: now)",
    )
    p_add.set_defaults(func=_cmd_add)

    return parser


async def _cmd_check(args: argparse.Namespace, settings) -> int:
    """Run one duplicate check and print the verdict."""
    from reqintake.dedup.detector import DuplicateDetector
    from reqintake.storage.repository_factory import create_repository

    body = _read_text(args.body, args.body_file)
    repository = create_repository(settings)
    try:
        detector = DuplicateDetector(repository, settings=settings)
        verdict = await detector.check_for_duplicate(args.title, args.category, body)
    finally:
        await repository.close()

    if args.json:
        print(verdict.model_dump_json(indent=2))
    elif verdict.is_duplicate:
        match = verdict.matched_submission
        print(f"Duplicate of {match.id}: {match.title!r}")
        print(f"  Combined score: {verdict.combined_score:.3f}")
        for name, value in verdict.component_scores.items():
            print(f"  {name:18s} {value:.3f}")
    else:
        print("No duplicate found")
        print(f"  Highest similarity: {verdict.highest_similarity:.3f}")
        print(f"  Candidates:         {verdict.candidates_compared}")
    return EXIT_DUPLICATE if verdict.is_duplicate else EXIT_OK


async def _cmd_submit(args: argparse.Namespace, settings) -> int:
    """Run the full intake flow for one request."""
    from reqintake.dedup.detector import DuplicateDetector
    from reqintake.intake.models import RequestInput
    from reqintake.intake.processor import RequestProcessor
    from reqintake.intake.service import IntakeService
    from reqintake.llm.client_factory import create_llm_client
    from reqintake.storage.repository_factory import create_repository

    request = RequestInput(
        title=args.title,
        department=args.department,
        type=args.request_type,
        content=_read_text(args.content, args.content_file),
    )
    processor = None
    if not args.no_analysis:
        processor = RequestProcessor(
            create_llm_client(settings=settings),
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )

    repository = create_repository(settings)
    try:
        service = IntakeService(
            DuplicateDetector(repository, settings=settings),
            repository,
            processor=processor,
            block_on_check_failure=settings.block_on_check_failure,
        )
        outcome = await service.submit(request)
    finally:
        await repository.close()

    if outcome.is_duplicate:
        original = outcome.original
        print(f"Duplicate of {original.id}: {original.title!r}" if original else "Duplicate")
        return EXIT_DUPLICATE

    submission = outcome.submission
    print(f"Stored {submission.id} ({submission.status})")
    if outcome.check_bypassed:
        print("  warning: duplicate check failed, request was not screened")
    if outcome.processed is not None:
        analysis = outcome.processed.analysis
        if analysis.summary:
            print(f"  Summary: {_preview(analysis.summary)}")
        for item in outcome.processed.recommendations.strategic:
            print(f"  - {item}")
    return EXIT_OK


async def _cmd_add(args: argparse.Namespace, settings) -> int:
    """Seed one submission into the repository."""
    from reqintake.core.models import Submission
    from reqintake.intake.service import new_reference_number
    from reqintake.storage.repository_factory import create_repository

    submission = Submission(
        id=args.submission_id or new_reference_number(),
        title=args.title,
        body=args.body,
        category=args.category,
        type=args.request_type,
        status=args.status,
        created_at=args.created_at or datetime.now(timezone.utc),
    )
    repository = create_repository(settings)
    try:
        await repository.add(submission)
    finally:
        await repository.close()
    print(f"Added {submission.id}")
    return EXIT_OK


def _load_settings(args: argparse.Namespace):
    from reqintake.config.settings import load_settings

    overrides = {}
    if args.db is not None:
        overrides["database_path"] = args.db
    return load_settings(**overrides)


def _read_text(inline: str | None, path: Path | None) -> str:
    if path is not None:
        return path.read_text(encoding="utf-8")
    return inline or ""


def _parse_timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 timestamp: {value!r}") from e


def _preview(text: str, limit: int = 200) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _setup_logging(settings, verbose: bool) -> None:
    """Configure logging for CLI usage (stderr, stdout is for results)."""
    from reqintake.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        stream=sys.stderr,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
