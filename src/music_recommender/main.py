#!/usr/bin/env python3
"""Command-line entry point for the music recommendation engine.

Every subcommand prints its result object as JSON on stdout and exits with
0 on success and 1 on a rejected or failed operation.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from music_recommender.domain.shared.messages import ErrorMessages, LogTemplates
from music_recommender.utils.logging import setup_logging

if TYPE_CHECKING:
    from music_recommender.application.services.recommendation_models import (
        FeedbackHistoryResult,
        GenerateResult,
        OperationResult,
        RecommendationsResult,
    )
    from music_recommender.application.services.recommendation_service import (
        RecommendationApplicationService,
    )
    from music_recommender.config.settings import Settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="music-recommender",
        description="Generate, rank and judge music recommendations.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate --user u1 --source mbid-1 --amount 5 --input payload.json
  %(prog)s recommendations --user u1 --item mbid-1 --amount 3
  %(prog)s feedback --user u1 --item rec:u1:muse:1700000000000 --like
  %(prog)s history --user u1
  %(prog)s clear --user u1
        """,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    generate = subparsers.add_parser("generate", help="generate new recommendations")
    generate.add_argument("--user", required=True, help="owning user id")
    generate.add_argument("--source", required=True, help="source item id")
    generate.add_argument("--amount", type=int, default=None, help="number to generate")
    generate.add_argument(
        "--input",
        type=Path,
        default=None,
        help="JSON file with source_item_metadata and similar_* lists",
    )

    recs = subparsers.add_parser("recommendations", help="list ranked recommendations")
    recs.add_argument("--user", required=True, help="owning user id")
    recs.add_argument("--item", required=True, help="item to find neighbours of")
    recs.add_argument("--amount", type=int, default=None, help="maximum number returned")
    recs.add_argument(
        "--unjudged", action="store_true", help="only items without feedback"
    )
    recs.add_argument("--ignore", nargs="*", default=[], help="item ids to leave out")

    feedback = subparsers.add_parser("feedback", help="like or dislike a recommended item")
    feedback.add_argument("--user", required=True, help="owning user id")
    feedback.add_argument("--item", required=True, help="recommended item id")
    verdict = feedback.add_mutually_exclusive_group(required=True)
    verdict.add_argument("--like", dest="feedback", action="store_true")
    verdict.add_argument("--dislike", dest="feedback", action="store_false")

    history = subparsers.add_parser("history", help="list judged recommendations")
    history.add_argument("--user", required=True, help="owning user id")
    history.add_argument("--source", default=None, help="restrict to one source item")

    delete = subparsers.add_parser("delete", help="delete one recommendation by id")
    delete.add_argument("--id", required=True, dest="recommendation_id")

    clear = subparsers.add_parser("clear", help="delete recommendations in bulk")
    scope = clear.add_mutually_exclusive_group(required=True)
    scope.add_argument("--user", default=None, help="clear one user's recommendations")
    scope.add_argument("--all", action="store_true", help="clear every user's recommendations")
    clear.add_argument("--yes", action="store_true", help="confirm clearing every user")

    return parser


def _load_payload(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(ErrorMessages.CLI_INPUT_UNREADABLE.format(path=path, error=e)) from e
    if not isinstance(data, dict):
        raise ValueError(
            ErrorMessages.CLI_INPUT_UNREADABLE.format(path=path, error="expected a JSON object")
        )
    return data


async def _dispatch(
    service: RecommendationApplicationService, args: argparse.Namespace, settings: Settings
) -> GenerateResult | RecommendationsResult | OperationResult | FeedbackHistoryResult:
    default_amount = settings.recommendations.default_amount

    if args.action == "generate":
        payload = _load_payload(args.input)
        return await service.generate(
            args.user,
            args.source,
            args.amount if args.amount is not None else default_amount,
            source_item_metadata=payload.get("source_item_metadata"),
            similar_artists=payload.get("similar_artists") or (),
            similar_recordings=payload.get("similar_recordings") or (),
            similar_release_groups=payload.get("similar_release_groups") or (),
        )
    if args.action == "recommendations":
        return await service.get_recommendations(
            args.user,
            args.item,
            args.amount if args.amount is not None else default_amount,
            feedbacked=not args.unjudged,
            ignore=args.ignore,
        )
    if args.action == "feedback":
        return await service.provide_feedback(args.user, args.item, args.feedback)
    if args.action == "history":
        return await service.get_feedback_history(args.user, args.source)
    if args.action == "delete":
        return await service.delete_recommendation(args.recommendation_id)
    if args.action == "clear":
        return await service.clear_recommendations(None if args.all else args.user)

    raise ValueError(f"Unknown action: {args.action}")


async def run(args: argparse.Namespace, settings: Settings) -> int:
    from music_recommender.config.container import create_container

    container = create_container(settings)
    await container.initialize()
    try:
        result = await _dispatch(container.recommendation_service, args, settings)
    finally:
        await container.shutdown()

    print(json.dumps(result.model_dump(mode="json"), indent=2))
    if not result.is_success:
        logger.error(LogTemplates.APP_COMMAND_FAILED, args.action, result.message)
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    from music_recommender.config.settings import get_settings

    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level)
    logger.debug(LogTemplates.APP_STARTING, settings.environment)

    if args.action == "clear" and args.all and not args.yes:
        logger.error(ErrorMessages.CLEAR_ALL_REQUIRES_CONFIRMATION)
        return 1

    try:
        return asyncio.run(run(args, settings))
    except ValueError as e:
        logger.error(LogTemplates.APP_COMMAND_FAILED, args.action, e)
        return 1
    except KeyboardInterrupt:
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
