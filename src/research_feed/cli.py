"""
Command-line interface for the research feed client.
"""

import argparse
import asyncio
from datetime import date
import json
import logging
import sys

from research_feed.clients.feed_api import ResearchFeedClient
from research_feed.formatters import get_formatter
from research_feed.models.enums import (
    DatePreset,
    FeedSource,
    FeedStatus,
    NotificationFrequency,
    ResponseFormat,
    SortOrder,
)
from research_feed.models.filters import FilterState, set_field, with_custom_range
from research_feed.services.favorites import FavoriteService
from research_feed.services.feed_controller import FeedController
from research_feed.services.preferences import PreferenceSyncController
from research_feed.settings import get_settings
from research_feed.utils.errors import ResearchFeedError, ValidationFailure, handle_error
from research_feed.utils.logging_config import get_log_level, initialize_logging

logger = logging.getLogger(__name__)


def obfuscate_token(value: str | None, keep_chars: int = 4) -> str | None:
    """Show only the first few characters of a token."""
    if not value:
        return value
    if len(value) <= keep_chars:
        return "*" * len(value)
    return value[:keep_chars] + "*" * (len(value) - keep_chars)


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--subspecialty",
        dest="subspecialties",
        action="append",
        default=[],
        help="Filter by subspecialty (repeatable)",
    )
    parser.add_argument(
        "--research-type",
        dest="research_types",
        action="append",
        default=[],
        help="Filter by research type (repeatable)",
    )
    parser.add_argument(
        "--journal",
        dest="journals",
        action="append",
        default=[],
        help="Filter by journal (repeatable)",
    )
    parser.add_argument(
        "--sort",
        choices=[s.value for s in SortOrder],
        default=SortOrder.DATE.value,
        help="Sort order (default: newest first)",
    )
    parser.add_argument(
        "--preset",
        choices=[p.value for p in DatePreset],
        default=DatePreset.LAST_7_DAYS.value,
        help="Publication date window (default: 7d)",
    )
    parser.add_argument(
        "--from",
        dest="date_from",
        type=date.fromisoformat,
        help="Custom range start, YYYY-MM-DD (implies --preset custom)",
    )
    parser.add_argument(
        "--to",
        dest="date_to",
        type=date.fromisoformat,
        help="Custom range end, YYYY-MM-DD (implies --preset custom)",
    )
    parser.add_argument("--page", type=int, default=1, help="Page number (1-based)")
    parser.add_argument(
        "--format",
        choices=[f.value for f in ResponseFormat],
        default=ResponseFormat.MARKDOWN.value,
        help="Output format",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="research-feed", description="Browse the curated research paper feed"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also write logs to ~/.cache/research-feed/logs",
    )
    subparsers = parser.add_subparsers(dest="command")

    feed_parser = subparsers.add_parser("feed", help="Show a page of the feed")
    _add_filter_arguments(feed_parser)

    favorites_parser = subparsers.add_parser("favorites", help="Show a page of favorites")
    _add_filter_arguments(favorites_parser)

    favorite_parser = subparsers.add_parser("favorite", help="Add or remove a favorite")
    favorite_parser.add_argument("action", choices=["add", "remove"])
    favorite_parser.add_argument("paper_id", help="Paper id")

    prefs_parser = subparsers.add_parser("prefs", help="Show or edit preferences")
    prefs_sub = prefs_parser.add_subparsers(dest="prefs_command")

    show_parser = prefs_sub.add_parser("show", help="Show current preferences")
    show_parser.add_argument(
        "--format",
        choices=[f.value for f in ResponseFormat],
        default=ResponseFormat.MARKDOWN.value,
    )
    prefs_sub.add_parser("export", help="Export preferences as JSON")

    set_parser = prefs_sub.add_parser("set", help="Edit and save preferences")
    set_parser.add_argument(
        "--toggle-subspecialty", action="append", default=[], metavar="KEY"
    )
    set_parser.add_argument(
        "--toggle-research-type", action="append", default=[], metavar="KEY"
    )
    for channel in ("email", "push", "whatsapp"):
        set_parser.add_argument(f"--{channel}", choices=["on", "off"])
    set_parser.add_argument(
        "--frequency", choices=[f.value for f in NotificationFrequency]
    )
    set_parser.add_argument(
        "--force", action="store_true", help="Save even without tracked changes"
    )
    set_parser.add_argument(
        "--format",
        choices=[f.value for f in ResponseFormat],
        default=ResponseFormat.MARKDOWN.value,
    )

    subparsers.add_parser("config", help="Show effective configuration")

    return parser


def build_filters(args: argparse.Namespace) -> FilterState:
    """
    Turn feed arguments into a FilterState.

    Raises:
        ValidationFailure: conflicting or invalid filter arguments
    """
    state = FilterState()
    for key in ("subspecialties", "research_types", "journals", "sort"):
        state = set_field(state, key, getattr(args, key))

    if args.date_from or args.date_to:
        return with_custom_range(state, args.date_from, args.date_to)
    return set_field(state, "date_preset", args.preset)


async def run_listing(args: argparse.Namespace, source: FeedSource) -> int:
    settings = get_settings()
    formatter = get_formatter(args.format)

    try:
        filters = build_filters(args)
    except ValidationFailure as e:
        print(formatter.format_error(str(e)), file=sys.stderr)
        return 2

    async with ResearchFeedClient.from_settings(settings) as client:
        favorites = None
        if source == FeedSource.FEED:
            service = FavoriteService(client, cap=settings.favorites_cap)
            try:
                favorites = await service.load()
            except ResearchFeedError as e:
                logger.warning(f"Could not load favorites: {e}")

        controller = FeedController(
            client,
            favorites,
            source=source,
            page_size=settings.page_size,
            filters=filters,
        )
        controller.current_page = max(1, args.page)
        await controller.load()

    print(formatter.format_feed(controller))
    return 0 if controller.status == FeedStatus.READY else 1


async def run_favorite(args: argparse.Namespace) -> int:
    settings = get_settings()
    async with ResearchFeedClient.from_settings(settings) as client:
        service = FavoriteService(client, cap=settings.favorites_cap)
        try:
            if args.action == "add":
                await service.add(args.paper_id)
            else:
                await service.remove(args.paper_id)
        except ResearchFeedError as e:
            print(handle_error(e, f"favorite {args.action}"), file=sys.stderr)
            return 1

    verb = "Added to" if args.action == "add" else "Removed from"
    print(f"{verb} favorites: {args.paper_id}")
    return 0


def _apply_preference_edits(
    controller: PreferenceSyncController, args: argparse.Namespace
) -> None:
    for key in args.toggle_subspecialty:
        controller.toggle("subspecialties", key)
    for key in args.toggle_research_type:
        controller.toggle("research_types", key)
    for channel in ("email", "push", "whatsapp"):
        value = getattr(args, channel)
        if value is not None:
            controller.set_notification(f"{channel}_enabled", value == "on")
    if args.frequency:
        controller.set_notification("frequency", args.frequency)


async def run_prefs(args: argparse.Namespace) -> int:
    settings = get_settings()
    command = args.prefs_command or "show"

    async with ResearchFeedClient.from_settings(settings) as client:
        controller = PreferenceSyncController(client)
        if not await controller.load():
            print(controller.error, file=sys.stderr)
            return 1

        if command == "export":
            print(json.dumps(controller.export(), indent=2, ensure_ascii=False))
            return 0

        formatter = get_formatter(args.format)
        if command == "set":
            try:
                _apply_preference_edits(controller, args)
            except ValidationFailure as e:
                print(formatter.format_error(str(e)), file=sys.stderr)
                return 2
            if not await controller.save(force=args.force):
                print(formatter.format_error(controller.error or "Save failed"), file=sys.stderr)
                return 1

    print(formatter.format_preferences(controller))
    return 0


def run_config() -> int:
    settings = get_settings()
    print(f"API URL:        {settings.api_url}")
    token = obfuscate_token(settings.api_token) if settings.has_token else "(not set)"
    print(f"API token:      {token}")
    print(f"Page size:      {settings.page_size}")
    print(f"Favorites cap:  {settings.favorites_cap}")
    print(f"Timeout:        {settings.request_timeout}s")
    return 0


def dispatch(args: argparse.Namespace) -> int:
    if args.command == "feed":
        return asyncio.run(run_listing(args, FeedSource.FEED))
    if args.command == "favorites":
        return asyncio.run(run_listing(args, FeedSource.FAVORITES))
    if args.command == "favorite":
        return asyncio.run(run_favorite(args))
    if args.command == "prefs":
        if args.prefs_command is None:
            args.format = ResponseFormat.MARKDOWN.value
        return asyncio.run(run_prefs(args))
    if args.command == "config":
        return run_config()
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    level = logging.DEBUG if args.debug else get_log_level(settings.log_level)
    initialize_logging(level, log_file=args.log_file)

    try:
        return dispatch(args)
    except ResearchFeedError as e:
        print(handle_error(e, args.command), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
