"""
Command line interface.

Usage:
    # Latest entries across all configured spaces
    contentful-search latest --limit 10 --content-type blogPost

    # Full-text search
    contentful-search search "pricing page"

    # Content types, grouped by space
    contentful-search types

    # Interactive session: each line is a new query text
    #   :type <id>   change the content type filter ("all" to reset)
    #   :show <n>    details and actions of the n-th entry
    #   :quit        leave
    contentful-search browse

Environment Variables:
    CONTENTFUL_SPACES: JSON array of {name, spaceId, accessToken, environment?}
    CONTENTFUL_SPACES_FILE: File holding the same JSON (if CONTENTFUL_SPACES unset)
    CONTENTFUL_API_HOST, CONTENTFUL_WEB_APP_HOST, CONTENTFUL_TIMEOUT,
    CONTENTFUL_DEBOUNCE_MS
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Sequence
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from contentful_search.application.config import load_settings, load_spaces_config, parse_space_configs
from contentful_search.application.config.settings import SPACES_ENV, SPACES_FILE_ENV
from contentful_search.application.search import filter_entries
from contentful_search.container import ApplicationContainer
from contentful_search.shared.exceptions import ConfigurationError

from .views import render_content_types, render_entries, render_entry_detail, render_view

if TYPE_CHECKING:
    from contentful_search.application.search import AggregationService, QueryOrchestrator, QueryView
    from contentful_search.domain.entities import NormalizedEntry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def _write(text: str) -> None:
    sys.stdout.write(text + "\n")
    sys.stdout.flush()


def _entry_to_dict(entry: NormalizedEntry) -> dict[str, Any]:
    data = asdict(entry)
    data.pop("raw_payload", None)
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contentful-search",
        description="Search entries across several Contentful spaces",
    )
    parser.add_argument("--spaces", help=f"Spaces JSON (overrides {SPACES_ENV})")
    parser.add_argument("--spaces-file", help=f"File with spaces JSON (overrides {SPACES_FILE_ENV})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    latest = sub.add_parser("latest", help="Most recently updated entries")
    latest.add_argument("--limit", type=int, default=10, help="Entries per space")
    latest.add_argument("--content-type", default="all", help="Content type id, or 'all'")
    latest.add_argument("--json", action="store_true", help="Print JSON instead of text")

    search = sub.add_parser("search", help="Full-text search")
    search.add_argument("query", help="Query text (at least 2 characters)")
    search.add_argument("--content-type", default="all", help="Filter results by content type id")
    search.add_argument("--json", action="store_true", help="Print JSON instead of text")

    types = sub.add_parser("types", help="Content types of all spaces")
    types.add_argument("--json", action="store_true", help="Print JSON instead of text")

    sub.add_parser("browse", help="Interactive debounced search")
    return parser


async def _run_latest(service: AggregationService, args: argparse.Namespace) -> int:
    spaces = parse_space_configs(load_spaces_config())
    entries = await service.fetch_latest(spaces, args.limit, args.content_type)
    if args.json:
        _write(json.dumps([_entry_to_dict(e) for e in entries], indent=2))
    else:
        _write(render_entries(entries) or "No Entries Found")
    return EXIT_OK


async def _run_search(service: AggregationService, args: argparse.Namespace) -> int:
    spaces = parse_space_configs(load_spaces_config())
    entries = await service.search(spaces, args.query)
    entries = filter_entries(entries, args.query, args.content_type)
    if args.json:
        _write(json.dumps([_entry_to_dict(e) for e in entries], indent=2))
    else:
        _write(render_entries(entries) or f'No results found for "{args.query}"')
    return EXIT_OK


async def _run_types(service: AggregationService, args: argparse.Namespace) -> int:
    spaces = parse_space_configs(load_spaces_config())
    content_types = await service.list_content_types(spaces)
    if args.json:
        _write(json.dumps([asdict(ct) for ct in content_types], indent=2))
    else:
        _write(render_content_types(content_types))
    return EXIT_OK


async def _read_line() -> str | None:
    line = await asyncio.to_thread(sys.stdin.readline)
    if not line:
        return None
    return line.rstrip("\n")


async def _run_browse(container: ApplicationContainer) -> int:
    def on_change(view: QueryView) -> None:
        logger.debug(f"view changed: loading={view.is_loading} entries={len(view.entries)}")

    orchestrator: QueryOrchestrator = container.orchestrator(on_change=on_change)
    await orchestrator.mount()
    view = orchestrator.view
    _write(render_view(view))
    if view.is_config_error:
        return EXIT_CONFIG_ERROR

    try:
        while (line := await _read_line()) is not None:
            command = line.strip()
            if command == ":quit":
                break
            if command == ":types":
                _write(render_content_types(view.content_types, view.content_type_filter))
                continue
            if command.startswith(":type"):
                orchestrator.on_filter_change(command.removeprefix(":type").strip() or None)
            elif command.startswith(":show"):
                _show_entry(view, command.removeprefix(":show").strip())
                continue
            else:
                orchestrator.on_query_change(line)

            await orchestrator.settle()
            view = orchestrator.view
            _write(render_view(view))
    finally:
        orchestrator.close()
    return EXIT_OK


def _show_entry(view: QueryView, position: str) -> None:
    try:
        entry = view.entries[int(position) - 1]
    except (ValueError, IndexError):
        _write(f"No entry at position {position!r}")
        return
    _write(render_entry_detail(entry))


async def run_command(args: argparse.Namespace, container: ApplicationContainer) -> int:
    if args.command == "browse":
        return await _run_browse(container)

    service: AggregationService = container.aggregation_service()
    handlers = {
        "latest": _run_latest,
        "search": _run_search,
        "types": _run_types,
    }
    try:
        return await handlers[args.command](service, args)
    except ConfigurationError as e:
        _write(f"Configuration Error\n{e}")
        if e.context.suggestion:
            _write(e.context.suggestion)
        return EXIT_CONFIG_ERROR


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Flags win over the environment; the config source reads the environment
    if args.spaces is not None:
        os.environ[SPACES_ENV] = args.spaces
    elif args.spaces_file:
        os.environ.pop(SPACES_ENV, None)
        os.environ[SPACES_FILE_ENV] = args.spaces_file

    container = ApplicationContainer()
    container.config.from_dict(load_settings())

    return asyncio.run(run_command(args, container))


if __name__ == "__main__":
    sys.exit(main())
