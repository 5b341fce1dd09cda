"""CLI entry point for SearchFeed."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> int:
    """Run a single query against the configured search service and print the response as JSON."""
    parser = argparse.ArgumentParser(
        prog="searchfeed",
        description="SearchFeed — Query an XML search service and print the parsed results",
    )
    parser.add_argument("query", type=str, help="Query string")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--start",
        "-s",
        type=int,
        default=0,
        help="0-based index of the first result (default: 0)",
    )
    parser.add_argument(
        "--count",
        "-n",
        type=int,
        default=10,
        help="Number of results to request (default: 10)",
    )
    parser.add_argument(
        "--type",
        "-t",
        type=str,
        choices=["all", "any", "phrase"],
        default=None,
        help="Query words interpretation (overrides config)",
    )
    parser.add_argument(
        "--language",
        "-l",
        type=str,
        default=None,
        help="Result language code (overrides config)",
    )
    parser.add_argument(
        "--all-pages",
        action="store_true",
        help="Fetch windows larger than one service page with multiple requests",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"SearchFeed {_get_version()}",
    )

    args = parser.parse_args(argv)
    if args.start < 0:
        parser.error("--start must be non-negative")
    if args.count < 1:
        parser.error("--count must be positive")

    from searchfeed.adapters.base.exceptions import AdapterError
    from searchfeed.adapters.xml.adapter import XMLSearchSource
    from searchfeed.adapters.xml.multipage import collect_pages
    from searchfeed.config.settings import Settings
    from searchfeed.models.query import Query, QueryType
    from searchfeed.observability.logging import setup_logging

    # Load settings
    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            return 1
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.type:
        settings.service.query_type = QueryType(args.type.upper())
    if args.language:
        settings.service.language = args.language
    if args.log_level:
        settings.observability.log_level = args.log_level

    setup_logging(settings.observability)

    query = Query(
        text=args.query,
        query_type=settings.service.query_type,
        language=settings.service.language,
    )

    try:
        source = XMLSearchSource.from_settings(settings)
        if args.all_pages:
            response = collect_pages(source, query, args.start, args.count)
        else:
            response = source.search(query, args.start, args.count)
    except AdapterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(response.model_dump_json(indent=2))
    return 0


def _get_version() -> str:
    """Get the package version."""
    try:
        from searchfeed import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
