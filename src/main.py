# src/main.py - v2
"""CLI entry point: organize, query, cache commands.

Usage:
    leaseorganizer organize <folder> [--json]
    leaseorganizer query <operation> [--lessor L] [--address A] [--search Q]
                                     [--document-id ID] [--include-content]
    leaseorganizer cache stats|clear
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import get_args

from leaseorganizer.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def cli() -> None:
    """Console script wrapper."""
    sys.exit(main())


def _build_parser() -> argparse.ArgumentParser:
    from leaseorganizer.api.models import QueryOperation

    parser = argparse.ArgumentParser(
        prog="leaseorganizer",
        description=f"leaseorganizer v{__version__}: group lease documents by lessor and address",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- organize ---
    p_organize = subparsers.add_parser(
        "organize", help="Classify, extract and group every document in a folder",
    )
    p_organize.add_argument("folder", type=Path, help="Folder containing documents")
    p_organize.add_argument(
        "--json", action="store_true",
        help="Print the simplified hierarchy as JSON instead of a tree",
    )
    p_organize.set_defaults(func=_cmd_organize)

    # --- query ---
    p_query = subparsers.add_parser(
        "query", help="Query the last saved grouping",
    )
    p_query.add_argument("operation", choices=get_args(QueryOperation))
    p_query.add_argument("--lessor", default=None)
    p_query.add_argument("--address", default=None)
    p_query.add_argument("--search", default=None, help="Search term")
    p_query.add_argument("--document-id", default=None)
    p_query.add_argument(
        "--include-content", action="store_true",
        help="Include full document text in results",
    )
    p_query.set_defaults(func=_cmd_query)

    # --- cache ---
    p_cache = subparsers.add_parser("cache", help="Inspect or clear the result cache")
    p_cache.add_argument("action", choices=("stats", "clear"))
    p_cache.set_defaults(func=_cmd_cache)

    return parser


async def _cmd_organize(args: argparse.Namespace) -> int:
    """Run the organize batch on a folder."""
    from leaseorganizer.api.facade import organize_folder
    from leaseorganizer.grouping.grouper import get_simplified_output

    folder: Path = args.folder
    if not folder.is_dir():
        logger.error("Not a directory: %s", folder)
        return 1

    run = await organize_folder(folder)
    output = get_simplified_output(run.result)

    if args.json:
        print(json.dumps(output.to_json_dict(), indent=2))
        return 0 if run.snapshot_saved else 1

    stats = output.stats
    print("\nStats:")
    print(f"  Total documents: {stats.total_documents}")
    print(f"  Grouped:         {stats.grouped_documents}")
    print(f"  Ungrouped:       {stats.ungrouped_documents}")
    print(f"  Lessors:         {stats.lessors}")
    print(f"  Addresses:       {stats.addresses}")
    print(f"  From cache:      {run.from_cache}")
    print(f"  Failed:          {len(run.failures)}")

    for lessor, addresses in output.hierarchy.items():
        print(f"\n[LESSOR] {lessor}")
        for address, lease_file in addresses.items():
            print(f"  [ADDRESS] {address}")
            print(f"    Base Lease: {lease_file.base_lease or '(none)'}")
            for label, ids in (
                ("Amendments", lease_file.amendments),
                ("Commencements", lease_file.commencements),
                ("Deliveries", lease_file.deliveries),
                ("Others", lease_file.others),
            ):
                if ids:
                    print(f"    {label}: {', '.join(ids)}")

    if output.ungrouped:
        print(f"\nUngrouped: {', '.join(output.ungrouped)}")
    for failure in run.failures:
        print(f"Failed: {failure.filename} ({failure.error})")

    if not run.snapshot_saved:
        logger.error("Grouping snapshot was not saved")
        return 1
    return 0


async def _cmd_query(args: argparse.Namespace) -> int:
    """Run one named query against the saved grouping."""
    from leaseorganizer.api.facade import open_query
    from leaseorganizer.api.query import NoGroupingDataError, run_query

    try:
        query = open_query()
    except NoGroupingDataError as exc:
        logger.error("%s", exc)
        return 1

    response = run_query(
        query,
        args.operation,
        lessor=args.lessor,
        address=args.address,
        search=args.search,
        document_id=args.document_id,
        include_content=args.include_content,
    )
    print(json.dumps(response.to_json_dict(), indent=2))
    return 0 if response.success else 1


async def _cmd_cache(args: argparse.Namespace) -> int:
    """Show or clear the result cache."""
    from leaseorganizer.cache.json_store import JsonCacheStore
    from leaseorganizer.config.settings import Settings

    settings = Settings()
    cache = JsonCacheStore(settings.cache_file)
    cache.load()

    if args.action == "clear":
        cache.clear()
        cache.save()
        print(f"Cleared cache at {cache.cache_file}")
        return 0

    stats = cache.stats()
    print(f"Cache file: {stats.file}")
    print(f"Entries:    {stats.entries}")
    return 0


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage from settings."""
    from leaseorganizer.config.settings import Settings
    from leaseorganizer.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
