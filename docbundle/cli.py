"""
docbundle command line.

    docbundle build  [--root DIR | --repo URL] [-o DB] [--symbol-urls JSON] [--keep]
    docbundle search [-d DB] (-s QUERY | -r ROWID | --symbol SYMBOL) [--limit N]

``build`` parses the MkDocs monorepo, normalizes every page and writes a
SQLite catalog keyed by navigation path. ``search`` queries that catalog.
"""

import argparse
import logging
import shutil
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .exceptions import DocBundleError
from .services.catalog_service import CatalogService
from .services.catalog_store import write_catalog
from .services.search_service import SearchService, open_catalog
from .services.source_fetcher import fetch_source

logger = logging.getLogger("docbundle.cli")


def _build_parser(config: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docbundle",
        description="Bundle a MkDocs monorepo into a searchable SQLite catalog",
    )
    parser.add_argument("--log-level", default=None, help=f"Logging level (default: {config.log_level})")
    parser.add_argument("--log-format", choices=["text", "json"], default=None, help="Log output format")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build the catalog database")
    source = build.add_mutually_exclusive_group()
    source.add_argument("--root", type=Path, default=None, help="Use an existing local checkout")
    source.add_argument("--repo", default=None, help=f"Repository to clone (default: {config.repo_url})")
    build.add_argument("--branch", default=None, help=f"Branch to clone (default: {config.repo_branch})")
    build.add_argument("-o", "--output", type=Path, default=None,
                       help=f"Output database path (default: {config.database_path})")
    build.add_argument("--symbol-urls", default=None,
                       help="Path to the symbol URL list; empty string disables symbol matching "
                            f"(default: {config.symbol_urls_path})")
    build.add_argument("--keep", action="store_true", help="Keep the cloned repository and print its path")

    search = sub.add_parser("search", help="Query a catalog database")
    search.add_argument("-d", "--database", type=Path, default=None,
                        help=f"Database path (default: {config.database_path})")
    mode = search.add_mutually_exclusive_group(required=True)
    mode.add_argument("-s", "--search", dest="query", default=None,
                      help="Search string (use '-' to read from stdin)")
    mode.add_argument("-r", "--rowid", type=int, default=None, help="Print a document by rowid")
    mode.add_argument("--symbol", default=None, help="Print the document linked to a symbol")
    search.add_argument("--limit", type=int, default=None, help=f"Maximum hits (default: {config.search_limit})")
    return parser


def _run_build(args: argparse.Namespace, config: Settings) -> int:
    output = args.output or Path(config.database_path)
    symbol_urls = config.symbol_urls() if args.symbol_urls is None else (args.symbol_urls.strip() or None)

    clone_dir: Optional[Path] = None
    if args.root is None:
        clone_dir = Path(tempfile.mkdtemp(prefix="docbundle-"))

    try:
        if clone_dir is None:
            tree_root = args.root
        else:
            tree_root = fetch_source(
                args.repo or config.repo_url, clone_dir / "repo", args.branch or config.repo_branch
            )
            if args.keep:
                logger.info("Repo cloned to: %s", tree_root)

        result = CatalogService(config).build(tree_root, Path(symbol_urls) if symbol_urls else None)
        write_catalog(result, output)
    finally:
        if clone_dir is not None and not args.keep:
            shutil.rmtree(clone_dir, ignore_errors=True)
    return 0


def _run_search(args: argparse.Namespace, config: Settings) -> int:
    database = args.database or Path(config.database_path)
    limit = args.limit if args.limit is not None else config.search_limit

    with open_catalog(database) as db:
        service = SearchService(db)

        if args.rowid is not None:
            sys.stdout.write(service.fetch(args.rowid))
            return 0

        if args.symbol is not None:
            hit = service.lookup_symbol(args.symbol)
            if hit is None:
                logger.error("No document linked to symbol %r", args.symbol)
                return 1
            print(f"{hit.rowid} {hit.title}")
            return 0

        query = args.query
        if query == "-":
            query = sys.stdin.readline().rstrip("\n")
        if not query.strip():
            logger.error("Empty search string")
            return 1

        for hit in service.search(query, limit):
            print(f"{hit.rowid} {hit.title}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    config = default_settings
    args = _build_parser(config).parse_args(argv)

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if args.log_format:
        overrides["log_format"] = args.log_format
    if overrides:
        config = config.model_copy(update=overrides)
    setup_logging(config.log_level, config.log_format)

    try:
        if args.command == "build":
            return _run_build(args, config)
        return _run_search(args, config)
    except DocBundleError as e:
        logger.error("%s", e.message, extra={"error": e.error_code.value})
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
