#!/usr/bin/env python3
"""
Command-line entry point.

    mediaparse list
    mediaparse run ria lenta --limit 20
    mediaparse run --all --store
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from mediaparse.config import load_settings, setup_logging
from mediaparse.runner import RunReport, SiteScraper
from mediaparse.sites import SITES, get_site, site_names
from mediaparse.storage import ArticleStorage
from mediaparse.utils.print import format_duration, limit_string


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mediaparse",
        description="Scrape recent articles from news sites",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List available sites")

    run = subparsers.add_parser("run", help="Run one or more site pipelines")
    run.add_argument("sites", nargs="*", help="Site names (see 'list')")
    run.add_argument("--all", action="store_true", help="Run every site")
    run.add_argument("--limit", type=int, help="Number of article links to collect per site")
    run.add_argument("--workers", type=int, help="Concurrent workers per site")
    run.add_argument("--max-pages", type=int, help="Listing page ceiling per site")
    run.add_argument("--store", action="store_true", default=None, help="Save records to the database")
    run.add_argument("--config", help="Path to a YAML config file")
    run.add_argument("--show-diagnostics", action="store_true", help="Print every failed page")
    run.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def print_sites(console: Console) -> None:
    table = Table(title="Available sites")
    table.add_column("Name")
    table.add_column("Site")
    table.add_column("Listing")
    table.add_column("Fetcher")
    for config in SITES.values():
        table.add_row(config.name, config.title, config.listing_url, config.fetcher)
    console.print(table)


def print_summary(console: Console, reports: List[RunReport], show_diagnostics: bool = False) -> None:
    table = Table(title="Run summary")
    table.add_column("Site")
    table.add_column("Links", justify="right")
    table.add_column("Records", justify="right")
    table.add_column("Diagnostics", justify="right")
    table.add_column("Stored", justify="right")
    table.add_column("Elapsed", justify="right")
    for report in reports:
        if report.discovery_failed:
            status = f"[red]listing failed: {limit_string(str(report.discovery_error), 40)}[/red]"
            table.add_row(report.site, "0", "0", status, "0", format_duration(report.elapsed))
            continue
        table.add_row(
            report.site,
            str(len(report.links)),
            str(len(report.result.records)),
            str(len(report.result.diagnostics)),
            str(report.stored),
            format_duration(report.elapsed),
        )
    console.print(table)

    if show_diagnostics:
        for report in reports:
            if not report.result.diagnostics:
                continue
            console.print(f"[bold]{report.site}[/bold]")
            for idx, line in enumerate(report.result.diagnostics, start=1):
                console.print(f"  {idx}. {line}", markup=False)


def run_sites(args, console: Console) -> int:
    names = site_names() if args.all else args.sites
    if not names:
        console.print("[red]Name at least one site or pass --all[/red]")
        return 1
    try:
        configs = [get_site(name) for name in names]
    except KeyError as e:
        console.print(f"[red]{e.args[0]}[/red]")
        return 1

    settings = load_settings(
        args.config,
        debug=True if args.verbose else None,
        workers=args.workers,
        target_count=args.limit,
        max_pages=args.max_pages,
        store=args.store,
    )
    setup_logging(debug=settings.debug)

    storage = ArticleStorage(settings.db_path, settings.articles_table) if settings.store else None
    reports = []
    try:
        for config in configs:
            logger.info(f"Starting {config.title} ({config.name})")
            with SiteScraper(config, settings, storage=storage) as scraper:
                reports.append(scraper.run())
    finally:
        if storage is not None:
            storage.close()

    print_summary(console, reports, show_diagnostics=args.show_diagnostics)
    return 1 if any(report.discovery_failed for report in reports) else 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()
    if args.command == "list":
        print_sites(console)
        return 0
    return run_sites(args, console)


if __name__ == "__main__":
    sys.exit(main())
