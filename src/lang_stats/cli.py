"""Command line entry point."""

from __future__ import annotations

import asyncio
import logging

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import DEFAULT_API_URL, DEFAULT_LOC_URL, MAX_PER_PAGE, SOURCES, Settings
from .errors import LangStatsError
from .orchestrator import run


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.command()
@click.version_option(version=__version__, prog_name="lang-stats")
@click.option("--user", "-u", required=True, help="GitHub username to analyze.")
@click.option("--token", "-t", envvar="GITHUB_TOKEN", default=None, help="GitHub token (or set GITHUB_TOKEN).")
@click.option("--weighted", "-w", is_flag=True, help="Weight languages and stars by the user's share of commits.")
@click.option(
    "--excluded-langs", "-e", multiple=True,
    help="Language to leave out, case-insensitive (repeatable).",
)
@click.option(
    "--source", type=click.Choice(SOURCES), default="github", show_default=True,
    help="github: bytes per language; loc: lines of code via codetabs.",
)
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=30.0, show_default=True,
              help="Per-request timeout in seconds.")
@click.option("--per-page", type=click.IntRange(1, MAX_PER_PAGE), default=MAX_PER_PAGE, show_default=True,
              help="Page size requested from list endpoints.")
@click.option("--all-pages", is_flag=True, help="Follow pagination links instead of reading only the first page.")
@click.option("--concurrency", "-j", type=click.IntRange(min=1), default=1, show_default=True,
              help="Number of repositories analyzed at once.")
@click.option("--dedupe", is_flag=True, help="Count repositories reachable through several owners once.")
@click.option("--skip-forks", is_flag=True, help="Ignore forked repositories.")
@click.option("--top", "top_n", type=click.IntRange(min=1), default=None, help="Show only the top N languages.")
@click.option(
    "--format", "output_format", type=click.Choice(["table", "json", "csv"]),
    default="table", show_default=True, help="Output format.",
)
@click.option("--output", "-o", "output_file", default=None, help="Write output to a file.")
@click.option("--verbose", "-v", is_flag=True, help="Log every request and skipped repository.")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors.")
@click.option("--api-url", default=DEFAULT_API_URL, hidden=True)
@click.option("--loc-url", default=DEFAULT_LOC_URL, hidden=True)
def main(
    user: str,
    token: str | None,
    weighted: bool,
    excluded_langs: tuple[str, ...],
    source: str,
    timeout: float,
    per_page: int,
    all_pages: bool,
    concurrency: int,
    dedupe: bool,
    skip_forks: bool,
    top_n: int | None,
    output_format: str,
    output_file: str | None,
    verbose: bool,
    quiet: bool,
    api_url: str,
    loc_url: str,
) -> None:
    """Language usage and star totals for a GitHub USER and their organizations."""
    setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = Settings(
            user=user,
            token=token or None,
            weighted=weighted,
            excluded_langs=excluded_langs,
            source=source,
            timeout=timeout,
            per_page=per_page,
            follow_pages=all_pages,
            concurrency=concurrency,
            dedupe=dedupe,
            skip_forks=skip_forks,
            api_url=api_url,
            loc_url=loc_url,
        )
        asyncio.run(run(
            settings,
            output_format=output_format,
            output_file=output_file,
            top_n=top_n,
        ))
    except LangStatsError as exc:
        raise click.ClickException(str(exc)) from exc
    except httpx.HTTPError as exc:
        raise click.ClickException(f"Request failed: {exc}") from exc
