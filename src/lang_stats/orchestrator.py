"""Wire collection, analysis, aggregation and rendering together."""

from __future__ import annotations

import logging

from .aggregator import aggregate
from .analyzer import analyze_all
from .collector import collect_repositories, dedupe_repositories
from .config import Settings
from .github.client import GitHubClient
from .github.sources import get_source
from .models import RepositoryRecord, Skipped, UserReport
from .renderer import render_csv, render_json, render_report

logger = logging.getLogger(__name__)


async def build_report(client: GitHubClient, settings: Settings) -> UserReport:
    source = get_source(settings)

    repos = await collect_repositories(client, settings.user)
    if settings.dedupe:
        repos = dedupe_repositories(repos)
    if settings.skip_forks:
        repos = [repo for repo in repos if not repo.fork]
    logger.info("Analyzing %d repositories", len(repos))

    results = await analyze_all(client, repos, settings, source)
    records = [r for r in results if isinstance(r, RepositoryRecord)]
    skipped = [r for r in results if isinstance(r, Skipped)]
    logger.info("Analyzed %d repositories, skipped %d", len(records), len(skipped))

    return UserReport(
        user=settings.user,
        weighted=settings.weighted,
        source=source.unit,
        total_repos=len(repos),
        records=records,
        skipped=skipped,
        result=aggregate(records, settings.weighted),
    )


async def run(
    settings: Settings,
    output_format: str = "table",
    output_file: str | None = None,
    top_n: int | None = None,
) -> None:
    async with GitHubClient(
        token=settings.token,
        timeout=settings.timeout,
        per_page=settings.per_page,
        follow_pages=settings.follow_pages,
        api_url=settings.api_url,
    ) as client:
        report = await build_report(client, settings)

    if output_format == "json":
        render_json(report, output_file=output_file)
    elif output_format == "csv":
        render_csv(report, output_file=output_file)
    else:
        render_report(report, top_n=top_n, output_file=output_file)
