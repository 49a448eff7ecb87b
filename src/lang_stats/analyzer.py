"""Turn each candidate repository into a record, or explain why it was skipped."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping

import httpx

from .config import Settings
from .errors import ResponseShapeError
from .github.client import GitHubClient
from .github.sources import TOTAL_ENTRY, LanguageSource
from .models import Contributor, RepositoryRecord, RepositoryRef, Skipped

logger = logging.getLogger(__name__)

AnalysisResult = RepositoryRecord | Skipped


def compute_ratio(contributors: list[Contributor], username: str) -> float | None:
    """Share of all contributions made by ``username``.

    None when the user is not a contributor or nobody has contributed.
    """
    total = sum(c.contributions for c in contributors)
    wanted = username.lower()
    user = next((c for c in contributors if c.login.lower() == wanted), None)
    if user is None or total == 0:
        return None
    return user.contributions / total


def filter_languages(breakdown: Mapping[str, float], excluded: Iterable[str]) -> dict[str, float]:
    """Drop the synthetic total row and excluded languages (case-insensitive)."""
    excluded = {lang.lower() for lang in excluded}
    return {
        language: magnitude
        for language, magnitude in breakdown.items()
        if language != TOTAL_ENTRY and language.lower() not in excluded
    }


def _failed(repo: RepositoryRef, what: str, exc: Exception) -> Skipped:
    logger.warning("Skipping %s: could not fetch %s: %s", repo.full_name, what, exc)
    return Skipped(repo.full_name, f"could not fetch {what}: {exc}", failed=True)


async def analyze_repository(
    client: GitHubClient,
    repo: RepositoryRef,
    settings: Settings,
    source: LanguageSource,
) -> AnalysisResult:
    try:
        contributors = await client.list_contributors(repo.contributors_url)
    except (httpx.HTTPError, ResponseShapeError) as exc:
        return _failed(repo, "contributors", exc)

    if not any(c.login.lower() == settings.user.lower() for c in contributors):
        logger.debug("Skipping %s: %s is not a contributor", repo.full_name, settings.user)
        return Skipped(repo.full_name, f"{settings.user} is not a contributor")

    ratio = compute_ratio(contributors, settings.user)
    if ratio is None:
        logger.debug("Skipping %s: no contributions recorded", repo.full_name)
        return Skipped(repo.full_name, "no contributions recorded")

    try:
        breakdown = await source.breakdown(client, repo)
    except (httpx.HTTPError, ResponseShapeError) as exc:
        return _failed(repo, "languages", exc)

    return RepositoryRecord(
        full_name=repo.full_name,
        languages=filter_languages(breakdown, settings.excluded_langs),
        user_ratio=ratio,
        stars=repo.stargazers_count,
    )


async def analyze_all(
    client: GitHubClient,
    repos: list[RepositoryRef],
    settings: Settings,
    source: LanguageSource,
) -> list[AnalysisResult]:
    """Analyze every repository, at most ``settings.concurrency`` at a time.

    Results come back in the same order as ``repos``.
    """
    semaphore = asyncio.Semaphore(settings.concurrency)

    async def _one(repo: RepositoryRef) -> AnalysisResult:
        async with semaphore:
            return await analyze_repository(client, repo, settings, source)

    return list(await asyncio.gather(*(_one(repo) for repo in repos)))
