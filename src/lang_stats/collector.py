"""Collect the candidate repositories for a user."""

from __future__ import annotations

import logging

import httpx

from .errors import CollectionError, ResponseShapeError
from .github.client import GitHubClient
from .models import RepositoryRef

logger = logging.getLogger(__name__)


async def collect_repositories(client: GitHubClient, username: str) -> list[RepositoryRef]:
    """Return the user's repositories followed by those of each of their organizations.

    Order is discovery order: own repositories first, then each organization in
    membership order. Any failure here aborts the run with ``CollectionError``.
    """
    stage = f"looking up user {username!r}"
    try:
        profile = await client.get_user(username)
        logger.info(
            "Found user %s; repositories at %s, organizations at %s",
            profile.login, profile.repos_url, profile.organizations_url,
        )

        stage = f"listing repositories of {profile.login}"
        repos = await client.list_repos(profile.repos_url)
        logger.info("Found %d repositories owned by %s", len(repos), profile.login)

        stage = f"listing organizations of {profile.login}"
        orgs = await client.list_orgs(profile.organizations_url)
        logger.info("Found %d organizations", len(orgs))

        for org in orgs:
            stage = f"listing repositories of organization {org.login}"
            org_repos = await client.list_repos(org.repos_url)
            logger.info("Found %d repositories in organization %s", len(org_repos), org.login)
            repos.extend(org_repos)
    except (httpx.HTTPError, ResponseShapeError) as exc:
        raise CollectionError(f"Failed while {stage}: {exc}") from exc

    return repos


def dedupe_repositories(repos: list[RepositoryRef]) -> list[RepositoryRef]:
    """Drop repeated repositories, keeping the first occurrence of each full name."""
    seen: set[str] = set()
    unique = []
    for repo in repos:
        key = repo.full_name.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(repo)
    return unique
