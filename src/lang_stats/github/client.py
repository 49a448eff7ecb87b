"""Async GitHub REST client built on httpx."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from .. import __version__
from ..config import DEFAULT_API_URL, MAX_PER_PAGE
from ..errors import ResponseShapeError
from ..models import Contributor, Organization, Profile, RepositoryRef

logger = logging.getLogger(__name__)

USER_AGENT = f"lang-stats/{__version__} (httpx)"


class GitHubClient:
    """Read-only GitHub API client.

    Use as an async context manager::

        async with GitHubClient(token=...) as client:
            profile = await client.get_user("octocat")

    List endpoints get a ``per_page`` hint. Only the first page is read unless
    ``follow_pages`` is set, in which case ``rel="next"`` links are followed.
    """

    def __init__(
        self,
        token: str | None = None,
        timeout: float = 30.0,
        per_page: int = MAX_PER_PAGE,
        follow_pages: bool = False,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._per_page = per_page
        self._follow_pages = follow_pages
        self._api_url = api_url.rstrip("/")
        self._api_host = httpx.URL(self._api_url).host
        self._client = httpx.AsyncClient(
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "application/vnd.github+json",
            },
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def _headers_for(self, url: str) -> dict[str, str]:
        # The token is only ever sent to the GitHub API host.
        if self._token and httpx.URL(url).host == self._api_host:
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        logger.debug("GET %s", url)
        response = await self._client.get(url, params=params, headers=self._headers_for(url))
        response.raise_for_status()
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseShapeError("response body is not valid JSON", str(response.url)) from exc

    async def fetch(self, url: str, paginated: bool = False) -> Any:
        """GET ``url`` and return the decoded JSON body.

        Transport errors and non-2xx statuses propagate as ``httpx.HTTPError``.
        """
        if not paginated:
            return self._json(await self._get(url))

        response = await self._get(url, params={"per_page": self._per_page})
        # GitHub answers list endpoints of empty repositories with 204 No Content.
        if response.status_code == 204 or not response.content:
            return []
        data = self._json(response)
        if not self._follow_pages or not isinstance(data, list):
            return data

        items = list(data)
        visited = {str(response.url)}
        next_url = response.links.get("next", {}).get("url")
        while next_url and next_url not in visited:
            visited.add(next_url)
            response = await self._get(next_url)
            page = self._json(response)
            if not isinstance(page, list):
                raise ResponseShapeError("expected a JSON array page", next_url)
            items.extend(page)
            next_url = response.links.get("next", {}).get("url")
        return items

    async def get_user(self, username: str) -> Profile:
        url = f"{self._api_url}/users/{quote(username, safe='')}"
        return Profile.from_json(await self.fetch(url), url)

    async def list_repos(self, url: str) -> list[RepositoryRef]:
        return RepositoryRef.list_from_json(await self.fetch(url, paginated=True), url)

    async def list_orgs(self, url: str) -> list[Organization]:
        return Organization.list_from_json(await self.fetch(url, paginated=True), url)

    async def list_contributors(self, url: str) -> list[Contributor]:
        return Contributor.list_from_json(await self.fetch(url, paginated=True), url)

    async def get_languages(self, url: str) -> dict[str, int]:
        data = await self.fetch(url)
        if not isinstance(data, dict):
            raise ResponseShapeError("expected a JSON object of language byte counts", url)
        for language, size in data.items():
            if isinstance(size, bool) or not isinstance(size, int) or size < 0:
                raise ResponseShapeError(f"invalid byte count for {language!r}", url)
        return data
