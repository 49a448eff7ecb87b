"""Tests for the GitHub client."""

from __future__ import annotations

import httpx
import pytest

from lang_stats.errors import ResponseShapeError
from lang_stats.github.client import USER_AGENT, GitHubClient

API = "https://api.github.com"


def _client(handler, **kwargs) -> GitHubClient:
    return GitHubClient(transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_fetch_sends_user_agent_and_token():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    async with _client(handler, token="secret") as client:
        data = await client.fetch(f"{API}/users/alice")

    assert data == {"ok": True}
    assert seen[0].headers["User-Agent"] == USER_AGENT
    assert seen[0].headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_fetch_without_token_has_no_authorization():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    async with _client(handler) as client:
        await client.fetch(f"{API}/users/alice")

    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_token_not_sent_to_other_hosts():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with _client(handler, token="secret") as client:
        await client.fetch("https://api.codetabs.com/v1/loc?github=alice/repo")

    assert "Authorization" not in seen[0].headers
    assert seen[0].headers["User-Agent"] == USER_AGENT


@pytest.mark.asyncio
async def test_paginated_fetch_adds_page_size():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"n": 1}])

    async with _client(handler, per_page=50) as client:
        data = await client.fetch(f"{API}/users/alice/repos", paginated=True)

    assert data == [{"n": 1}]
    assert seen[0].url.params["per_page"] == "50"


@pytest.mark.asyncio
async def test_paginated_fetch_reads_only_first_page_by_default():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            200,
            json=[1, 2],
            headers={"Link": f'<{API}/users/alice/repos?page=2&per_page=100>; rel="next"'},
        )

    async with _client(handler) as client:
        data = await client.fetch(f"{API}/users/alice/repos", paginated=True)

    assert data == [1, 2]
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_follow_pages_concatenates_all_pages():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[3])
        return httpx.Response(
            200,
            json=[1, 2],
            headers={"Link": f'<{API}/users/alice/repos?page=2&per_page=100>; rel="next"'},
        )

    async with _client(handler, follow_pages=True) as client:
        data = await client.fetch(f"{API}/users/alice/repos", paginated=True)

    assert data == [1, 2, 3]


@pytest.mark.asyncio
async def test_http_error_propagates():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    async with _client(handler) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.fetch(f"{API}/users/nobody")


@pytest.mark.asyncio
async def test_invalid_json_raises_shape_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    async with _client(handler) as client:
        with pytest.raises(ResponseShapeError):
            await client.fetch(f"{API}/users/alice")


@pytest.mark.asyncio
async def test_get_user_parses_profile():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/users/alice"
        return httpx.Response(200, json={
            "login": "alice",
            "repos_url": f"{API}/users/alice/repos",
            "organizations_url": f"{API}/users/alice/orgs",
            "public_repos": 3,
        })

    async with _client(handler) as client:
        profile = await client.get_user("alice")

    assert profile.login == "alice"
    assert profile.organizations_url.endswith("/orgs")


@pytest.mark.asyncio
async def test_list_contributors_rejects_object_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"message": "too large"})

    async with _client(handler) as client:
        with pytest.raises(ResponseShapeError):
            await client.list_contributors(f"{API}/repos/alice/a/contributors")


@pytest.mark.asyncio
async def test_get_languages_validates_counts():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"Python": "lots"})

    async with _client(handler) as client:
        with pytest.raises(ResponseShapeError):
            await client.get_languages(f"{API}/repos/alice/a/languages")


@pytest.mark.asyncio
async def test_paginated_no_content_is_empty_list():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    async with _client(handler) as client:
        contributors = await client.list_contributors(f"{API}/repos/alice/empty/contributors")

    assert contributors == []


@pytest.mark.asyncio
async def test_follow_pages_stops_on_repeated_link():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        # Every page claims page 2 comes next.
        return httpx.Response(
            200,
            json=[len(calls)],
            headers={"Link": f'<{API}/users/alice/repos?page=2&per_page=100>; rel="next"'},
        )

    async with _client(handler, follow_pages=True) as client:
        data = await client.fetch(f"{API}/users/alice/repos", paginated=True)

    assert data == [1, 2]
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_get_user_quotes_username():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={
            "login": "alice",
            "repos_url": f"{API}/users/alice/repos",
            "organizations_url": f"{API}/users/alice/orgs",
        })

    async with _client(handler) as client:
        await client.get_user("alice/repos?x=1")

    assert seen[0].url.raw_path == b"/users/alice%2Frepos%3Fx%3D1"
    assert "x" not in seen[0].url.params
