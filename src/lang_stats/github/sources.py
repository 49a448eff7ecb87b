"""Where a repository's language breakdown comes from."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..errors import ConfigError, ResponseShapeError
from ..models import RepositoryRef

if TYPE_CHECKING:
    from ..config import Settings
    from .client import GitHubClient

# Summary row emitted by the line counting service.
TOTAL_ENTRY = "Total"


class LanguageSource(ABC):
    """Produces a language -> magnitude mapping for a repository."""

    name: str = ""
    unit: str = ""

    @abstractmethod
    async def breakdown(self, client: GitHubClient, repo: RepositoryRef) -> dict[str, float]:
        """Return the repository's languages; raise on transport or shape errors."""


class GitHubLanguageSource(LanguageSource):
    """Byte counts from GitHub's per-repository languages endpoint."""

    name = "github"
    unit = "bytes"

    async def breakdown(self, client: GitHubClient, repo: RepositoryRef) -> dict[str, float]:
        languages = await client.get_languages(repo.languages_url)
        return {language: float(size) for language, size in languages.items()}


class LineCountSource(LanguageSource):
    """Lines of code from the codetabs line counter, keyed by full repo name."""

    name = "loc"
    unit = "lines"

    def __init__(self, loc_url: str) -> None:
        self._loc_url = loc_url.rstrip("/")

    def url_for(self, repo: RepositoryRef) -> str:
        return f"{self._loc_url}?github={repo.full_name}"

    async def breakdown(self, client: GitHubClient, repo: RepositoryRef) -> dict[str, float]:
        url = self.url_for(repo)
        data = await client.fetch(url)
        if not isinstance(data, list):
            raise ResponseShapeError("expected a JSON array of line counts", url)

        languages: dict[str, float] = {}
        for entry in data:
            if not isinstance(entry, dict):
                raise ResponseShapeError("expected a JSON object per language", url)
            language = entry.get("language")
            lines = entry.get("linesOfCode")
            if not isinstance(language, str) or isinstance(lines, bool) or not isinstance(lines, int):
                raise ResponseShapeError("entry is missing 'language' or 'linesOfCode'", url)
            if language == TOTAL_ENTRY:
                continue
            if lines < 0:
                raise ResponseShapeError(f"negative line count for {language!r}", url)
            languages[language] = languages.get(language, 0.0) + lines
        return languages


def get_source(settings: Settings) -> LanguageSource:
    if settings.source == GitHubLanguageSource.name:
        return GitHubLanguageSource()
    if settings.source == LineCountSource.name:
        return LineCountSource(settings.loc_url)
    raise ConfigError(f"Unknown language source {settings.source!r}")
