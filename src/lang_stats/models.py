"""Data models for lang-stats."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import ResponseShapeError


def _require(data: Any, key: str, kind: type | tuple[type, ...], url: str | None) -> Any:
    if not isinstance(data, dict):
        raise ResponseShapeError(f"expected a JSON object, got {type(data).__name__}", url)
    if key not in data:
        raise ResponseShapeError(f"missing field {key!r}", url)
    value = data[key]
    # bool is an int subclass; counts must be real integers.
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ResponseShapeError(f"field {key!r} has unexpected type {type(value).__name__}", url)
    return value


def _require_list(data: Any, url: str | None) -> list:
    if not isinstance(data, list):
        raise ResponseShapeError(f"expected a JSON array, got {type(data).__name__}", url)
    return data


@dataclass
class Profile:
    login: str
    repos_url: str
    organizations_url: str

    @classmethod
    def from_json(cls, data: Any, url: str | None = None) -> Profile:
        return cls(
            login=_require(data, "login", str, url),
            repos_url=_require(data, "repos_url", str, url),
            organizations_url=_require(data, "organizations_url", str, url),
        )


@dataclass
class Organization:
    login: str
    repos_url: str

    @classmethod
    def from_json(cls, data: Any, url: str | None = None) -> Organization:
        return cls(
            login=_require(data, "login", str, url),
            repos_url=_require(data, "repos_url", str, url),
        )

    @classmethod
    def list_from_json(cls, data: Any, url: str | None = None) -> list[Organization]:
        return [cls.from_json(item, url) for item in _require_list(data, url)]


@dataclass
class RepositoryRef:
    name: str
    full_name: str
    stargazers_count: int
    contributors_url: str
    languages_url: str
    fork: bool = False

    @classmethod
    def from_json(cls, data: Any, url: str | None = None) -> RepositoryRef:
        stars = _require(data, "stargazers_count", int, url)
        if stars < 0:
            raise ResponseShapeError("field 'stargazers_count' is negative", url)
        return cls(
            name=_require(data, "name", str, url),
            full_name=_require(data, "full_name", str, url),
            stargazers_count=stars,
            contributors_url=_require(data, "contributors_url", str, url),
            languages_url=_require(data, "languages_url", str, url),
            fork=bool(data.get("fork", False)),
        )

    @classmethod
    def list_from_json(cls, data: Any, url: str | None = None) -> list[RepositoryRef]:
        return [cls.from_json(item, url) for item in _require_list(data, url)]


@dataclass
class Contributor:
    login: str
    contributions: int

    @classmethod
    def from_json(cls, data: Any, url: str | None = None) -> Contributor:
        contributions = _require(data, "contributions", int, url)
        if contributions < 0:
            raise ResponseShapeError("field 'contributions' is negative", url)
        return cls(login=_require(data, "login", str, url), contributions=contributions)

    @classmethod
    def list_from_json(cls, data: Any, url: str | None = None) -> list[Contributor]:
        return [cls.from_json(item, url) for item in _require_list(data, url)]


@dataclass(frozen=True)
class RepositoryRecord:
    """What one analyzed repository contributes to the aggregate."""

    full_name: str
    languages: dict[str, float]
    user_ratio: float
    stars: int

    @property
    def top_language(self) -> str | None:
        if not self.languages:
            return None
        return max(self.languages.items(), key=lambda kv: (kv[1], kv[0]))[0]


@dataclass(frozen=True)
class Skipped:
    """A repository left out of the aggregate.

    ``failed`` is set when the data could not be fetched or parsed, as opposed
    to the user simply not having contributed to it.
    """

    full_name: str
    reason: str
    failed: bool = False


@dataclass
class LanguageStats:
    language: str
    magnitude: float
    percentage: float


@dataclass
class AggregateResult:
    languages: list[LanguageStats] = field(default_factory=list)
    total_stars: float = 0.0

    @property
    def percentages(self) -> dict[str, float]:
        return {lang.language: lang.percentage for lang in self.languages}


@dataclass
class UserReport:
    user: str
    weighted: bool
    source: str
    total_repos: int
    records: list[RepositoryRecord] = field(default_factory=list)
    skipped: list[Skipped] = field(default_factory=list)
    result: AggregateResult = field(default_factory=AggregateResult)

    @property
    def failed_repos(self) -> list[str]:
        return [s.full_name for s in self.skipped if s.failed]
