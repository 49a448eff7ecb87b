"""Run settings passed explicitly to every stage."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import ConfigError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_LOC_URL = "https://api.codetabs.com/v1/loc"
MAX_PER_PAGE = 100

SOURCES = ("github", "loc")


@dataclass(frozen=True)
class Settings:
    user: str
    token: str | None = None
    weighted: bool = False
    excluded_langs: tuple[str, ...] = field(default_factory=tuple)
    source: str = "github"
    timeout: float = 30.0
    per_page: int = MAX_PER_PAGE
    follow_pages: bool = False
    concurrency: int = 1
    dedupe: bool = False
    skip_forks: bool = False
    api_url: str = DEFAULT_API_URL
    loc_url: str = DEFAULT_LOC_URL

    def __post_init__(self) -> None:
        user = (self.user or "").strip()
        if not user:
            raise ConfigError("A username is required")
        object.__setattr__(self, "user", user)
        if self.source not in SOURCES:
            raise ConfigError(
                f"Unknown language source {self.source!r}; expected one of {', '.join(SOURCES)}"
            )
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive")
        if not 1 <= self.per_page <= MAX_PER_PAGE:
            raise ConfigError(f"per_page must be between 1 and {MAX_PER_PAGE}")
        if self.concurrency < 1:
            raise ConfigError("concurrency must be at least 1")
        # Exclusions are matched case-insensitively.
        object.__setattr__(
            self, "excluded_langs", tuple(lang.lower() for lang in self.excluded_langs)
        )
