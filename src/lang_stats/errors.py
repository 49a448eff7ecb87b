"""Exceptions raised by lang-stats."""

from __future__ import annotations


class LangStatsError(Exception):
    """Base class for all lang-stats errors."""


class ConfigError(LangStatsError):
    """Invalid settings."""


class ResponseShapeError(LangStatsError, ValueError):
    """A response body did not have the expected JSON shape."""

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        if url:
            message = f"{message} (from {url})"
        super().__init__(message)


class CollectionError(LangStatsError):
    """Repository collection failed; the run cannot continue."""
