"""lang-stats: language usage and stars for a GitHub user."""

__version__ = "0.1.0"
