"""Fold repository records into language percentages and a star total."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .models import AggregateResult, LanguageStats, RepositoryRecord

# Percentages are compared at millipercent precision when ranking.
_RANK_SCALE = 1000


def _weight(record: RepositoryRecord, weighted: bool) -> float:
    return record.user_ratio if weighted else 1.0


def sum_languages(records: Iterable[RepositoryRecord], weighted: bool = False) -> dict[str, float]:
    totals: dict[str, float] = {}
    for record in records:
        weight = _weight(record, weighted)
        for language, magnitude in record.languages.items():
            totals[language] = totals.get(language, 0.0) + magnitude * weight
    return totals


def to_percentages(totals: Mapping[str, float]) -> dict[str, float]:
    """Scale totals so they add up to 100. Empty when there is nothing to scale."""
    grand_total = sum(totals.values())
    if grand_total <= 0:
        return {}
    return {language: value / grand_total * 100 for language, value in totals.items()}


def _rank_key(item: tuple[str, float]) -> tuple[int, str]:
    language, percentage = item
    return (-int(percentage * _RANK_SCALE), language)


def rank_languages(percentages: Mapping[str, float]) -> list[tuple[str, float]]:
    """Order languages by descending percentage, then by name."""
    return sorted(percentages.items(), key=_rank_key)


def total_stars(records: Iterable[RepositoryRecord], weighted: bool = False) -> float:
    return sum(record.stars * _weight(record, weighted) for record in records)


def aggregate(records: list[RepositoryRecord], weighted: bool = False) -> AggregateResult:
    totals = sum_languages(records, weighted)
    percentages = to_percentages(totals)
    languages = [
        LanguageStats(language=language, magnitude=totals[language], percentage=percentage)
        for language, percentage in rank_languages(percentages)
    ]
    return AggregateResult(languages=languages, total_stars=float(total_stars(records, weighted)))
