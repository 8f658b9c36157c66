"""Year-over-year comparison of monthly aggregates."""
from __future__ import annotations

import logging
from typing import Mapping

from settlement_pipeline.aggregate.profession import filter_by_profession
from settlement_pipeline.models import MonthlyAggregate, YoYDeltas
from settlement_pipeline.numeric import percent_change
from settlement_pipeline.vocabulary import ALL_PROFESSIONS, Category

log = logging.getLogger(__name__)


def prior_year_key(month_key: str) -> str | None:
    """Return the same month one year earlier ("2024-03" -> "2023-03").

    Returns None when the key does not start with a numeric year.
    """
    year, sep, month = month_key.partition("-")
    if not sep:
        return None
    try:
        return f"{int(year) - 1}-{month}"
    except ValueError:
        return None


def score_changes(current: Mapping[str, float], prior: Mapping[str, float]) -> dict[str, float]:
    """Per-vendor score deltas over the union of both score maps."""
    vendors = list(current)
    vendors.extend(v for v in prior if v not in current)
    return {
        v: percent_change(current.get(v, 0.0), prior.get(v, 0.0))
        for v in vendors
    }


def compare_aggregates(current: MonthlyAggregate, prior: MonthlyAggregate) -> YoYDeltas:
    """Compute deltas between two finalized aggregates twelve months apart."""
    return YoYDeltas(
        month_key=current.month_key,
        prior_month_key=prior.month_key,
        total_change=percent_change(current.total_cost, prior.total_cost),
        count_change=percent_change(current.total_count, prior.total_count),
        avg_change=percent_change(current.avg_cost, prior.avg_cost),
        one_time_change=percent_change(current.one_time_cost, prior.one_time_cost),
        subscription_change=percent_change(current.subscription_cost, prior.subscription_cost),
        score_change=score_changes(current.score, prior.score),
    )


def year_over_year(
    aggregates: Mapping[str, MonthlyAggregate],
    month_key: str,
    profession: Category | str = ALL_PROFESSIONS,
) -> YoYDeltas:
    """Return YoY deltas for `month_key`.

    Missing history is not an error: when either month is absent every
    delta is 0 and the score map is empty.

    Args:
        aggregates: Finalized aggregates by month key.
        month_key: Target month ("YYYY-MM").
        profession: Optional selector; both months are filtered first.
    """
    prior_key = prior_year_key(month_key)
    current = aggregates.get(month_key)
    prior = aggregates.get(prior_key) if prior_key else None

    if current is None or prior is None:
        log.info("No year-over-year baseline for %s (prior=%s)", month_key, prior_key)
        return YoYDeltas(month_key=month_key)

    return compare_aggregates(
        filter_by_profession(current, profession),
        filter_by_profession(prior, profession),
    )
