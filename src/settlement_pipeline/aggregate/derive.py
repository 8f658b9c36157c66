"""Derived (万-scaled) fields of a monthly aggregate."""
from __future__ import annotations

from settlement_pipeline.models import Breakdown, BillingBreakdown, MonthlyAggregate
from settlement_pipeline.numeric import THOUSAND, TEN_THOUSAND, round_half_away, to_wan
from settlement_pipeline.vocabulary import Category


def average_cost(total_cost: float, total_count: float) -> float:
    """Average cost per count in yuan; 0 when there is no count."""
    if total_count <= 0:
        return 0.0
    return round_half_away(total_cost * TEN_THOUSAND / total_count)


def _billing_breakdown(
    category_sums: dict[Category, float],
    vendor_sums: dict[str, float],
    vendor_names: list[str],
) -> BillingBreakdown:
    return BillingBreakdown(
        categories=Breakdown(
            labels=[c.label for c in Category],
            data=[to_wan(category_sums.get(c, 0.0)) for c in Category],
        ),
        vendors=Breakdown(
            labels=list(vendor_names),
            data=[to_wan(vendor_sums.get(v, 0.0)) for v in vendor_names],
        ),
    )


def finalize_aggregate(aggregate: MonthlyAggregate) -> MonthlyAggregate:
    """Populate the derived fields from the running sums.

    Only derived fields are written, so calling this again yields the same
    result.

    Args:
        aggregate: Aggregate whose accumulation phase is complete.

    Returns:
        The same aggregate, for chaining.
    """
    aggregate.total_cost = to_wan(aggregate.total_cost_sum)
    aggregate.total_count = round_half_away(aggregate.payable_sum / THOUSAND)
    aggregate.avg_cost = average_cost(aggregate.total_cost, aggregate.total_count)
    aggregate.one_time_cost = to_wan(aggregate.one_time_cost_sum)
    aggregate.subscription_cost = to_wan(aggregate.subscription_cost_sum)

    aggregate.one_time = _billing_breakdown(
        aggregate.one_time_category_sums,
        aggregate.one_time_vendor_sums,
        aggregate.vendor_names,
    )
    aggregate.subscription = _billing_breakdown(
        aggregate.subscription_category_sums,
        aggregate.subscription_vendor_sums,
        aggregate.vendor_names,
    )
    return aggregate
