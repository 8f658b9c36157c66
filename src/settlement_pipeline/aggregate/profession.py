"""Re-derive a monthly aggregate for a single profession.

The filtered view does not slice the unfiltered category buckets. It walks
the month's raw records again:

- cost, payable and billing-mode sums come straight from the matching
  detail rows (the monthly total-cost column, not the post-discount bucket
  figure used by the unfiltered view);
- vendor scores come from the TOTAL rows instead of the first detail row.
"""
from __future__ import annotations

import logging

from settlement_pipeline.aggregate.accumulate import add_detail_amounts, register_vendor
from settlement_pipeline.aggregate.derive import finalize_aggregate
from settlement_pipeline.models import MonthlyAggregate, SettlementRecord
from settlement_pipeline.vocabulary import Category, raw_labels_for_selector

log = logging.getLogger(__name__)


def _rollup_scores(records: list[SettlementRecord]) -> dict[str, float]:
    scores: dict[str, float] = {}
    for row in records:
        if row.is_total and row.vendor and row.comprehensive_score:
            scores[row.vendor] = row.comprehensive_score
    return scores


def filter_by_profession(
    aggregate: MonthlyAggregate,
    profession: Category | str,
) -> MonthlyAggregate:
    """Return the aggregate restricted to one profession.

    Args:
        aggregate: A finalized monthly aggregate; it is never mutated.
        profession: A `Category`, its tag ("jiake", "jike", "xianlu",
            "wuxian") or "all".

    Returns:
        ``aggregate`` itself for "all", otherwise a new finalized aggregate
        whose records are the matching detail rows plus every TOTAL row.
    """
    labels = raw_labels_for_selector(profession)
    if labels is None:
        return aggregate

    matching = [r for r in aggregate.records if not r.is_total and r.service_category in labels]
    kept = [r for r in aggregate.records if r.is_total or r.service_category in labels]

    filtered = MonthlyAggregate(month_key=aggregate.month_key, records=kept)
    for vendor in aggregate.vendor_names:
        register_vendor(filtered, vendor)

    for row in matching:
        filtered.total_cost_sum += row.monthly_total_cost
        filtered.payable_sum += row.monthly_payable
        filtered.one_time_cost_sum += row.one_time_post_discount
        filtered.subscription_cost_sum += row.subscription_post_discount
        add_detail_amounts(filtered, row)

    filtered.score = _rollup_scores(aggregate.records)

    log.debug(
        "Filtered %s by %s: %d of %d rows",
        aggregate.month_key,
        profession,
        len(kept),
        len(aggregate.records),
    )
    return finalize_aggregate(filtered)
