"""Fold parsed settlement records into per-month aggregates.

Expectations:
- Input: `SettlementRecord` objects in file order (any month order).
- Output: one `MonthlyAggregate` per month key holding raw records, running
  sums and category/vendor buckets. Derived fields are left untouched; see
  `settlement_pipeline.aggregate.derive`.
"""
from __future__ import annotations

import logging
from typing import Iterable

from settlement_pipeline.models import MonthlyAggregate, SettlementRecord

log = logging.getLogger(__name__)


def register_vendor(aggregate: MonthlyAggregate, vendor: str) -> None:
    """Record a vendor in first-seen order and give it zero breakdown slots."""
    if not vendor:
        return
    if vendor not in aggregate.vendor_names:
        aggregate.vendor_names.append(vendor)
    aggregate.one_time_vendor_sums.setdefault(vendor, 0.0)
    aggregate.subscription_vendor_sums.setdefault(vendor, 0.0)


def add_detail_amounts(aggregate: MonthlyAggregate, record: SettlementRecord) -> None:
    """Add a detail row's post-discount amounts to its category and vendor buckets.

    Rows with a category outside the fixed vocabulary only reach the vendor
    buckets.
    """
    category = record.category
    if category is not None:
        aggregate.one_time_category_sums[category] += record.one_time_post_discount
        aggregate.subscription_category_sums[category] += record.subscription_post_discount

    if record.vendor:
        aggregate.one_time_vendor_sums[record.vendor] += record.one_time_post_discount
        aggregate.subscription_vendor_sums[record.vendor] += record.subscription_post_discount


def _add_total_row(aggregate: MonthlyAggregate, record: SettlementRecord) -> None:
    # negative correction rows are ignored, never subtracted
    if record.monthly_total_cost > 0:
        aggregate.total_cost_sum += record.monthly_total_cost
    if record.monthly_payable > 0:
        aggregate.payable_sum += record.monthly_payable
    if record.one_time_post_discount > 0:
        aggregate.one_time_cost_sum += record.one_time_post_discount
    if record.subscription_post_discount > 0:
        aggregate.subscription_cost_sum += record.subscription_post_discount


def _keep_first_score(aggregate: MonthlyAggregate, record: SettlementRecord) -> None:
    if not record.vendor or record.comprehensive_score <= 0:
        return
    if aggregate.score.get(record.vendor, 0.0) == 0.0:
        aggregate.score[record.vendor] = record.comprehensive_score


def accumulate_record(aggregate: MonthlyAggregate, record: SettlementRecord) -> None:
    """Apply one record to the aggregate of its month."""
    aggregate.records.append(record)
    register_vendor(aggregate, record.vendor)

    if record.is_total:
        _add_total_row(aggregate, record)
        return

    _keep_first_score(aggregate, record)
    add_detail_amounts(aggregate, record)


def accumulate_records(records: Iterable[SettlementRecord]) -> dict[str, MonthlyAggregate]:
    """Group records by month key and accumulate each month.

    Args:
        records: Parsed settlement records.

    Returns:
        Mapping of month key to its (not yet finalized) aggregate, in
        first-seen month order.
    """
    months: dict[str, MonthlyAggregate] = {}
    count = 0
    for record in records:
        aggregate = months.get(record.month_key)
        if aggregate is None:
            aggregate = MonthlyAggregate(month_key=record.month_key)
            months[record.month_key] = aggregate
        accumulate_record(aggregate, record)
        count += 1

    log.info("Accumulated %d records into %d months", count, len(months))
    return months
