"""Query surface over finalized monthly aggregates.

`SettlementStore` is the context object handed to the CLI and dashboard.
It is built once from a full record sequence; loading new input means
building a new store.
"""

from __future__ import annotations

import logging
from typing import Iterable, Literal

import pandas as pd

from settlement_pipeline.aggregate.accumulate import accumulate_records
from settlement_pipeline.aggregate.derive import finalize_aggregate
from settlement_pipeline.aggregate.profession import filter_by_profession
from settlement_pipeline.aggregate.yoy import year_over_year
from settlement_pipeline.ingest.fetch_csv import fetch_settlement_csv
from settlement_pipeline.ingest.parse_rows import parse_settlement_csv
from settlement_pipeline.models import (
    MonthlyAggregate,
    SettlementRecord,
    VendorScores,
    VendorSummary,
    YoYDeltas,
)
from settlement_pipeline.vocabulary import ALL_PROFESSIONS, Category

log = logging.getLogger(__name__)

BillingMode = Literal["one_time", "subscription"]
Dimension = Literal["categories", "vendors"]


def parse_month_key(month_key: str) -> tuple[int, int] | None:
    """Return (year, month) for a "Y-M" key, or None when it does not parse."""
    year, sep, month = month_key.partition("-")
    if not sep:
        return None
    try:
        y, m = int(year), int(month)
    except ValueError:
        return None
    if not 1 <= m <= 12:
        return None
    return y, m


class SettlementStore:
    """Finalized monthly aggregates plus the queries the views need.

    Attributes:
        aggregates: Month key -> finalized `MonthlyAggregate`.
    """

    def __init__(self, aggregates: dict[str, MonthlyAggregate]) -> None:
        self.aggregates = aggregates

    # --------------------------------------------------
    # Construction
    # --------------------------------------------------
    @classmethod
    def from_records(cls, records: Iterable[SettlementRecord]) -> "SettlementStore":
        months = accumulate_records(records)
        for aggregate in months.values():
            finalize_aggregate(aggregate)
        return cls(months)

    @classmethod
    def from_text(cls, text: str) -> "SettlementStore":
        return cls.from_records(parse_settlement_csv(text))

    @classmethod
    def from_source(cls, source: str, timeout: float = 30.0) -> "SettlementStore":
        """Fetch, parse and aggregate a CSV export.

        Raises:
            AcquisitionError: if the source cannot be read or is empty.
        """
        store = cls.from_text(fetch_settlement_csv(source, timeout))
        log.info("Loaded %d months from %s", len(store.aggregates), source)
        return store

    # --------------------------------------------------
    # Months
    # --------------------------------------------------
    def available_months(self) -> list[str]:
        """Month keys in chronological order.

        Keys that are not "Y-M" stay reachable through `get_month` but are
        left out here, so they never become the latest month.
        """
        valid = {k: parse_month_key(k) for k in self.aggregates}
        return sorted((k for k, ym in valid.items() if ym), key=lambda k: valid[k])

    def latest_month(self) -> str | None:
        months = self.available_months()
        return months[-1] if months else None

    # --------------------------------------------------
    # Aggregates
    # --------------------------------------------------
    def get_month(self, month_key: str) -> MonthlyAggregate | None:
        aggregate = self.aggregates.get(month_key)
        if aggregate is None:
            log.warning("Month not found: %s", month_key)
        return aggregate

    def get_filtered(
        self,
        month_key: str,
        profession: Category | str = ALL_PROFESSIONS,
    ) -> MonthlyAggregate | None:
        """Return the month's aggregate restricted to `profession`."""
        aggregate = self.get_month(month_key)
        if aggregate is None:
            return None
        return filter_by_profession(aggregate, profession)

    def get_yoy(
        self,
        month_key: str,
        profession: Category | str = ALL_PROFESSIONS,
    ) -> YoYDeltas:
        return year_over_year(self.aggregates, month_key, profession)

    # --------------------------------------------------
    # Row-level views
    # --------------------------------------------------
    def get_details(self, month_key: str) -> list[SettlementRecord]:
        aggregate = self.aggregates.get(month_key)
        return list(aggregate.records) if aggregate else []

    def get_vendor_summary(self, month_key: str) -> dict[str, VendorSummary]:
        """Rollup figures per vendor, read from the TOTAL rows only."""
        summary: dict[str, VendorSummary] = {}
        for row in self.get_details(month_key):
            if row.is_total:
                summary[row.vendor] = VendorSummary(
                    total_cost=row.monthly_total_cost,
                    score=row.comprehensive_score,
                    payable=row.monthly_payable,
                    actual_pay=row.monthly_actual_pay,
                )
        return summary

    def get_vendor_scores(self, month_key: str) -> VendorScores:
        """Vendor names plus the first positive detail-row score of each."""
        names: list[str] = []
        scores: dict[str, float] = {}
        for row in self.get_details(month_key):
            if row.vendor and row.vendor not in names:
                names.append(row.vendor)
            if row.vendor and not row.is_total and row.comprehensive_score > 0 and not scores.get(row.vendor):
                scores[row.vendor] = row.comprehensive_score
        return VendorScores(vendor_names=names, first_line_scores=scores)

    # --------------------------------------------------
    # pandas views
    # --------------------------------------------------
    def trend(
        self,
        start: str,
        end: str,
        profession: Category | str = ALL_PROFESSIONS,
    ) -> pd.DataFrame:
        """Monthly total cost (万) for every month in [start, end].

        Months without data are reported as 0. A bound that is not a valid
        month yields an empty frame.

        Returns:
            DataFrame with columns `month_key`, `total_cost`.
        """
        try:
            periods = pd.period_range(start=start, end=end, freq="M")
        except ValueError as e:
            log.warning("Cannot build trend for %s..%s: %s", start, end, e)
            return pd.DataFrame(columns=["month_key", "total_cost"])

        rows = []
        for period in periods:
            key = period.strftime("%Y-%m")
            aggregate = self.aggregates.get(key)
            filtered = filter_by_profession(aggregate, profession) if aggregate else None
            rows.append({"month_key": key, "total_cost": filtered.total_cost if filtered else 0.0})
        return pd.DataFrame(rows, columns=["month_key", "total_cost"])

    def details_frame(self, month_key: str) -> pd.DataFrame:
        records = self.get_details(month_key)
        columns = list(SettlementRecord.model_fields)
        return pd.DataFrame([r.model_dump() for r in records], columns=columns)

    def breakdown_frame(
        self,
        month_key: str,
        profession: Category | str = ALL_PROFESSIONS,
        mode: BillingMode = "one_time",
        dimension: Dimension = "categories",
    ) -> pd.DataFrame:
        """Breakdown of a billing mode by category or vendor, in 万.

        Returns:
            DataFrame with columns `label`, `amount` (empty when the month
            is unknown).
        """
        aggregate = self.get_filtered(month_key, profession)
        if aggregate is None:
            return pd.DataFrame(columns=["label", "amount"])
        breakdown = getattr(getattr(aggregate, mode), dimension)
        return pd.DataFrame({"label": breakdown.labels, "amount": breakdown.data})
