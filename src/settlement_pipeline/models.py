"""Pydantic models for parsed settlement rows and monthly aggregates.

`SettlementRecord` is one CSV data row. `MonthlyAggregate` holds the
running sums collected for a month plus the derived, 万-scaled fields shown
on the dashboard. `YoYDeltas`, `VendorSummary` and `VendorScores` are the
read models returned by the query surface.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from settlement_pipeline.vocabulary import (
    Category,
    category_for_label,
    is_total_label,
)


def _zero_buckets() -> dict[Category, float]:
    return {category: 0.0 for category in Category}


class SettlementRecord(BaseModel):
    """Schema for one parsed settlement row.

    Attributes:
        month_key: Normalized month ("YYYY-MM") or the raw label if unparsable.
        city: City name.
        vendor: Maintenance vendor name.
        service_category: Raw service-category label or the TOTAL sentinel.
        subscription_pre_discount: 包年 amount before discount (yuan).
        one_time_pre_discount: 按次 amount before discount (yuan).
        discount_rate: Discount rate.
        subscription_post_discount: 包年 amount after discount (yuan).
        one_time_post_discount: 按次 amount after discount (yuan).
        total_post_discount: Total after discount (yuan).
        monthly_score: Monthly assessment score.
        monthly_coefficient: Monthly assessment coefficient (percent stripped).
        monthly_payable: Monthly payable amount (yuan).
        other_deductions: Other deductions (yuan).
        monthly_actual_pay: Monthly amount actually paid (yuan).
        monthly_deposit: Monthly quality deposit (yuan).
        monthly_total_cost: Monthly total cost (yuan).
        comprehensive_score: Comprehensive vendor score.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)
    month_key: str
    city: str = ""
    vendor: str = ""
    service_category: str = ""
    subscription_pre_discount: float = 0.0
    one_time_pre_discount: float = 0.0
    discount_rate: float = 0.0
    subscription_post_discount: float = 0.0
    one_time_post_discount: float = 0.0
    total_post_discount: float = 0.0
    monthly_score: float = 0.0
    monthly_coefficient: float = 0.0
    monthly_payable: float = 0.0
    other_deductions: float = 0.0
    monthly_actual_pay: float = 0.0
    monthly_deposit: float = 0.0
    monthly_total_cost: float = 0.0
    comprehensive_score: float = 0.0

    @property
    def is_total(self) -> bool:
        """True for a vendor rollup (TOTAL) row."""
        return is_total_label(self.service_category)

    @property
    def category(self) -> Category | None:
        """Fixed category bucket of a detail row, None if unknown or TOTAL."""
        return category_for_label(self.service_category)


class Breakdown(BaseModel):
    """Parallel label/value arrays for one breakdown chart."""
    model_config = ConfigDict(extra="forbid")
    labels: list[str] = Field(default_factory=list)
    data: list[float] = Field(default_factory=list)

    def as_dict(self) -> dict[str, float]:
        return dict(zip(self.labels, self.data))


class BillingBreakdown(BaseModel):
    """Category and vendor breakdowns for one billing mode."""
    model_config = ConfigDict(extra="forbid")
    categories: Breakdown = Field(default_factory=Breakdown)
    vendors: Breakdown = Field(default_factory=Breakdown)


class MonthlyAggregate(BaseModel):
    """Accumulated and derived figures for one month.

    Running sums are in yuan. Derived fields are filled by
    `settlement_pipeline.aggregate.derive.finalize_aggregate` and are in 万
    except `total_count` (payable / 1000) and `avg_cost` (yuan per count).

    Attributes:
        month_key: Month the aggregate belongs to.
        records: Every record seen for the month, in input order.
        total_cost_sum: Sum of positive TOTAL-row monthly total costs.
        payable_sum: Sum of positive TOTAL-row monthly payables.
        one_time_cost_sum: Sum of positive TOTAL-row 按次 post-discount amounts.
        subscription_cost_sum: Sum of positive TOTAL-row 包年 post-discount amounts.
        vendor_names: Vendors in first-seen order.
        score: Vendor -> first positive comprehensive score of a detail row.
        one_time_category_sums: 按次 post-discount amount per category.
        subscription_category_sums: 包年 post-discount amount per category.
        one_time_vendor_sums: 按次 post-discount amount per vendor.
        subscription_vendor_sums: 包年 post-discount amount per vendor.
    """
    model_config = ConfigDict(extra="forbid")
    month_key: str
    records: list[SettlementRecord] = Field(default_factory=list)

    total_cost_sum: float = 0.0
    payable_sum: float = 0.0
    one_time_cost_sum: float = 0.0
    subscription_cost_sum: float = 0.0

    vendor_names: list[str] = Field(default_factory=list)
    score: dict[str, float] = Field(default_factory=dict)
    one_time_category_sums: dict[Category, float] = Field(default_factory=_zero_buckets)
    subscription_category_sums: dict[Category, float] = Field(default_factory=_zero_buckets)
    one_time_vendor_sums: dict[str, float] = Field(default_factory=dict)
    subscription_vendor_sums: dict[str, float] = Field(default_factory=dict)

    # derived
    total_cost: float = 0.0
    total_count: float = 0.0
    avg_cost: float = 0.0
    one_time_cost: float = 0.0
    subscription_cost: float = 0.0
    one_time: BillingBreakdown = Field(default_factory=BillingBreakdown)
    subscription: BillingBreakdown = Field(default_factory=BillingBreakdown)


class YoYDeltas(BaseModel):
    """Year-over-year percentage changes for one month."""
    model_config = ConfigDict(extra="forbid")
    month_key: str
    prior_month_key: str | None = None
    total_change: float = 0.0
    count_change: float = 0.0
    avg_change: float = 0.0
    one_time_change: float = 0.0
    subscription_change: float = 0.0
    score_change: dict[str, float] = Field(default_factory=dict)


class VendorSummary(BaseModel):
    """Rollup figures read from a vendor's TOTAL row."""
    model_config = ConfigDict(extra="forbid")
    total_cost: float = 0.0
    score: float = 0.0
    payable: float = 0.0
    actual_pay: float = 0.0


class VendorScores(BaseModel):
    """Vendor names in first-seen order plus first detail-line scores."""
    model_config = ConfigDict(extra="forbid")
    vendor_names: list[str] = Field(default_factory=list)
    first_line_scores: dict[str, float] = Field(default_factory=dict)
