from __future__ import annotations

import pytest
from pydantic import ValidationError

from settlement_pipeline.models import MonthlyAggregate, SettlementRecord
from settlement_pipeline.vocabulary import Category, TOTAL_SENTINEL, raw_labels_for_selector


def test_record_defaults_numeric_fields_to_zero() -> None:
    rec = SettlementRecord(month_key="2024-01")
    assert rec.monthly_total_cost == 0.0
    assert rec.comprehensive_score == 0.0
    assert rec.category is None
    assert not rec.is_total


def test_record_rejects_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        SettlementRecord(month_key="2024-01", surprise=1)


def test_record_is_frozen() -> None:
    rec = SettlementRecord(month_key="2024-01")
    with pytest.raises(ValidationError):
        rec.vendor = "B"


def test_total_and_category_properties() -> None:
    assert SettlementRecord(month_key="2024-01", service_category=TOTAL_SENTINEL).is_total
    assert SettlementRecord(month_key="2024-01", service_category="直放站室分").category is Category.WIRELESS


def test_new_aggregate_has_four_zero_buckets() -> None:
    agg = MonthlyAggregate(month_key="2024-01")
    assert list(agg.one_time_category_sums) == list(Category)
    assert all(v == 0 for v in agg.subscription_category_sums.values())


def test_selector_labels() -> None:
    assert raw_labels_for_selector("all") is None
    assert raw_labels_for_selector("wuxian") == {"基站（含铁塔）", "直放站室分"}
    assert raw_labels_for_selector(Category.ENTERPRISE_LINE) == {"集团专线"}
    assert raw_labels_for_selector("unknown") == frozenset()
