from __future__ import annotations

import pytest

from settlement_pipeline.aggregate.accumulate import accumulate_records
from settlement_pipeline.aggregate.derive import finalize_aggregate
from settlement_pipeline.aggregate.profession import filter_by_profession
from settlement_pipeline.vocabulary import Category


@pytest.fixture
def month(make_record, make_total):
    records = [
        make_record(
            vendor="A",
            service_category="家庭宽带",
            one_time_post_discount=45000,
            subscription_post_discount=180000,
            monthly_payable=225000,
            monthly_total_cost=225000,
            comprehensive_score=92,
        ),
        make_record(
            vendor="A",
            service_category="基站（含铁塔）",
            one_time_post_discount=18000,
            subscription_post_discount=90000,
            monthly_payable=108000,
            monthly_total_cost=108000,
            comprehensive_score=92,
        ),
        make_total(
            vendor="A",
            one_time_post_discount=63000,
            subscription_post_discount=270000,
            monthly_payable=333000,
            monthly_total_cost=333000,
            comprehensive_score=80,
        ),
        make_record(
            vendor="B",
            service_category="直放站室分",
            one_time_post_discount=13800,
            subscription_post_discount=82800,
            monthly_payable=96600,
            monthly_total_cost=96000,
            comprehensive_score=95,
        ),
        make_total(
            vendor="B",
            one_time_post_discount=13800,
            subscription_post_discount=82800,
            monthly_payable=96600,
            monthly_total_cost=96000,
            comprehensive_score=85,
        ),
    ]
    return finalize_aggregate(accumulate_records(records)["2024-01"])


def test_all_returns_same_object(month) -> None:
    assert filter_by_profession(month, "all") is month


def test_filter_does_not_mutate_source(month) -> None:
    before = month.model_dump()
    filter_by_profession(month, Category.WIRELESS)
    assert month.model_dump() == before


def test_wireless_matches_both_raw_labels_plus_totals(month) -> None:
    f = filter_by_profession(month, "wuxian")
    assert [r.service_category for r in f.records] == [
        "基站（含铁塔）",
        "合计金额（元）",
        "直放站室分",
        "合计金额（元）",
    ]
    assert f.total_cost_sum == 108000 + 96000
    assert f.payable_sum == 108000 + 96600
    assert f.total_cost == 20.4
    assert f.total_count == 204.6
    assert f.one_time_cost == 3.18
    assert f.subscription_cost == 17.28


def test_filtered_totals_come_from_detail_total_cost_column(month) -> None:
    f = filter_by_profession(month, Category.RESIDENTIAL_BROADBAND)
    # detail total cost (225000), not the post-discount bucket figure
    assert f.total_cost == 22.5
    assert f.one_time.categories.data == [4.5, 0.0, 0.0, 0.0]
    assert month.one_time.categories.data[0] == 4.5


def test_scores_rebuilt_from_total_rows(month) -> None:
    assert month.score == {"A": 92, "B": 95}
    f = filter_by_profession(month, "jiake")
    assert f.score == {"A": 80, "B": 85}


def test_vendor_breakdown_keeps_every_vendor(month) -> None:
    f = filter_by_profession(month, "jiake")
    assert f.one_time.vendors.as_dict() == {"A": 4.5, "B": 0.0}


@pytest.mark.parametrize("profession", ["jiake", "jike", "xianlu", "wuxian"])
def test_vendor_breakdown_sums_to_filtered_cost(month, profession: str) -> None:
    f = filter_by_profession(month, profession)
    assert sum(f.one_time.vendors.data) == pytest.approx(f.one_time_cost, abs=0.01)
    assert sum(f.subscription.vendors.data) == pytest.approx(f.subscription_cost, abs=0.01)


def test_filtered_avg_cost_uses_derived_formula(month) -> None:
    f = filter_by_profession(month, "wuxian")
    assert f.avg_cost == round(f.total_cost * 10000 / f.total_count, 2)


def test_profession_without_rows_is_zero(month) -> None:
    f = filter_by_profession(month, "xianlu")
    assert f.total_cost == 0.0
    assert f.avg_cost == 0.0
    assert all(r.is_total for r in f.records)


def test_unknown_selector_matches_nothing(month) -> None:
    f = filter_by_profession(month, "fiber")
    assert f is not month
    assert f.total_cost == 0.0
    assert len(f.records) == 2
