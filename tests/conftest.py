from __future__ import annotations

from typing import Any, Callable

import pytest

from settlement_pipeline.models import SettlementRecord
from settlement_pipeline.vocabulary import TOTAL_SENTINEL

HEADER = (
    "年/月,地市,代维公司,服务专业,包年折扣前金额小计（元）,按次折扣前金额小计（元）,折扣率,"
    "包年折扣后金额小计（元）,按次折扣后金额小计（元）,折扣后金额合计（元）,月度考核得分,"
    "月度考核系数,月度应付费用（元）,其他扣款（元）,月度实付费用（元）,月度质保金（元）,"
    "月度合计费用（元）,综合得分"
)

RecordFactory = Callable[..., SettlementRecord]


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory for detail records with sensible defaults."""
    def _make(**overrides: Any) -> SettlementRecord:
        fields: dict[str, Any] = {
            "month_key": "2024-01",
            "city": "城区",
            "vendor": "A",
            "service_category": "家庭宽带",
        }
        fields.update(overrides)
        return SettlementRecord(**fields)

    return _make


@pytest.fixture
def make_total(make_record: RecordFactory) -> RecordFactory:
    """Factory for vendor rollup (TOTAL) records."""
    def _make(**overrides: Any) -> SettlementRecord:
        overrides.setdefault("service_category", TOTAL_SENTINEL)
        return make_record(**overrides)

    return _make


@pytest.fixture
def csv_header() -> str:
    return HEADER
