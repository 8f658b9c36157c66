from __future__ import annotations

from settlement_pipeline.ingest.parse_rows import (
    normalize_month_key,
    parse_record,
    parse_settlement_csv,
)
from settlement_pipeline.vocabulary import Category

ROW = "2024年1月,城区,铁通,家庭宽带,200000,50000,0.9,180000,45000,225000,95,98%,225000,0,213750,11250,225000,92"


def test_normalize_month_key_variants() -> None:
    assert normalize_month_key("2024年1月") == "2024-01"
    assert normalize_month_key(" 2023年12月 ") == "2023-12"
    assert normalize_month_key("2024-03") == "2024-03"
    assert normalize_month_key("一月") == "一月"


def test_parse_record_maps_columns(csv_header: str) -> None:
    rec = parse_record(csv_header.split(","), ROW.split(","))
    assert rec is not None
    assert rec.month_key == "2024-01"
    assert rec.vendor == "铁通"
    assert rec.category is Category.RESIDENTIAL_BROADBAND
    assert rec.subscription_pre_discount == 200000
    assert rec.one_time_pre_discount == 50000
    assert rec.subscription_post_discount == 180000
    assert rec.one_time_post_discount == 45000
    assert rec.monthly_coefficient == 98.0
    assert rec.monthly_total_cost == 225000
    assert rec.comprehensive_score == 92


def test_bad_numeric_cell_defaults_to_zero(csv_header: str) -> None:
    fields = ROW.split(",")
    fields[16] = "N/A"
    fields[11] = "--"
    rec = parse_record(csv_header.split(","), fields)
    assert rec is not None
    assert rec.monthly_total_cost == 0.0
    assert rec.monthly_coefficient == 0.0


def test_short_row_and_empty_month_are_skipped(csv_header: str) -> None:
    header = csv_header.split(",")
    assert parse_record(header, ROW.split(",")[:10]) is None
    fields = ROW.split(",")
    fields[0] = "  "
    assert parse_record(header, fields) is None


def test_parse_csv_skips_comments_and_blank_lines(csv_header: str) -> None:
    text = "\n".join(
        [
            "# exported 2024-02-01",
            "",
            csv_header,
            ROW,
            "# trailing note",
            "   ",
            "2024年1月,城区,铁通",
            ROW.replace("家庭宽带", "集团专线"),
        ]
    )
    records = parse_settlement_csv(text)
    assert [r.service_category for r in records] == ["家庭宽带", "集团专线"]


def test_parse_csv_handles_bom_and_crlf(csv_header: str) -> None:
    text = "\ufeff" + csv_header + "\r\n" + ROW + "\r\n"
    records = parse_settlement_csv(text)
    assert len(records) == 1
    assert records[0].comprehensive_score == 92


def test_row_with_nul_byte_is_skipped(csv_header: str) -> None:
    text = "\n".join([csv_header, ROW, "2024年1月,城区\x00,铁通", ROW.replace("铁通", "长实")])
    records = parse_settlement_csv(text)
    assert [r.vendor for r in records] == ["铁通", "长实"]
