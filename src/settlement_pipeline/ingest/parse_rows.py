"""Parsing helpers for the settlement CSV export.

`parse_record` converts one split data row into a `SettlementRecord` (or
``None`` when the row must be skipped) and `parse_settlement_csv` walks a
whole export, skipping comments and blank lines and using the first
remaining line as the header.
"""

from __future__ import annotations

import csv
import logging
import re
from typing import Iterator, Sequence

from settlement_pipeline.models import SettlementRecord
from settlement_pipeline.numeric import parse_or_default, parse_percent_or_default

log = logging.getLogger(__name__)

COMMENT_MARKER = "#"

YEAR_RE = re.compile(r"(\d{4})年")
MONTH_RE = re.compile(r"(\d{1,2})月")

# Numeric columns by position (0-3 are month, city, vendor, service category)
NUMERIC_COLUMNS: tuple[tuple[int, str], ...] = (
    (4, "subscription_pre_discount"),
    (5, "one_time_pre_discount"),
    (6, "discount_rate"),
    (7, "subscription_post_discount"),
    (8, "one_time_post_discount"),
    (9, "total_post_discount"),
    (10, "monthly_score"),
    (12, "monthly_payable"),
    (13, "other_deductions"),
    (14, "monthly_actual_pay"),
    (15, "monthly_deposit"),
    (16, "monthly_total_cost"),
    (17, "comprehensive_score"),
)
COEFFICIENT_COLUMN = 11


def normalize_month_key(label: str) -> str:
    """Normalize "2024年1月" to "2024-01".

    Labels without both markers, or where either number is missing, are
    returned as given (so "2024-01" passes through unchanged).
    """
    label = label.strip()
    if "年" in label and "月" in label:
        year = YEAR_RE.search(label)
        month = MONTH_RE.search(label)
        if year and month:
            return f"{year.group(1)}-{month.group(1).zfill(2)}"
    return label


def _cell(fields: Sequence[str], index: int) -> str:
    return fields[index].strip() if index < len(fields) else ""


def parse_record(header: Sequence[str], fields: Sequence[str]) -> SettlementRecord | None:
    """Parse one data row.

    Args:
        header: Header fields; only its length is used.
        fields: Raw field strings of the data row.

    Returns:
        A `SettlementRecord`, or ``None`` when the row is shorter than the
        header or its month label is empty.
    """
    if len(fields) < len(header):
        return None
    month_label = _cell(fields, 0)
    if not month_label:
        return None

    values: dict[str, float] = {
        name: parse_or_default(fields[idx] if idx < len(fields) else None)
        for idx, name in NUMERIC_COLUMNS
    }
    coefficient = fields[COEFFICIENT_COLUMN] if COEFFICIENT_COLUMN < len(fields) else None
    values["monthly_coefficient"] = parse_percent_or_default(coefficient)

    return SettlementRecord(
        month_key=normalize_month_key(month_label),
        city=_cell(fields, 1),
        vendor=_cell(fields, 2),
        service_category=_cell(fields, 3),
        **values,
    )


def _data_lines(text: str) -> Iterator[str]:
    """Yield lines that are neither blank nor comments."""
    for line in text.splitlines():
        if line.startswith(COMMENT_MARKER) or line.strip() == "":
            continue
        yield line


def _split(line: str) -> list[str] | None:
    try:
        return next(csv.reader([line]))
    except csv.Error as e:
        log.debug("Skipping unreadable row (%s): %r", e, line[:80])
        return None


def iter_settlement_records(text: str) -> Iterator[SettlementRecord]:
    """Yield records from a CSV export, skipping rows that cannot be used."""
    header: list[str] | None = None
    parsed = 0
    skipped = 0

    for line in _data_lines(text.lstrip("\ufeff")):
        fields = _split(line)
        if fields is None:
            skipped += 1
            continue
        if header is None:
            header = [h.strip() for h in fields]
            continue

        record = parse_record(header, fields)
        if record is None:
            skipped += 1
            log.debug("Skipping row with %d fields: %r", len(fields), line[:80])
            continue
        parsed += 1
        yield record

    log.info("Parsed %d settlement rows (%d skipped)", parsed, skipped)


def parse_settlement_csv(text: str) -> list[SettlementRecord]:
    """Parse a whole CSV export into a list of records."""
    return list(iter_settlement_records(text))
