"""Fixed vocabulary shared by the parser, accumulator and filters.

The settlement export uses Chinese labels for service categories and a
sentinel category on each vendor's rollup row. The raw strings must match
the export exactly.
"""

from __future__ import annotations

import logging
from enum import Enum

log = logging.getLogger(__name__)

# Service-category value marking a vendor's rollup row
TOTAL_SENTINEL = "合计金额（元）"

# Profession selector meaning "no filter"
ALL_PROFESSIONS = "all"


class Category(str, Enum):
    """The four fixed service categories (professions).

    Values double as the profession selector tags.
    """
    RESIDENTIAL_BROADBAND = "jiake"
    ENTERPRISE_LINE = "jike"
    TRANSPORT_LINE = "xianlu"
    WIRELESS = "wuxian"

    @property
    def label(self) -> str:
        """Short display label used for breakdown charts."""
        return CATEGORY_LABELS[self]

    @property
    def raw_labels(self) -> tuple[str, ...]:
        """Raw service-category strings that fall into this category."""
        return RAW_CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[Category, str] = {
    Category.RESIDENTIAL_BROADBAND: "家客",
    Category.ENTERPRISE_LINE: "集客",
    Category.TRANSPORT_LINE: "线路",
    Category.WIRELESS: "无线",
}

# Wireless merges base stations (incl. towers) and distributed antenna systems
RAW_CATEGORY_LABELS: dict[Category, tuple[str, ...]] = {
    Category.RESIDENTIAL_BROADBAND: ("家庭宽带",),
    Category.ENTERPRISE_LINE: ("集团专线",),
    Category.TRANSPORT_LINE: ("传输线路",),
    Category.WIRELESS: ("基站（含铁塔）", "直放站室分"),
}

RAW_LABEL_TO_CATEGORY: dict[str, Category] = {
    raw: category
    for category, raws in RAW_CATEGORY_LABELS.items()
    for raw in raws
}

PROFESSION_NAMES: dict[str, str] = {
    ALL_PROFESSIONS: "全部专业",
    Category.RESIDENTIAL_BROADBAND.value: "家客专业",
    Category.ENTERPRISE_LINE.value: "集客专业",
    Category.TRANSPORT_LINE.value: "线路专业",
    Category.WIRELESS.value: "无线专业",
}


def is_total_label(service_category: str) -> bool:
    """Return True when the raw service category is the rollup sentinel."""
    return service_category == TOTAL_SENTINEL


def category_for_label(service_category: str) -> Category | None:
    """Map a raw service-category label to its bucket, or None if unknown."""
    return RAW_LABEL_TO_CATEGORY.get(service_category)


def raw_labels_for_selector(selector: Category | str) -> frozenset[str] | None:
    """Return the raw labels a profession selector matches.

    Args:
        selector: A `Category`, its tag value, or "all".

    Returns:
        ``None`` for "all" (no restriction), otherwise the set of raw labels.
        Unknown selectors match nothing and yield an empty set.
    """
    if isinstance(selector, Category):
        return frozenset(selector.raw_labels)
    if selector == ALL_PROFESSIONS:
        return None
    try:
        return frozenset(Category(selector).raw_labels)
    except ValueError:
        log.warning("Unknown profession selector: %r", selector)
        return frozenset()
