from __future__ import annotations

import pandas as pd
import streamlit as st
import altair as alt

from settlement_pipeline.config import get_settings
from settlement_pipeline.exceptions import SettlementPipelineError
from settlement_pipeline.store import SettlementStore
from settlement_pipeline.vocabulary import PROFESSION_NAMES

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="代维结算费用分析", layout="wide")
st.title("📊 代维结算费用分析看板")


# =====================================================
# Data loading
# =====================================================
@st.cache_data(ttl=300)
def load_store(source: str, timeout: float) -> SettlementStore:
    """Fetch and aggregate the CSV export (cached for five minutes)."""
    return SettlementStore.from_source(source, timeout=timeout)


try:
    settings = get_settings()
    store = load_store(settings.csv_source, settings.fetch_timeout)
except SettlementPipelineError as exc:  # pragma: no cover - runtime failure handling
    st.error(f"Unable to load settlement data: {exc.message}")
    st.stop()

months = store.available_months()
if not months:
    st.warning("The settlement export contains no data rows.")
    st.stop()


# =====================================================
# Helpers
# =====================================================
def format_wan(amount: float) -> str:
    """Format a 万-scaled amount for display."""
    return f"¥{amount:,.2f}万"


def format_change(change: float) -> str:
    return f"{'+' if change > 0 else ''}{change:.2f}%"


def kpi(label: str, value: str, change: float) -> None:
    """Display a KPI metric with its year-over-year delta."""
    st.metric(label, value, format_change(change))


def bar_chart(df: pd.DataFrame, title: str) -> alt.Chart:
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("label:N", sort=None, title=None),
            y=alt.Y("amount:Q", title="万元"),
            tooltip=["label:N", "amount:Q"],
        )
        .properties(height=280, title=title)
    )


# =====================================================
# Controls
# =====================================================
c1, c2 = st.columns(2)
with c1:
    month = st.selectbox("月份", months, index=len(months) - 1)
with c2:
    profession = st.selectbox(
        "专业",
        list(PROFESSION_NAMES),
        format_func=lambda p: PROFESSION_NAMES[p],
        index=0,
    )

aggregate = store.get_filtered(month, profession)
deltas = store.get_yoy(month)

# =====================================================
# SECTION 0 — HEADLINE FIGURES
# =====================================================
st.header("📌 月度概览")

k1, k2, k3, k4 = st.columns(4)
with k1:
    kpi("月度结算费用", format_wan(aggregate.total_cost), deltas.total_change)
with k2:
    kpi("估算次数（千次）", f"{aggregate.total_count:,.2f}", deltas.count_change)
with k3:
    kpi("按次费用", format_wan(aggregate.one_time_cost), deltas.one_time_change)
with k4:
    kpi("包年费用", format_wan(aggregate.subscription_cost), deltas.subscription_change)

st.caption("同比变化基于全部专业数据；无去年同期数据时显示 0%。")

st.divider()

# =====================================================
# SECTION 1 — TREND
# =====================================================
st.header(f"📈 月度结算费用趋势 - {PROFESSION_NAMES[profession]}")

t1, t2 = st.columns(2)
with t1:
    start = st.selectbox("起始月份", months, index=0)
with t2:
    end = st.selectbox("结束月份", months, index=len(months) - 1)

df_trend = store.trend(start, end, profession)
if df_trend.empty:
    st.info("所选区间没有月份。")
else:
    chart = (
        alt.Chart(df_trend)
        .mark_line(point=True)
        .encode(
            x=alt.X("month_key:N", title=None),
            y=alt.Y("total_cost:Q", title="万元"),
            tooltip=["month_key:N", "total_cost:Q"],
        )
        .properties(height=320)
    )
    st.altair_chart(chart, width="stretch")

st.divider()

# =====================================================
# SECTION 2 — BREAKDOWNS
# =====================================================
st.header("🧾 费用构成")

tab_one_time, tab_subscription = st.tabs(["按次", "包年"])
for tab, mode in ((tab_one_time, "one_time"), (tab_subscription, "subscription")):
    with tab:
        b1, b2 = st.columns(2)
        with b1:
            df_vendor = store.breakdown_frame(month, profession, mode, "vendors")
            st.altair_chart(bar_chart(df_vendor, "代维公司"), width="stretch")
        with b2:
            df_category = store.breakdown_frame(month, profession, mode, "categories")
            st.altair_chart(bar_chart(df_category, "服务专业"), width="stretch")

st.divider()

# =====================================================
# SECTION 3 — VENDOR SCORES
# =====================================================
st.header("🏢 代维公司评分")

vendor_scores = store.get_vendor_scores(month)
df_scores = pd.DataFrame(
    [
        {
            "代维公司": vendor,
            "综合得分": vendor_scores.first_line_scores.get(vendor, 0.0),
            "同比": format_change(deltas.score_change.get(vendor, 0.0)),
        }
        for vendor in vendor_scores.vendor_names
    ]
)
if df_scores.empty:
    st.info("No vendor rows for this month.")
else:
    st.dataframe(df_scores, width="stretch", hide_index=True)

with st.expander("明细数据"):
    st.dataframe(store.details_frame(month), width="stretch", hide_index=True)

# =====================================================
# Footer
# =====================================================
st.caption("Settlement CSV • pandas • Streamlit • Altair")
