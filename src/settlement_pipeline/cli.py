"""Command-line interface over the settlement store.

Provides subcommands: `months`, `summary`, `yoy`, `trend`, `details` and
`vendors`. Each command is implemented as a `cmd_*` function that accepts
an argparse namespace and returns a process exit status.
"""
from __future__ import annotations

import argparse
import logging
import re
from pathlib import Path

from dotenv import load_dotenv
import pandas as pd

from settlement_pipeline.config import get_settings
from settlement_pipeline.exceptions import SettlementPipelineError
from settlement_pipeline.logging_config import configure_logging
from settlement_pipeline.store import SettlementStore
from settlement_pipeline.vocabulary import ALL_PROFESSIONS, PROFESSION_NAMES

log = logging.getLogger(__name__)

MONTH_ARG_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def month_arg(value: str) -> str:
    """argparse type accepting "YYYY-MM" with a month of 01-12."""
    if not MONTH_ARG_RE.match(value):
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}")
    return value


def _load_store(args: argparse.Namespace) -> SettlementStore:
    """Build the store from `--source` or the configured CSV source."""
    s = get_settings()
    source = args.source or s.csv_source
    return SettlementStore.from_source(source, timeout=s.fetch_timeout)


def _print_frame(df: pd.DataFrame) -> None:
    if df.empty:
        print("(no rows)")
    else:
        print(df.to_string(index=False))


def _month_missing(month_key: str) -> int:
    print(f"Month not found: {month_key}")
    return 1


# --------------------------------------------------
# Commands
# --------------------------------------------------
def cmd_months(args: argparse.Namespace) -> int:
    """List available months, oldest first, and mark the latest one."""
    store = _load_store(args)
    latest = store.latest_month()
    for month in store.available_months():
        print(f"{month}{' (latest)' if month == latest else ''}")
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    """Print the (optionally filtered) headline figures for one month."""
    store = _load_store(args)
    month = args.month or store.latest_month()
    aggregate = store.get_filtered(month, args.profession) if month else None
    if aggregate is None:
        return _month_missing(str(month))

    print(f"{month} | {PROFESSION_NAMES.get(args.profession, args.profession)}")
    _print_frame(
        pd.DataFrame(
            [
                {"metric": "total_cost", "value": aggregate.total_cost},
                {"metric": "total_count", "value": aggregate.total_count},
                {"metric": "avg_cost", "value": aggregate.avg_cost},
                {"metric": "one_time_cost", "value": aggregate.one_time_cost},
                {"metric": "subscription_cost", "value": aggregate.subscription_cost},
            ]
        )
    )
    for mode in ("one_time", "subscription"):
        print(f"\n[{mode} by category]")
        _print_frame(store.breakdown_frame(month, args.profession, mode, "categories"))
        print(f"\n[{mode} by vendor]")
        _print_frame(store.breakdown_frame(month, args.profession, mode, "vendors"))
    return 0


def cmd_yoy(args: argparse.Namespace) -> int:
    """Print year-over-year percentage changes."""
    store = _load_store(args)
    deltas = store.get_yoy(args.month, args.profession)
    print(f"{deltas.month_key} vs {deltas.prior_month_key or 'n/a'}")
    _print_frame(
        pd.DataFrame(
            [
                {"metric": "total_cost", "change_pct": deltas.total_change},
                {"metric": "total_count", "change_pct": deltas.count_change},
                {"metric": "avg_cost", "change_pct": deltas.avg_change},
                {"metric": "one_time_cost", "change_pct": deltas.one_time_change},
                {"metric": "subscription_cost", "change_pct": deltas.subscription_change},
            ]
        )
    )
    if deltas.score_change:
        print("\n[score change]")
        _print_frame(
            pd.DataFrame(
                {"vendor": list(deltas.score_change), "change_pct": list(deltas.score_change.values())}
            )
        )
    return 0


def cmd_trend(args: argparse.Namespace) -> int:
    """Print the monthly total-cost series for a month range."""
    store = _load_store(args)
    _print_frame(store.trend(args.start, args.end, args.profession))
    return 0


def cmd_details(args: argparse.Namespace) -> int:
    """Print or export the raw rows of a month."""
    store = _load_store(args)
    if args.month not in store.aggregates:
        return _month_missing(args.month)

    df = store.details_frame(args.month)
    if args.out:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.out, index=False, encoding="utf-8")
        log.info("Wrote %d rows to %s", len(df), args.out)
    else:
        _print_frame(df)
    return 0


def cmd_vendors(args: argparse.Namespace) -> int:
    """Print vendor rollups and first-line scores for a month."""
    store = _load_store(args)
    if args.month not in store.aggregates:
        return _month_missing(args.month)

    scores = store.get_vendor_scores(args.month)
    summary = store.get_vendor_summary(args.month)
    rows = []
    for vendor in scores.vendor_names:
        rollup = summary.get(vendor)
        rows.append(
            {
                "vendor": vendor,
                "first_line_score": scores.first_line_scores.get(vendor, 0.0),
                "total_cost": rollup.total_cost if rollup else 0.0,
                "rollup_score": rollup.score if rollup else 0.0,
                "payable": rollup.payable if rollup else 0.0,
                "actual_pay": rollup.actual_pay if rollup else 0.0,
            }
        )
    _print_frame(pd.DataFrame(rows))
    return 0


COMMANDS = {
    "months": cmd_months,
    "summary": cmd_summary,
    "yoy": cmd_yoy,
    "trend": cmd_trend,
    "details": cmd_details,
    "vendors": cmd_vendors,
}


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="settlement_pipeline")
    p.add_argument("--source", default=None, help="CSV path or URL (overrides SETTLEMENT_CSV_SOURCE)")
    sub = p.add_subparsers(dest="cmd", required=True)

    professions = list(PROFESSION_NAMES)

    sub.add_parser("months")

    p_summary = sub.add_parser("summary")
    p_summary.add_argument("--month", type=month_arg, default=None)
    p_summary.add_argument("--profession", choices=professions, default=ALL_PROFESSIONS)

    p_yoy = sub.add_parser("yoy")
    p_yoy.add_argument("--month", type=month_arg, required=True)
    p_yoy.add_argument("--profession", choices=professions, default=ALL_PROFESSIONS)

    p_trend = sub.add_parser("trend")
    p_trend.add_argument("--start", type=month_arg, required=True)
    p_trend.add_argument("--end", type=month_arg, required=True)
    p_trend.add_argument("--profession", choices=professions, default=ALL_PROFESSIONS)

    p_details = sub.add_parser("details")
    p_details.add_argument("--month", type=month_arg, required=True)
    p_details.add_argument("--out", type=Path, default=None)

    p_vendors = sub.add_parser("vendors")
    p_vendors.add_argument("--month", type=month_arg, required=True)

    return p


def main() -> None:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args()

    try:
        configure_logging(get_settings().log_path)
        status = COMMANDS[args.cmd](args)
    except SettlementPipelineError as e:
        log.error("%s %s", e.message, e.details or "")
        status = 1

    raise SystemExit(status)


if __name__ == "__main__":
    main()
