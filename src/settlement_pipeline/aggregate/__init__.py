"""Monthly aggregation helpers.

This package folds parsed settlement records into per-month aggregates,
derives the 万-scaled summary fields, re-derives aggregates for a single
profession and compares a month against the same month one year earlier.
"""
