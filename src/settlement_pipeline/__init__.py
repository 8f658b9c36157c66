"""settlement_pipeline package.

Contains modules for loading monthly telecom settlement CSV exports, parsing
rows into typed records, folding them into per-month aggregates, deriving
the summary figures shown on the dashboard, filtering by profession and
computing year-over-year deltas.

Architecture:
- Raw text → records → monthly aggregates held by a `SettlementStore`
- Pydantic models describe records and aggregates
- pandas frames are produced for the CLI and the Streamlit dashboard
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
