"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads environment variables (including a check that
`SETTLEMENT_FETCH_TIMEOUT` is a positive number).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

from settlement_pipeline.exceptions import ConfigurationError

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

DEFAULT_CSV_SOURCE = "data/monthly_data_template.csv"


@dataclass(frozen=True)
class Settings:
    """Container for pipeline configuration read from the environment.

    Attributes:
        csv_source: Local path or HTTP(S) URL of the settlement CSV export.
        fetch_timeout: Timeout in seconds for HTTP acquisition.
        log_path: File the CLI writes its log to.
    """
    csv_source: str
    fetch_timeout: float
    log_path: Path


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        ConfigurationError: if `SETTLEMENT_FETCH_TIMEOUT` is not a positive number.
    """
    csv_source = os.getenv("SETTLEMENT_CSV_SOURCE", "").strip() or DEFAULT_CSV_SOURCE
    raw_timeout = os.getenv("SETTLEMENT_FETCH_TIMEOUT", "30").strip()
    log_path = Path(os.getenv("SETTLEMENT_LOG_PATH", "logs/pipeline.log"))

    try:
        fetch_timeout = float(raw_timeout)
    except ValueError:
        fetch_timeout = 0.0

    if not fetch_timeout > 0:
        raise ConfigurationError(
            "SETTLEMENT_FETCH_TIMEOUT must be a positive number of seconds.",
            details={"value": raw_timeout},
        )

    return Settings(
        csv_source=csv_source,
        fetch_timeout=fetch_timeout,
        log_path=log_path,
    )
