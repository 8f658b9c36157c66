from __future__ import annotations

from pathlib import Path

import pytest

from settlement_pipeline.config import DEFAULT_CSV_SOURCE, get_settings
from settlement_pipeline.exceptions import ConfigurationError


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SETTLEMENT_CSV_SOURCE", "SETTLEMENT_FETCH_TIMEOUT", "SETTLEMENT_LOG_PATH"):
        monkeypatch.delenv(name, raising=False)
    s = get_settings()
    assert s.csv_source == DEFAULT_CSV_SOURCE
    assert s.fetch_timeout == 30.0
    assert s.log_path == Path("logs/pipeline.log")


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SETTLEMENT_CSV_SOURCE", "https://example.com/x.csv")
    monkeypatch.setenv("SETTLEMENT_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("SETTLEMENT_LOG_PATH", "out/run.log")
    s = get_settings()
    assert s.csv_source == "https://example.com/x.csv"
    assert s.fetch_timeout == 2.5
    assert s.log_path == Path("out/run.log")


@pytest.mark.parametrize("value", ["0", "-3", "soon", "nan"])
def test_rejects_bad_timeout(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("SETTLEMENT_FETCH_TIMEOUT", value)
    with pytest.raises(ConfigurationError):
        get_settings()
