"""Errors raised by the settlement pipeline.

Bad row content never raises: the parser skips or defaults it. Only
acquisition and configuration failures surface here.
"""
from __future__ import annotations

from typing import Any


class SettlementPipelineError(Exception):
    """Base class; carries a message plus optional context for log lines."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AcquisitionError(SettlementPipelineError):
    """The CSV export could not be read, or it was empty."""


class ConfigurationError(SettlementPipelineError):
    """An environment setting has an unusable value."""
