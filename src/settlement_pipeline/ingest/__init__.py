"""Ingestion helpers.

Acquire the raw settlement CSV text (local file or HTTP) and turn its rows
into typed `SettlementRecord` objects.
"""
