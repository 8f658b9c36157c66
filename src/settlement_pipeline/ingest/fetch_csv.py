"""Acquire the raw settlement CSV text.

`fetch_settlement_csv` reads a local file or downloads an HTTP(S) URL.
This is the only step of the pipeline that raises for bad input; parsing
and aggregation recover from malformed content locally.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import requests

from settlement_pipeline.exceptions import AcquisitionError

log = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


def is_remote(source: str) -> bool:
    """Return True when `source` is an HTTP(S) URL."""
    return source.lower().startswith(("http://", "https://"))


def _cache_buster() -> str:
    return str(int(time.time() * 1000))


def download_csv_text(url: str, timeout: float) -> str:
    """Download `url`, bypassing intermediate caches.

    Args:
        url: HTTP(S) URL of the CSV export.
        timeout: Request timeout in seconds.

    Returns:
        Response body decoded as text.

    Raises:
        AcquisitionError: on transport errors or a non-2xx status.
    """
    log.info("Downloading %s", url)
    try:
        r = requests.get(
            url,
            params={"v": _cache_buster()},
            headers=NO_CACHE_HEADERS,
            timeout=timeout,
        )
        r.raise_for_status()
    except requests.RequestException as e:
        raise AcquisitionError(
            f"Failed to download settlement CSV: {e}",
            details={"source": url},
        ) from e
    r.encoding = "utf-8"
    return r.text


def read_csv_text(path: Path) -> str:
    """Read a local CSV export as UTF-8 (a leading BOM is dropped)."""
    log.info("Reading %s", path)
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise AcquisitionError(
            f"Failed to read settlement CSV: {e}",
            details={"source": str(path)},
        ) from e


def fetch_settlement_csv(source: str, timeout: float = 30.0) -> str:
    """Return the raw CSV text from a URL or local path.

    Raises:
        AcquisitionError: when the source cannot be read or is empty.
    """
    text = download_csv_text(source, timeout) if is_remote(source) else read_csv_text(Path(source))

    if not text or text.strip() == "":
        raise AcquisitionError("Settlement CSV is empty", details={"source": source})

    log.info("Acquired %d characters from %s", len(text), source)
    return text
