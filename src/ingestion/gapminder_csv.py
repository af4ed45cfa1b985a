"""
RAW download of the Gapminder wide CSVs.

Fetches each configured URL with retries and stores the body unchanged
under its RAW key, so the rest of the pipeline always reads from storage.
"""

from __future__ import annotations

from typing import Dict, Mapping

from adapters import MetadataAdapter, StorageAdapter
from common.retry import http_get_with_retries
from metadata import GAPMINDER_DOWNLOAD_SCOPE, RUN_STATUS_FAILED, RUN_STATUS_SUCCESS

RAW_BASE_PREFIX = "raw/gapminder"


def download_csv(url: str, *, timeout: int = 60) -> bytes:
    """GET a CSV and return its body; empty bodies are an error."""
    response = http_get_with_retries(url, timeout=timeout)
    response.raise_for_status()
    content = response.content
    if not content.strip():
        raise RuntimeError(f"Empty CSV body returned by {url}")
    return content


def ingest_gapminder_csvs(
    sources: Mapping[str, str],
    storage: StorageAdapter,
    metadata: MetadataAdapter,
    *,
    run_scope: str = GAPMINDER_DOWNLOAD_SCOPE,
) -> Dict[str, str]:
    """
    Download every `{raw_key: url}` pair into storage.

    Returns a mapping raw_key -> stored location. The run is recorded in
    the metadata store with the number of files written.
    """
    run_id = metadata.start_run(run_scope)
    locations: Dict[str, str] = {}
    try:
        for key, url in sources.items():
            print(f"[ingestion] Downloading {url} -> {key}")
            locations[key] = storage.write_raw(key, download_csv(url))
        metadata.end_run(run_id, status=RUN_STATUS_SUCCESS, rows_processed=len(locations))
        return locations
    except Exception as exc:  # noqa: BLE001
        metadata.end_run(run_id, status=RUN_STATUS_FAILED, error_message=str(exc))
        raise


__all__ = ["RAW_BASE_PREFIX", "download_csv", "ingest_gapminder_csvs"]
