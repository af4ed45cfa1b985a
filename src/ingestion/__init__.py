"""
Ingestion layer
---------------

Optional download of the RAW Gapminder CSVs into storage.
"""

from .gapminder_csv import (  # noqa: F401
    RAW_BASE_PREFIX,
    download_csv,
    ingest_gapminder_csvs,
)

__all__ = ["RAW_BASE_PREFIX", "download_csv", "ingest_gapminder_csvs"]
