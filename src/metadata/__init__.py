"""
Metadata module
---------------

Local JSON store for run records: one entry per pipeline or download
run, with its scope, timestamps, final status and row count.

    from metadata import start_run, end_run, SANITATION_INCOME_ANALYSIS_SCOPE

    run_id = start_run(SANITATION_INCOME_ANALYSIS_SCOPE)
    # ... run the analysis ...
    end_run(run_id, status="SUCCESS", rows_processed=3150)
"""

from .store import (
    DEFAULT_METADATA_FILE,
    METADATA_LOCAL_FILE_ENV,
    RUN_STATUS_FAILED,
    RUN_STATUS_RUNNING,
    RUN_STATUS_SUCCESS,
    end_run,
    get_last_run,
    list_runs,
    reset_local_store,
    start_run,
)

SANITATION_INCOME_ANALYSIS_SCOPE = "sanitation_income_analysis"
GAPMINDER_DOWNLOAD_SCOPE = "gapminder_download"

__all__ = [
    "DEFAULT_METADATA_FILE",
    "METADATA_LOCAL_FILE_ENV",
    "RUN_STATUS_RUNNING",
    "RUN_STATUS_SUCCESS",
    "RUN_STATUS_FAILED",
    "SANITATION_INCOME_ANALYSIS_SCOPE",
    "GAPMINDER_DOWNLOAD_SCOPE",
    "start_run",
    "end_run",
    "list_runs",
    "get_last_run",
    "reset_local_store",
]
