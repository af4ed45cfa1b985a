from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from metadata import end_run as local_end_run
from metadata import list_runs as local_list_runs
from metadata import start_run as local_start_run


class MetadataAdapter(ABC):
    """Where run records (start, end, status, row counts) are kept."""

    @abstractmethod
    def start_run(self, run_scope: str) -> str:
        """Register the start of a run and return its identifier."""

    @abstractmethod
    def end_run(
        self,
        run_id: str,
        status: str = "SUCCESS",
        *,
        rows_processed: Optional[int] = None,
        error_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Mark a run as finished and return the stored record."""

    @abstractmethod
    def list_runs(self, run_scope: Optional[str] = None) -> List[Dict[str, Any]]:
        """List runs, optionally filtered by scope."""


class LocalMetadataAdapter(MetadataAdapter):
    """Adapter over the JSON run store in `src/metadata`."""

    def start_run(self, run_scope: str) -> str:
        return local_start_run(run_scope)

    def end_run(
        self,
        run_id: str,
        status: str = "SUCCESS",
        *,
        rows_processed: Optional[int] = None,
        error_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        return local_end_run(
            run_id,
            status=status,
            rows_processed=rows_processed,
            error_message=error_message,
        )

    def list_runs(self, run_scope: Optional[str] = None) -> List[Dict[str, Any]]:
        return local_list_runs(run_scope)
