import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4


# Environment variable overriding the JSON file location (tests, servers)
METADATA_LOCAL_FILE_ENV = "METADATA_LOCAL_FILE"

DEFAULT_METADATA_FILE = Path("local_metadata.json")

RUN_STATUS_RUNNING = "RUNNING"
RUN_STATUS_SUCCESS = "SUCCESS"
RUN_STATUS_FAILED = "FAILED"


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_metadata_file() -> Path:
    env_value = os.getenv(METADATA_LOCAL_FILE_ENV)
    if env_value:
        return Path(env_value)
    return DEFAULT_METADATA_FILE


def _load_runs() -> List[Dict[str, Any]]:
    """
    Load run records from the JSON store.

    File layout:
    {
      "runs": [
        {
          "run_id": str,
          "run_scope": str,
          "start_ts": str,
          "end_ts": Optional[str],
          "status": "RUNNING" | "SUCCESS" | "FAILED",
          "rows_processed": Optional[int],
          "error_message": Optional[str]
        },
        ...
      ]
    }
    """
    path = _get_metadata_file()
    if not path.exists():
        return []

    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Metadata file {path} is corrupted") from exc

    runs = data.get("runs") if isinstance(data, dict) else None
    if not isinstance(runs, list):
        raise RuntimeError(f"Metadata file {path} has invalid structure (expected a 'runs' list)")
    return runs


def _save_runs(runs: List[Dict[str, Any]]) -> None:
    """Write the store through a temp file so readers never see a partial file."""
    path = _get_metadata_file()
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump({"runs": runs}, f, indent=2, ensure_ascii=False)

    tmp_path.replace(path)


def start_run(run_scope: str) -> str:
    """
    Register the start of a run.

    Parameters
    ----------
    run_scope:
        What the run does, e.g. "sanitation_income_analysis" or
        "gapminder_download".

    Returns
    -------
    run_id:
        Identifier to pass to end_run().
    """
    runs = _load_runs()
    run_id = str(uuid4())
    runs.append(
        {
            "run_id": run_id,
            "run_scope": run_scope,
            "start_ts": _now_utc_iso(),
            "end_ts": None,
            "status": RUN_STATUS_RUNNING,
            "rows_processed": None,
            "error_message": None,
        }
    )
    _save_runs(runs)
    return run_id


def end_run(
    run_id: str,
    status: str = RUN_STATUS_SUCCESS,
    *,
    rows_processed: Optional[int] = None,
    error_message: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Close a run started with start_run() and return the updated record.

    Raises KeyError when `run_id` is unknown.
    """
    runs = _load_runs()
    target = next((run for run in reversed(runs) if run.get("run_id") == run_id), None)
    if target is None:
        raise KeyError(f"No run found with id={run_id!r}")

    target["end_ts"] = _now_utc_iso()
    target["status"] = status
    if rows_processed is not None:
        target["rows_processed"] = int(rows_processed)
    if error_message is not None:
        target["error_message"] = error_message

    _save_runs(runs)
    return target


def list_runs(run_scope: Optional[str] = None) -> List[Dict[str, Any]]:
    runs = _load_runs()
    if run_scope is None:
        return list(runs)
    return [r for r in runs if r.get("run_scope") == run_scope]


def get_last_run(run_scope: Optional[str] = None) -> Optional[Dict[str, Any]]:
    runs = list_runs(run_scope)
    return runs[-1] if runs else None


def reset_local_store() -> int:
    """Drop every run record; returns how many were removed."""
    cleared = len(_load_runs())
    _save_runs([])
    return cleared
