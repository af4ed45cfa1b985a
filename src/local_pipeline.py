"""
Orchestration entrypoint for the sanitation x income pipeline.

Runs, in order:

1. (optional) RAW download of the two Gapminder CSVs
2. Load the wide sanitation and income tables
3. Reshape sanitation to long form
4. Reshape income to long form, decoding "k" tokens
5. Curated join on (country, year)
6. Persist the curated table as Parquet partitions by year
7. OLS fits (income and log2 income) with posterior-predictive R^2 checks
8. Analytical CSV outputs

Intended usage (local):

    PYTHONPATH=src python -m local_pipeline --seed 42

Inputs and outputs go through local storage rooted at
PIPELINE_STORAGE_ROOT, or through S3 when PIPELINE_S3_BUCKET is set.
A failing stage is reported by name, the run is recorded as FAILED and
the process exits with status 1.
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Dict, List, Optional, TypeVar

from adapters import (
    LocalMetadataAdapter,
    LocalStorageAdapter,
    MetadataAdapter,
    S3StorageAdapter,
    StorageAdapter,
)
from analysis import (
    ANALYSIS_OUTPUT_PREFIX,
    run_sanitation_income_analysis,
    save_analysis_outputs,
)
from common.errors import PipelineStageError
from env_loader import PipelineSettings, load_dotenv_if_present
from ingestion import ingest_gapminder_csvs
from metadata import RUN_STATUS_FAILED, RUN_STATUS_SUCCESS, SANITATION_INCOME_ANALYSIS_SCOPE
from transformations import (
    build_curated_sanitation_income_dataframe,
    load_wide_table,
    reshape_wide_to_long,
    save_curated_sanitation_income_parquet_partitions,
)

T = TypeVar("T")

STEPS = 8


def build_storage(settings: PipelineSettings) -> StorageAdapter:
    if settings.s3_bucket:
        return S3StorageAdapter(settings.s3_bucket, base_prefix=settings.s3_base_prefix)
    return LocalStorageAdapter(settings.storage_root)


def _run_stage(step: int, stage: str, func: Callable[[], T]) -> T:
    print(f"[{step}/{STEPS}] {stage}...")
    try:
        return func()
    except Exception as exc:
        print(f"[pipeline] {stage} FAILED: {type(exc).__name__}: {exc}")
        raise PipelineStageError(stage, exc) from exc


def run_local_pipeline(
    settings: Optional[PipelineSettings] = None,
    *,
    storage: Optional[StorageAdapter] = None,
    metadata: Optional[MetadataAdapter] = None,
    download: bool = False,
    output_prefix: str = ANALYSIS_OUTPUT_PREFIX,
) -> Dict[str, List[str]]:
    """
    Run the pipeline end-to-end.

    Returns
    -------
    artefacts:
        Step name -> list of written locations.
    """
    settings = settings or PipelineSettings.from_env()
    storage = storage or build_storage(settings)
    metadata = metadata or LocalMetadataAdapter()

    artefacts: Dict[str, List[str]] = {}
    run_id = metadata.start_run(SANITATION_INCOME_ANALYSIS_SCOPE)
    try:
        if download:
            sources = {
                key: url
                for key, url in (
                    (settings.sanitation_csv_key, settings.sanitation_csv_url),
                    (settings.income_csv_key, settings.income_csv_url),
                )
                if url
            }
            if not sources:
                print("[pipeline] --download given but no SANITATION_CSV_URL / INCOME_CSV_URL set")
            locations = _run_stage(
                1, "Download RAW CSVs", lambda: ingest_gapminder_csvs(sources, storage, metadata)
            )
            artefacts["raw"] = list(locations.values())
        else:
            print(f"[1/{STEPS}] Download RAW CSVs skipped.")

        sanitation_wide, income_wide = _run_stage(
            2,
            "Load wide tables",
            lambda: (
                load_wide_table(storage, settings.sanitation_csv_key),
                load_wide_table(storage, settings.income_csv_key, as_text=True),
            ),
        )
        print(
            f"      sanitation: {len(sanitation_wide)} countries, "
            f"income: {len(income_wide)} countries"
        )

        sanitation_long = _run_stage(
            3,
            "Reshape sanitation",
            lambda: reshape_wide_to_long(
                sanitation_wide,
                value_name="sanitation",
                year_start=settings.year_start,
                year_end=settings.year_end,
            ),
        )
        income_long = _run_stage(
            4,
            "Reshape income",
            lambda: reshape_wide_to_long(
                income_wide,
                value_name="income",
                parse_income=True,
                year_start=settings.year_start,
                year_end=settings.year_end,
            ),
        )

        curated = _run_stage(
            5,
            "Join sanitation and income",
            lambda: build_curated_sanitation_income_dataframe(sanitation_long, income_long),
        )
        artefacts["curated"] = _run_stage(
            6,
            "Save curated Parquet",
            lambda: save_curated_sanitation_income_parquet_partitions(curated, storage),
        )
        print(f"      {len(curated)} joined rows in {len(artefacts['curated'])} partitions.")

        analysis = _run_stage(
            7,
            "Fit models and simulate",
            lambda: run_sanitation_income_analysis(
                curated,
                n_simulations=settings.n_simulations,
                seed=settings.seed,
            ),
        )

        artefacts["analysis"] = _run_stage(
            8,
            "Write analytical outputs",
            lambda: save_analysis_outputs(analysis, storage, output_prefix=output_prefix),
        )
        for location in artefacts["analysis"]:
            print(f"      {location}")

        metadata.end_run(run_id, status=RUN_STATUS_SUCCESS, rows_processed=len(curated))
    except PipelineStageError as exc:
        metadata.end_run(run_id, status=RUN_STATUS_FAILED, error_message=str(exc))
        raise

    print("\nPipeline completed successfully.")
    return artefacts


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    load_dotenv_if_present()

    parser = argparse.ArgumentParser(
        description="Run the sanitation x income pipeline end-to-end.",
    )
    parser.add_argument("--sanitation-key", default=None, help="Storage key of the sanitation wide CSV.")
    parser.add_argument("--income-key", default=None, help="Storage key of the income wide CSV.")
    parser.add_argument("--year-start", type=int, default=None, help="First year of the analysis window.")
    parser.add_argument("--year-end", type=int, default=None, help="Last year of the analysis window.")
    parser.add_argument("--n-simulations", type=int, default=None, help="Posterior-predictive rounds per model.")
    parser.add_argument("--seed", type=int, default=None, help="Master random seed for the simulations.")
    parser.add_argument(
        "--output-prefix",
        default=ANALYSIS_OUTPUT_PREFIX,
        help="Storage prefix for the analytical CSVs (default: analysis).",
    )
    parser.add_argument(
        "--download",
        action="store_true",
        help="Download the RAW CSVs from SANITATION_CSV_URL / INCOME_CSV_URL first.",
    )
    args = parser.parse_args(argv)

    try:
        settings = PipelineSettings.from_env()
        overrides = {
            "sanitation_csv_key": args.sanitation_key,
            "income_csv_key": args.income_key,
            "year_start": args.year_start,
            "year_end": args.year_end,
            "n_simulations": args.n_simulations,
            "seed": args.seed,
        }
        settings = dataclasses.replace(
            settings, **{k: v for k, v in overrides.items() if v is not None}
        )
        run_local_pipeline(settings, download=args.download, output_prefix=args.output_prefix)
    except PipelineStageError as exc:
        print(f"\nPipeline halted at stage {exc.stage!r}: {exc.cause}")
        return 1
    except Exception as exc:  # noqa: BLE001
        print(f"\nPipeline could not start: {type(exc).__name__}: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())


__all__ = ["build_storage", "run_local_pipeline", "main"]
