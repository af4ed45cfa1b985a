"""
Analytical outputs for the curated sanitation x income dataset.

Two model passes run on the same curated table:

- identity: sanitation ~ income
- log2:     sanitation ~ log2(income)

each followed by a posterior-predictive R^2 check. The results are
written as three CSV artefacts for the reporting layer:

- model_summary.csv        one row per transform (coefficients, sigma, R^2)
- simulated_r_squared.csv  one row per (transform, simulation round)
- simulation_summary.csv   one row per transform (observed vs simulated R^2)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pandas as pd

from adapters import StorageAdapter
from modeling import (
    DEFAULT_N_SIMULATIONS,
    FittedModel,
    IncomeTransform,
    SimulationBatch,
    fit_sanitation_on_income,
    simulate_r_squared,
)
from modeling.posterior_predictive import SeedLike, as_seed_sequence

ANALYSIS_OUTPUT_PREFIX = "analysis"
MODEL_SUMMARY_CSV_NAME = "model_summary.csv"
SIMULATED_R_SQUARED_CSV_NAME = "simulated_r_squared.csv"
SIMULATION_SUMMARY_CSV_NAME = "simulation_summary.csv"


@dataclass(frozen=True)
class ModelPass:
    model: FittedModel
    simulation: SimulationBatch


@dataclass(frozen=True)
class SanitationIncomeAnalysis:
    raw_income: ModelPass
    log2_income: ModelPass

    def passes(self) -> Dict[IncomeTransform, ModelPass]:
        return {
            IncomeTransform.IDENTITY: self.raw_income,
            IncomeTransform.LOG2: self.log2_income,
        }


def run_sanitation_income_analysis(
    curated_df: pd.DataFrame,
    *,
    n_simulations: int = DEFAULT_N_SIMULATIONS,
    seed: SeedLike = None,
) -> SanitationIncomeAnalysis:
    """Fit and check the raw-income and log2-income models on the curated table."""
    raw_stream, log2_stream = as_seed_sequence(seed).spawn(2)

    raw_model = fit_sanitation_on_income(curated_df, IncomeTransform.IDENTITY)
    raw_sim = simulate_r_squared(raw_model, n_simulations=n_simulations, seed=raw_stream)

    log2_model = fit_sanitation_on_income(curated_df, IncomeTransform.LOG2)
    log2_sim = simulate_r_squared(log2_model, n_simulations=n_simulations, seed=log2_stream)

    return SanitationIncomeAnalysis(
        raw_income=ModelPass(model=raw_model, simulation=raw_sim),
        log2_income=ModelPass(model=log2_model, simulation=log2_sim),
    )


def build_model_summary(analysis: SanitationIncomeAnalysis) -> pd.DataFrame:
    rows = []
    for transform, model_pass in analysis.passes().items():
        model = model_pass.model
        rows.append(
            {
                "transform": transform.value,
                "n_observations": model.n_observations,
                "intercept": model.intercept,
                "slope": model.slope,
                "residual_std_error": model.residual_std_error,
                "r_squared": model.r_squared,
                "equation": model.equation(),
            }
        )
    return pd.DataFrame(rows)


def build_simulated_r_squared_table(analysis: SanitationIncomeAnalysis) -> pd.DataFrame:
    frames: List[pd.DataFrame] = []
    for transform, model_pass in analysis.passes().items():
        values = model_pass.simulation.r_squared_values
        frames.append(
            pd.DataFrame(
                {
                    "transform": transform.value,
                    "simulation": np.arange(values.shape[0], dtype="int64"),
                    "r_squared": values,
                }
            )
        )
    return pd.concat(frames, ignore_index=True)


def build_simulation_summary(analysis: SanitationIncomeAnalysis) -> pd.DataFrame:
    rows = []
    for transform, model_pass in analysis.passes().items():
        sim = model_pass.simulation
        observed = model_pass.model.r_squared
        rows.append(
            {
                "transform": transform.value,
                "n_simulations": sim.n_simulations,
                "observed_r_squared": observed,
                "simulated_mean": sim.mean,
                "simulated_min": sim.minimum,
                "simulated_max": sim.maximum,
                "simulated_q025": sim.quantile(0.025),
                "simulated_q975": sim.quantile(0.975),
                "share_at_least_observed": sim.share_at_least(observed),
            }
        )
    return pd.DataFrame(rows)


def save_analysis_outputs(
    analysis: SanitationIncomeAnalysis,
    storage: StorageAdapter,
    *,
    output_prefix: str = ANALYSIS_OUTPUT_PREFIX,
) -> List[str]:
    """Write the three CSV artefacts and return their locations."""
    prefix = output_prefix.rstrip("/")
    return [
        storage.write_csv(build_model_summary(analysis), f"{prefix}/{MODEL_SUMMARY_CSV_NAME}"),
        storage.write_csv(
            build_simulated_r_squared_table(analysis),
            f"{prefix}/{SIMULATED_R_SQUARED_CSV_NAME}",
        ),
        storage.write_csv(
            build_simulation_summary(analysis),
            f"{prefix}/{SIMULATION_SUMMARY_CSV_NAME}",
        ),
    ]


__all__ = [
    "ANALYSIS_OUTPUT_PREFIX",
    "MODEL_SUMMARY_CSV_NAME",
    "SIMULATED_R_SQUARED_CSV_NAME",
    "SIMULATION_SUMMARY_CSV_NAME",
    "ModelPass",
    "SanitationIncomeAnalysis",
    "run_sanitation_income_analysis",
    "build_model_summary",
    "build_simulated_r_squared_table",
    "build_simulation_summary",
    "save_analysis_outputs",
]
