import numpy as np
import pandas as pd
import pytest

from analysis import (
    MODEL_SUMMARY_CSV_NAME,
    SIMULATED_R_SQUARED_CSV_NAME,
    SIMULATION_SUMMARY_CSV_NAME,
    build_model_summary,
    build_simulated_r_squared_table,
    build_simulation_summary,
    run_sanitation_income_analysis,
    save_analysis_outputs,
)
from modeling import IncomeTransform


@pytest.fixture
def curated():
    rng = np.random.default_rng(3)
    income = 2 ** rng.uniform(9, 16, size=120)
    sanitation = np.clip(-60 + 10 * np.log2(income) + rng.normal(0, 5, size=120), 0, 100)
    return pd.DataFrame(
        {
            "country": [f"C{i}" for i in range(120)],
            "year": 2010,
            "sanitation": sanitation,
            "income": income,
        }
    )


def test_both_transforms_are_fitted(curated):
    result = run_sanitation_income_analysis(curated, n_simulations=50, seed=0)
    assert result.raw_income.model.transform is IncomeTransform.IDENTITY
    assert result.log2_income.model.transform is IncomeTransform.LOG2
    assert result.log2_income.model.r_squared > result.raw_income.model.r_squared
    assert result.raw_income.simulation.n_simulations == 50


def test_analysis_is_reproducible(curated):
    a = run_sanitation_income_analysis(curated, n_simulations=30, seed=123)
    b = run_sanitation_income_analysis(curated, n_simulations=30, seed=123)
    np.testing.assert_array_equal(
        a.log2_income.simulation.r_squared_values,
        b.log2_income.simulation.r_squared_values,
    )
    assert not np.array_equal(
        a.raw_income.simulation.r_squared_values,
        a.log2_income.simulation.r_squared_values,
    )


def test_seed_sequence_gives_the_same_analysis_twice(curated):
    ss = np.random.SeedSequence(123)
    a = run_sanitation_income_analysis(curated, n_simulations=20, seed=ss)
    b = run_sanitation_income_analysis(curated, n_simulations=20, seed=ss)
    np.testing.assert_array_equal(
        a.raw_income.simulation.r_squared_values,
        b.raw_income.simulation.r_squared_values,
    )
    np.testing.assert_array_equal(
        a.log2_income.simulation.r_squared_values,
        b.log2_income.simulation.r_squared_values,
    )
    assert ss.n_children_spawned == 0


def test_summary_tables(curated):
    result = run_sanitation_income_analysis(curated, n_simulations=40, seed=1)

    models = build_model_summary(result)
    assert models["transform"].tolist() == ["identity", "log2"]
    assert (models["n_observations"] == 120).all()

    sims = build_simulated_r_squared_table(result)
    assert len(sims) == 80
    assert sims.groupby("transform")["simulation"].max().tolist() == [39, 39]

    summary = build_simulation_summary(result)
    log2_row = summary.set_index("transform").loc["log2"]
    assert log2_row["observed_r_squared"] == pytest.approx(result.log2_income.model.r_squared)
    assert log2_row["simulated_min"] <= log2_row["simulated_mean"] <= log2_row["simulated_max"]


def test_save_analysis_outputs(curated, storage):
    result = run_sanitation_income_analysis(curated, n_simulations=10, seed=2)
    locations = save_analysis_outputs(result, storage, output_prefix="out/")
    assert len(locations) == 3
    for name in (MODEL_SUMMARY_CSV_NAME, SIMULATED_R_SQUARED_CSV_NAME, SIMULATION_SUMMARY_CSV_NAME):
        assert storage.exists(f"out/{name}")

    models = storage.read_csv(f"out/{MODEL_SUMMARY_CSV_NAME}")
    assert set(models.columns) >= {"intercept", "slope", "residual_std_error", "r_squared"}
