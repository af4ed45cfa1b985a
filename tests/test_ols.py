import numpy as np
import pandas as pd
import pytest

from common.errors import DegenerateInputError
from modeling.ols import (
    IncomeTransform,
    fit_ols,
    fit_sanitation_on_income,
    transform_income,
)


def test_perfect_line_is_recovered():
    model = fit_ols([1, 2, 3, 4, 5], [3, 5, 7, 9, 11])
    assert model.intercept == pytest.approx(1.0)
    assert model.slope == pytest.approx(2.0)
    assert model.r_squared == pytest.approx(1.0)
    assert model.residual_std_error == pytest.approx(0.0, abs=1e-12)
    assert model.fitted_values.tolist() == pytest.approx([3, 5, 7, 9, 11])
    assert model.n_observations == 5


def test_matches_numpy_polyfit():
    rng = np.random.default_rng(7)
    x = rng.uniform(0, 50, size=40)
    y = 12.0 + 0.8 * x + rng.normal(0, 3.0, size=40)

    model = fit_ols(x, y)
    slope, intercept = np.polyfit(x, y, 1)
    assert model.slope == pytest.approx(slope)
    assert model.intercept == pytest.approx(intercept)

    residuals = y - (intercept + slope * x)
    assert model.residual_std_error == pytest.approx(np.sqrt(np.sum(residuals ** 2) / 38))
    assert model.r_squared == pytest.approx(np.corrcoef(x, y)[0, 1] ** 2)


def test_two_identical_points_are_degenerate():
    with pytest.raises(DegenerateInputError):
        fit_ols([5, 5], [1, 2])


def test_fewer_than_three_observations_are_degenerate():
    with pytest.raises(DegenerateInputError):
        fit_ols([1, 2], [1, 2])


def test_constant_predictor_is_degenerate():
    with pytest.raises(DegenerateInputError):
        fit_ols([4, 4, 4, 4], [1, 2, 3, 4])


def test_three_observations_are_enough():
    model = fit_ols([1, 2, 3], [2, 4, 5])
    assert model.n_observations == 3


def test_non_finite_rows_are_left_out():
    model = fit_ols([1, 2, np.nan, 3, 4], [2, 4, 100, 6, np.inf])
    assert model.n_observations == 3
    assert model.slope == pytest.approx(2.0)


def test_mismatched_lengths_are_rejected():
    with pytest.raises(ValueError):
        fit_ols([1, 2, 3], [1, 2])


def test_fitted_model_is_read_only():
    model = fit_ols([1, 2, 3, 4], [1, 3, 2, 4])
    with pytest.raises(ValueError):
        model.fitted_values[0] = 99.0
    with pytest.raises(AttributeError):
        model.slope = 0.0


def test_fit_does_not_alias_inputs():
    x = np.array([1.0, 2.0, 3.0, 4.0])
    model = fit_ols(x, [1, 3, 2, 4])
    x[0] = 100.0
    assert model.predictor[0] == 1.0


def test_log2_transform():
    assert transform_income([1, 2, 1024], IncomeTransform.LOG2).tolist() == [0.0, 1.0, 10.0]
    assert transform_income([0, 5], "identity").tolist() == [0.0, 5.0]
    with pytest.raises(ValueError):
        transform_income([0, 5], IncomeTransform.LOG2)


def test_fit_sanitation_on_log2_income():
    curated = pd.DataFrame(
        {
            "country": ["A", "B", "C", "D"],
            "year": [2000] * 4,
            "sanitation": [10.0, 30.0, 50.0, 70.0],
            "income": [500.0, 1000.0, 2000.0, 4000.0],
        }
    )
    model = fit_sanitation_on_income(curated, IncomeTransform.LOG2)
    assert model.transform is IncomeTransform.LOG2
    assert model.slope == pytest.approx(20.0)
    assert model.r_squared == pytest.approx(1.0)
    assert "log2(income)" in model.equation()

    raw = fit_sanitation_on_income(curated)
    assert raw.transform is IncomeTransform.IDENTITY
    assert raw.r_squared < model.r_squared
