"""
Ordinary least squares fit of sanitation on income.

    slope     = Cov(x, y) / Var(x)
    intercept = mean(y) - slope * mean(x)
    sigma     = sqrt(SS_res / (n - 2))
    R^2       = 1 - SS_res / SS_tot

The predictor is passed in already transformed (see `transform_income`);
`transform` on the result only records which scale was used.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from common.errors import DegenerateInputError

MIN_OBSERVATIONS = 3


class IncomeTransform(str, Enum):
    IDENTITY = "identity"
    LOG2 = "log2"


def _frozen(values: np.ndarray) -> np.ndarray:
    values = np.array(values, dtype="float64", copy=True)
    values.flags.writeable = False
    return values


@dataclass(frozen=True, eq=False)
class FittedModel:
    intercept: float
    slope: float
    transform: IncomeTransform
    residual_std_error: float
    r_squared: float
    fitted_values: np.ndarray
    predictor: np.ndarray

    @property
    def n_observations(self) -> int:
        return int(self.fitted_values.shape[0])

    def equation(self, response: str = "sanitation", predictor: str = "income") -> str:
        x_label = predictor if self.transform is IncomeTransform.IDENTITY else f"log2({predictor})"
        sign = "+" if self.slope >= 0 else "-"
        return f"{response} = {self.intercept:.4g} {sign} {abs(self.slope):.4g} * {x_label}"


def transform_income(income: Sequence[float] | np.ndarray, transform: IncomeTransform) -> np.ndarray:
    transform = IncomeTransform(transform)
    x = np.asarray(income, dtype="float64")
    if transform is IncomeTransform.IDENTITY:
        return x
    if np.any(x <= 0):
        raise ValueError("log2 transform needs strictly positive income values")
    return np.log2(x)


def _least_squares(x: np.ndarray, y: np.ndarray) -> Tuple[float, float]:
    x_centered = x - x.mean()
    sxx = float(np.dot(x_centered, x_centered))
    if sxx == 0.0:
        raise DegenerateInputError("predictor has zero variance; slope is undefined")
    slope = float(np.dot(x_centered, y - y.mean())) / sxx
    intercept = float(y.mean()) - slope * float(x.mean())
    return intercept, slope


def r_squared_of(y: np.ndarray, y_hat: np.ndarray) -> float:
    ss_res = float(np.sum((y - y_hat) ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2))
    if ss_tot == 0.0:
        # constant response: the fitted line reproduces it exactly
        return 1.0
    return 1.0 - ss_res / ss_tot


def fit_ols(
    x: Sequence[float] | np.ndarray,
    y: Sequence[float] | np.ndarray,
    *,
    transform: IncomeTransform = IncomeTransform.IDENTITY,
) -> FittedModel:
    """
    Fit y = intercept + slope * x by least squares.

    Rows where x or y is not finite are left out, so `fitted_values`
    aligns with the finite rows only.

    Raises DegenerateInputError for fewer than 3 usable observations or
    a constant predictor.
    """
    x_arr = np.asarray(x, dtype="float64")
    y_arr = np.asarray(y, dtype="float64")
    if x_arr.shape != y_arr.shape or x_arr.ndim != 1:
        raise ValueError(f"x and y must be 1-d and of equal length, got {x_arr.shape} and {y_arr.shape}")

    finite = np.isfinite(x_arr) & np.isfinite(y_arr)
    if not finite.all():
        print(f"[model] {int((~finite).sum())} rows with non-finite values left out of the fit")
        x_arr, y_arr = x_arr[finite], y_arr[finite]

    n = x_arr.shape[0]
    if n < MIN_OBSERVATIONS:
        raise DegenerateInputError(
            f"need at least {MIN_OBSERVATIONS} observations to fit and estimate the residual error, got {n}"
        )

    intercept, slope = _least_squares(x_arr, y_arr)
    fitted = intercept + slope * x_arr
    residuals = y_arr - fitted
    residual_std_error = float(np.sqrt(np.sum(residuals ** 2) / (n - 2)))

    return FittedModel(
        intercept=intercept,
        slope=slope,
        transform=IncomeTransform(transform),
        residual_std_error=residual_std_error,
        r_squared=r_squared_of(y_arr, fitted),
        fitted_values=_frozen(fitted),
        predictor=_frozen(x_arr),
    )


def fit_sanitation_on_income(
    curated_df: pd.DataFrame,
    transform: IncomeTransform = IncomeTransform.IDENTITY,
) -> FittedModel:
    """Fit sanitation on (optionally log2) income from the curated table."""
    transform = IncomeTransform(transform)
    x = transform_income(curated_df["income"].to_numpy(dtype="float64"), transform)
    y = curated_df["sanitation"].to_numpy(dtype="float64")
    model = fit_ols(x, y, transform=transform)
    print(
        f"[model] {transform.value}: n={model.n_observations} {model.equation()} "
        f"sigma={model.residual_std_error:.3f} R2={model.r_squared:.3f}"
    )
    return model


__all__ = [
    "MIN_OBSERVATIONS",
    "IncomeTransform",
    "FittedModel",
    "transform_income",
    "r_squared_of",
    "fit_ols",
    "fit_sanitation_on_income",
]
