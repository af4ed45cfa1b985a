"""
Modeling layer
--------------

OLS fit of sanitation access on income per person and the
posterior-predictive R^2 check used to judge it.
"""

from .ols import (  # noqa: F401
    FittedModel,
    IncomeTransform,
    fit_ols,
    fit_sanitation_on_income,
    transform_income,
)
from .posterior_predictive import (  # noqa: F401
    DEFAULT_N_SIMULATIONS,
    SimulationBatch,
    simulate_r_squared,
)

__all__ = [
    "FittedModel",
    "IncomeTransform",
    "fit_ols",
    "fit_sanitation_on_income",
    "transform_income",
    "DEFAULT_N_SIMULATIONS",
    "SimulationBatch",
    "simulate_r_squared",
]
