"""
Posterior-predictive check of a fitted OLS model.

Each simulation round adds N(0, sigma) noise to the model's fitted
values, refits the simulated response on the original predictor and
keeps the R^2 of that refit. The spread of simulated R^2 shows how much
of the observed R^2 the assumed noise model alone would produce.

Round i draws from its own stream, spawned from a master
`numpy.random.SeedSequence`, so results depend only on (seed, i).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .ols import FittedModel, r_squared_of

DEFAULT_N_SIMULATIONS = 1000

SeedLike = Union[int, np.random.SeedSequence, None]


@dataclass(frozen=True, eq=False)
class SimulationBatch:
    n_simulations: int
    r_squared_values: np.ndarray

    @property
    def mean(self) -> float:
        return float(np.mean(self.r_squared_values))

    @property
    def minimum(self) -> float:
        return float(np.min(self.r_squared_values))

    @property
    def maximum(self) -> float:
        return float(np.max(self.r_squared_values))

    def quantile(self, q: float) -> float:
        return float(np.quantile(self.r_squared_values, q))

    def share_at_least(self, value: float) -> float:
        """Fraction of rounds whose R^2 is >= value."""
        return float(np.mean(self.r_squared_values >= value))


def as_seed_sequence(seed: SeedLike) -> np.random.SeedSequence:
    """
    Fresh SeedSequence for `seed`.

    A SeedSequence argument is copied, so spawning from the result never
    advances the caller's object and the same seed always yields the
    same child streams.
    """
    if isinstance(seed, np.random.SeedSequence):
        return np.random.SeedSequence(
            seed.entropy,
            spawn_key=seed.spawn_key,
            pool_size=seed.pool_size,
        )
    return np.random.SeedSequence(seed)


def simulate_r_squared(
    model: FittedModel,
    *,
    n_simulations: int = DEFAULT_N_SIMULATIONS,
    seed: SeedLike = None,
) -> SimulationBatch:
    """
    Run `n_simulations` posterior-predictive rounds for `model`.

    Returns the R^2 of every round in round order. The model is only
    read, never modified.
    """
    if n_simulations < 1:
        raise ValueError(f"n_simulations must be >= 1, got {n_simulations}")

    fitted = model.fitted_values
    x = model.predictor
    sigma = model.residual_std_error
    n = fitted.shape[0]

    if sigma == 0.0:
        # Without noise every replicate is the fitted line itself.
        values = np.ones(n_simulations, dtype="float64")
    else:
        x_centered = x - x.mean()
        sxx = float(np.dot(x_centered, x_centered))
        streams = as_seed_sequence(seed).spawn(n_simulations)

        values = np.empty(n_simulations, dtype="float64")
        for i, stream in enumerate(streams):
            rng = np.random.default_rng(stream)
            y_sim = fitted + rng.normal(0.0, sigma, size=n)
            slope = float(np.dot(x_centered, y_sim - y_sim.mean())) / sxx
            intercept = float(y_sim.mean()) - slope * float(x.mean())
            values[i] = r_squared_of(y_sim, intercept + slope * x)

    values.flags.writeable = False
    batch = SimulationBatch(n_simulations=n_simulations, r_squared_values=values)
    print(
        f"[simulate] {model.transform.value}: {n_simulations} rounds, "
        f"simulated R2 mean={batch.mean:.3f} range=[{batch.minimum:.3f}, {batch.maximum:.3f}] "
        f"observed R2={model.r_squared:.3f}"
    )
    return batch


__all__ = [
    "DEFAULT_N_SIMULATIONS",
    "SimulationBatch",
    "as_seed_sequence",
    "simulate_r_squared",
]
