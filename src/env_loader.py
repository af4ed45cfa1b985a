"""
Environment-based configuration for the sanitation x income pipeline.

Settings come from process environment variables, optionally seeded from
a `.env` file in the working directory (handy for local runs; on a
server the variables are normally set directly and the file is absent).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from common.errors import ConfigError
from ingestion.gapminder_csv import RAW_BASE_PREFIX

SANITATION_CSV_KEY_ENV = "SANITATION_CSV_KEY"
INCOME_CSV_KEY_ENV = "INCOME_CSV_KEY"
SANITATION_CSV_URL_ENV = "SANITATION_CSV_URL"
INCOME_CSV_URL_ENV = "INCOME_CSV_URL"
ANALYSIS_YEAR_START_ENV = "ANALYSIS_YEAR_START"
ANALYSIS_YEAR_END_ENV = "ANALYSIS_YEAR_END"
N_SIMULATIONS_ENV = "N_SIMULATIONS"
SIMULATION_SEED_ENV = "SIMULATION_SEED"
PIPELINE_STORAGE_ROOT_ENV = "PIPELINE_STORAGE_ROOT"
PIPELINE_S3_BUCKET_ENV = "PIPELINE_S3_BUCKET"
PIPELINE_S3_BASE_PREFIX_ENV = "PIPELINE_S3_BASE_PREFIX"

DEFAULT_SANITATION_CSV_KEY = f"{RAW_BASE_PREFIX}/at_least_basic_sanitation_overall_access_percent.csv"
DEFAULT_INCOME_CSV_KEY = f"{RAW_BASE_PREFIX}/income_per_person_gdppercapita_ppp_inflation_adjusted.csv"
DEFAULT_YEAR_START = 1999
DEFAULT_YEAR_END = 2019
DEFAULT_N_SIMULATIONS = 1000


def load_dotenv_if_present(path: str | None = None) -> None:
    """
    Read KEY=VALUE pairs from `path` (default ".env") into os.environ.

    Blank lines and "#" comments are skipped, surrounding quotes are
    stripped from values, and variables already present in the
    environment are left untouched.
    """
    env_path = Path(path or ".env")
    if not env_path.is_file():
        return

    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if not key:
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        os.environ.setdefault(key, value)


def _optional_int(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name!r} must be an integer, got {raw!r}") from exc


def _int_or_default(environ: Mapping[str, str], name: str, default: int) -> int:
    value = _optional_int(environ, name)
    return default if value is None else value


@dataclass(frozen=True)
class PipelineSettings:
    """Resolved configuration for one pipeline run."""

    sanitation_csv_key: str = DEFAULT_SANITATION_CSV_KEY
    income_csv_key: str = DEFAULT_INCOME_CSV_KEY
    year_start: int = DEFAULT_YEAR_START
    year_end: int = DEFAULT_YEAR_END
    n_simulations: int = DEFAULT_N_SIMULATIONS
    seed: Optional[int] = None
    storage_root: str = "."
    s3_bucket: Optional[str] = None
    s3_base_prefix: Optional[str] = None
    sanitation_csv_url: Optional[str] = None
    income_csv_url: Optional[str] = None

    def __post_init__(self) -> None:
        if self.year_start > self.year_end:
            raise ConfigError(
                f"Year range is empty: start={self.year_start} > end={self.year_end}"
            )
        if self.n_simulations < 1:
            raise ConfigError(f"n_simulations must be >= 1, got {self.n_simulations}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PipelineSettings":
        env = os.environ if environ is None else environ
        return cls(
            sanitation_csv_key=env.get(SANITATION_CSV_KEY_ENV) or DEFAULT_SANITATION_CSV_KEY,
            income_csv_key=env.get(INCOME_CSV_KEY_ENV) or DEFAULT_INCOME_CSV_KEY,
            year_start=_int_or_default(env, ANALYSIS_YEAR_START_ENV, DEFAULT_YEAR_START),
            year_end=_int_or_default(env, ANALYSIS_YEAR_END_ENV, DEFAULT_YEAR_END),
            n_simulations=_int_or_default(env, N_SIMULATIONS_ENV, DEFAULT_N_SIMULATIONS),
            seed=_optional_int(env, SIMULATION_SEED_ENV),
            storage_root=env.get(PIPELINE_STORAGE_ROOT_ENV) or ".",
            s3_bucket=env.get(PIPELINE_S3_BUCKET_ENV) or None,
            s3_base_prefix=env.get(PIPELINE_S3_BASE_PREFIX_ENV) or None,
            sanitation_csv_url=env.get(SANITATION_CSV_URL_ENV) or None,
            income_csv_url=env.get(INCOME_CSV_URL_ENV) or None,
        )


__all__ = [
    "DEFAULT_SANITATION_CSV_KEY",
    "DEFAULT_INCOME_CSV_KEY",
    "DEFAULT_YEAR_START",
    "DEFAULT_YEAR_END",
    "DEFAULT_N_SIMULATIONS",
    "PipelineSettings",
    "load_dotenv_if_present",
]
