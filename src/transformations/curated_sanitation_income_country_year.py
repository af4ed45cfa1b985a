"""
Curated dataset: sanitation access x income per person, by country-year.

Inner join of the two long tables on (country, year):

    country     - string (key)
    year        - int64  (key)
    sanitation  - float  (% of population with at least basic sanitation)
    income      - float  (income per person, PPP, inflation adjusted)

Pairs present in only one source are excluded; their counts are printed.
Each input must hold at most one row per key, otherwise DuplicateKeyError
is raised instead of producing a cross product.

Partitioned layout when persisted:

    curated/sanitation_income_country_year/
        year=<ano>/curated_sanitation_income_country_year.parquet
"""

from __future__ import annotations

from typing import List, Optional

import pandas as pd

from adapters import StorageAdapter
from common.errors import DuplicateKeyError

JOIN_KEYS = ["country", "year"]
CURATED_COLUMNS = ["country", "year", "sanitation", "income"]
CURATED_BASE_PREFIX = "curated/sanitation_income_country_year"
CURATED_FILE_NAME = "curated_sanitation_income_country_year.parquet"


def _ensure_unique_keys(df: pd.DataFrame, side: str) -> None:
    duplicated = df.duplicated(subset=JOIN_KEYS, keep=False)
    if duplicated.any():
        sample = (
            df.loc[duplicated, JOIN_KEYS]
            .drop_duplicates()
            .head(5)
            .itertuples(index=False, name=None)
        )
        raise DuplicateKeyError(
            f"{side} table has {int(duplicated.sum())} rows sharing a (country, year) key, "
            f"e.g. {list(sample)}"
        )


def _normalise_keys(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out["country"] = out["country"].astype("string")
    out["year"] = pd.to_numeric(out["year"], errors="raise").astype("int64")
    return out


def build_curated_sanitation_income_dataframe(
    sanitation_df: pd.DataFrame,
    income_df: pd.DataFrame,
) -> pd.DataFrame:
    """
    Inner-join the sanitation and income long tables on (country, year).

    Output is sorted by country then year, with a fresh RangeIndex.
    """
    for df, side, value_col in (
        (sanitation_df, "sanitation", "sanitation"),
        (income_df, "income", "income"),
    ):
        missing = [c for c in JOIN_KEYS + [value_col] if c not in df.columns]
        if missing:
            raise ValueError(f"{side} table is missing columns {missing}")
        _ensure_unique_keys(df, side)

    san = _normalise_keys(sanitation_df[JOIN_KEYS + ["sanitation"]])
    inc = _normalise_keys(income_df[JOIN_KEYS + ["income"]])

    joined = san.merge(inc, on=JOIN_KEYS, how="inner", validate="one_to_one")

    only_sanitation = len(san) - len(joined)
    only_income = len(inc) - len(joined)
    if only_sanitation or only_income:
        print(
            f"[curated] {only_sanitation} (country, year) pairs only in sanitation and "
            f"{only_income} only in income; excluded from the curated table."
        )

    joined = joined.sort_values(JOIN_KEYS).reset_index(drop=True)
    joined["sanitation"] = joined["sanitation"].astype("float64")
    joined["income"] = joined["income"].astype("float64")
    return joined[CURATED_COLUMNS]


def save_curated_sanitation_income_parquet_partitions(
    df: pd.DataFrame,
    storage: StorageAdapter,
    *,
    base_prefix: str = CURATED_BASE_PREFIX,
) -> List[str]:
    """Write one Parquet file per year and return their locations."""
    if df.empty:
        return []

    locations: List[str] = []
    for year_value, df_year in df.groupby("year"):
        key = f"{base_prefix}/year={int(year_value)}/{CURATED_FILE_NAME}"
        locations.append(storage.write_parquet(df_year.reset_index(drop=True), key))
    return locations


def records_from_curated(df: pd.DataFrame, limit: Optional[int] = None) -> List[dict]:
    """Plain-dict rows, for consumers that do not work with DataFrames."""
    subset = df if limit is None else df.head(limit)
    return [
        {
            "country": str(row.country),
            "year": int(row.year),
            "sanitation": float(row.sanitation),
            "income": float(row.income),
        }
        for row in subset.itertuples(index=False)
    ]


__all__ = [
    "JOIN_KEYS",
    "CURATED_COLUMNS",
    "CURATED_BASE_PREFIX",
    "CURATED_FILE_NAME",
    "build_curated_sanitation_income_dataframe",
    "save_curated_sanitation_income_parquet_partitions",
    "records_from_curated",
]
