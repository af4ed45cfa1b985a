"""
Wide -> long reshaping of the Gapminder country-by-year tables.

Both inputs arrive as one row per country and one column per year:

    country, 1999, 2000, ..., 2019            (sanitation, % of population)
    country, 1800, 1801, ..., 2049            (income per person)

and leave as a long table with one row per (country, year):

    country - string
    year    - int64
    <value> - float64 ("sanitation" or "income")

Completeness rule: a country is kept only when its wide row has no
missing cell at all, across every year column of the file and not just
the analysis window. A single gap in, say, 1850 removes the country from
every later year. The names of dropped countries are printed and stored
in `DataFrame.attrs["dropped_countries"]` of the returned frame.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple

import pandas as pd

from adapters import StorageAdapter
from common.errors import ParseError
from .numeric_parser import is_irregular_k_token, parse_income_token, parse_plain_number

COUNTRY_COLUMN = "country"
ANALYSIS_YEAR_START = 1999
ANALYSIS_YEAR_END = 2019


def load_wide_table(
    storage: StorageAdapter,
    key: str,
    *,
    as_text: bool = False,
) -> pd.DataFrame:
    """
    Read a wide CSV by key.

    With `as_text=True` every cell is kept as the literal string from the
    file (needed for "k" income tokens); empty cells are still NaN.
    """
    read_kwargs = {"dtype": str} if as_text else {}
    df = storage.read_csv(key, **read_kwargs)
    if COUNTRY_COLUMN not in df.columns:
        raise ValueError(f"{key}: expected a {COUNTRY_COLUMN!r} column, got {list(df.columns)[:5]}")
    return df


def year_columns(df: pd.DataFrame) -> List[str]:
    """Column labels that look like a year ("1999", 1999)."""
    return [c for c in df.columns if str(c).strip().isdigit()]


def drop_incomplete_countries(
    wide_df: pd.DataFrame,
    *,
    country_col: str = COUNTRY_COLUMN,
) -> Tuple[pd.DataFrame, List[str]]:
    """
    Keep only the rows with no missing cell anywhere in the row.

    Returns (complete_rows, dropped_country_names).
    """
    complete_mask = wide_df.notna().all(axis=1)
    dropped = wide_df.loc[~complete_mask, country_col].astype(str).tolist()
    return wide_df.loc[complete_mask].copy(), dropped


def _columns_in_range(df: pd.DataFrame, year_start: int, year_end: int) -> List[str]:
    return [c for c in year_columns(df) if year_start <= int(str(c).strip()) <= year_end]


def reshape_wide_to_long(
    wide_df: pd.DataFrame,
    *,
    value_name: str,
    parse_income: bool = False,
    year_start: int = ANALYSIS_YEAR_START,
    year_end: int = ANALYSIS_YEAR_END,
    country_col: str = COUNTRY_COLUMN,
    label: Optional[str] = None,
) -> pd.DataFrame:
    """
    Reshape a wide country-by-year table into (country, year, value_name).

    1. Drop every country with any missing cell in its full row.
    2. Keep the year columns in [year_start, year_end].
    3. Emit one row per surviving (country, year).
    4. Convert cells with `parse_income_token` when `parse_income` is set,
       otherwise with a strict float conversion.

    Raises ParseError (with country, year and token) on the first cell
    that cannot be converted.
    """
    tag = label or value_name
    complete_df, dropped = drop_incomplete_countries(wide_df, country_col=country_col)
    if dropped:
        print(
            f"[reshape] {tag}: {len(dropped)} of {len(wide_df)} countries dropped "
            f"for missing values in at least one year: {', '.join(dropped[:10])}"
            + (" ..." if len(dropped) > 10 else "")
        )

    cols = _columns_in_range(complete_df, year_start, year_end)
    long_df = complete_df.melt(
        id_vars=[country_col],
        value_vars=cols,
        var_name="year",
        value_name="raw_value",
    )

    convert: Callable[[object], float] = parse_income_token if parse_income else parse_plain_number
    values: List[float] = []
    irregular = 0
    for country, year, token in zip(long_df[country_col], long_df["year"], long_df["raw_value"]):
        try:
            values.append(convert(token))
        except ParseError as exc:
            raise ParseError(
                token,
                country=str(country),
                year=int(str(year).strip()),
                reason=exc.reason,
            ) from exc
        if parse_income and is_irregular_k_token(token):
            irregular += 1

    if irregular:
        print(
            f"[reshape] {tag}: {irregular} 'k' tokens without exactly one fractional digit; "
            "decoded with the x100 rule, check the source data"
        )

    result = pd.DataFrame(
        {
            country_col: long_df[country_col].astype("string"),
            "year": long_df["year"].map(lambda y: int(str(y).strip())).astype("int64"),
            value_name: pd.Series(values, index=long_df.index, dtype="float64"),
        }
    )
    result = result.reset_index(drop=True)
    result.attrs["dropped_countries"] = dropped
    return result


__all__ = [
    "COUNTRY_COLUMN",
    "ANALYSIS_YEAR_START",
    "ANALYSIS_YEAR_END",
    "load_wide_table",
    "year_columns",
    "drop_incomplete_countries",
    "reshape_wide_to_long",
]
