"""
Transformations layer
---------------------

Turns the RAW Gapminder wide tables into long country-year tables and
joins them into the curated sanitation x income dataset.
"""

from .numeric_parser import (  # noqa: F401
    is_irregular_k_token,
    parse_income_token,
    parse_plain_number,
)
from .wide_to_long import (  # noqa: F401
    ANALYSIS_YEAR_END,
    ANALYSIS_YEAR_START,
    drop_incomplete_countries,
    load_wide_table,
    reshape_wide_to_long,
)
from .curated_sanitation_income_country_year import (  # noqa: F401
    CURATED_BASE_PREFIX,
    build_curated_sanitation_income_dataframe,
    records_from_curated,
    save_curated_sanitation_income_parquet_partitions,
)

__all__ = [
    "ANALYSIS_YEAR_START",
    "ANALYSIS_YEAR_END",
    "CURATED_BASE_PREFIX",
    "parse_income_token",
    "parse_plain_number",
    "is_irregular_k_token",
    "load_wide_table",
    "drop_incomplete_countries",
    "reshape_wide_to_long",
    "build_curated_sanitation_income_dataframe",
    "save_curated_sanitation_income_parquet_partitions",
    "records_from_curated",
]
