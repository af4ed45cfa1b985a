import pandas as pd
import pytest

from common.errors import DuplicateKeyError
from transformations.curated_sanitation_income_country_year import (
    CURATED_BASE_PREFIX,
    CURATED_FILE_NAME,
    build_curated_sanitation_income_dataframe,
    records_from_curated,
    save_curated_sanitation_income_parquet_partitions,
)


def _long(rows, value_name):
    return pd.DataFrame(rows, columns=["country", "year", value_name])


@pytest.fixture
def sanitation():
    return _long(
        [("A", 1999, 40.0), ("A", 2000, 42.0), ("B", 1999, 80.0), ("C", 1999, 10.0)],
        "sanitation",
    )


@pytest.fixture
def income():
    return _long(
        [("A", 1999, 1000.0), ("A", 2000, 1100.0), ("B", 1999, 9000.0), ("B", 2000, 9100.0)],
        "income",
    )


def test_inner_join_keeps_shared_keys_only(sanitation, income):
    joined = build_curated_sanitation_income_dataframe(sanitation, income)
    assert joined.columns.tolist() == ["country", "year", "sanitation", "income"]
    keys = list(zip(joined["country"], joined["year"]))
    assert keys == [("A", 1999), ("A", 2000), ("B", 1999)]
    assert len(joined) <= min(len(sanitation), len(income))

    san_keys = set(zip(sanitation["country"], sanitation["year"]))
    inc_keys = set(zip(income["country"], income["year"]))
    assert set(keys) <= san_keys & inc_keys


def test_join_carries_both_values(sanitation, income):
    joined = build_curated_sanitation_income_dataframe(sanitation, income)
    row = joined[(joined["country"] == "B") & (joined["year"] == 1999)].iloc[0]
    assert row["sanitation"] == 80.0
    assert row["income"] == 9000.0
    assert joined[["sanitation", "income"]].notna().all().all()


def test_join_reports_excluded_pairs(sanitation, income, capsys):
    build_curated_sanitation_income_dataframe(sanitation, income)
    out = capsys.readouterr().out
    assert "1 (country, year) pairs only in sanitation" in out
    assert "1 only in income" in out


def test_duplicate_keys_are_rejected(sanitation, income):
    doubled = pd.concat([income, income.head(1)], ignore_index=True)
    with pytest.raises(DuplicateKeyError):
        build_curated_sanitation_income_dataframe(sanitation, doubled)


def test_missing_columns_are_rejected(sanitation, income):
    with pytest.raises(ValueError):
        build_curated_sanitation_income_dataframe(sanitation, income.drop(columns=["income"]))


def test_no_overlap_gives_empty_table(sanitation):
    other = _long([("Z", 1999, 1.0)], "income")
    joined = build_curated_sanitation_income_dataframe(sanitation, other)
    assert joined.empty


def test_records_from_curated(sanitation, income):
    joined = build_curated_sanitation_income_dataframe(sanitation, income)
    records = records_from_curated(joined, limit=1)
    assert records == [{"country": "A", "year": 1999, "sanitation": 40.0, "income": 1000.0}]


def test_save_partitions_by_year(sanitation, income, storage):
    joined = build_curated_sanitation_income_dataframe(sanitation, income)
    locations = save_curated_sanitation_income_parquet_partitions(joined, storage)
    assert len(locations) == 2

    path_1999 = storage.path_for(f"{CURATED_BASE_PREFIX}/year=1999/{CURATED_FILE_NAME}")
    df_1999 = pd.read_parquet(path_1999)
    assert sorted(df_1999["country"].tolist()) == ["A", "B"]


def test_save_empty_table_writes_nothing(storage):
    empty = pd.DataFrame(columns=["country", "year", "sanitation", "income"])
    assert save_curated_sanitation_income_parquet_partitions(empty, storage) == []
