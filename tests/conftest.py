from __future__ import annotations

import pandas as pd
import pytest

from adapters import LocalStorageAdapter
from metadata import METADATA_LOCAL_FILE_ENV


@pytest.fixture(autouse=True)
def isolated_metadata_file(tmp_path, monkeypatch):
    path = tmp_path / "metadata" / "runs.json"
    monkeypatch.setenv(METADATA_LOCAL_FILE_ENV, str(path))
    return path


@pytest.fixture
def storage(tmp_path):
    return LocalStorageAdapter(tmp_path / "store")


def _wide_frame(rows, years):
    data = {"country": list(rows)}
    for i, year in enumerate(years):
        data[str(year)] = [values[i] for values in rows.values()]
    return pd.DataFrame(data)


@pytest.fixture
def make_wide():
    """Build a wide table from {country: [value per year]}."""
    return _wide_frame
