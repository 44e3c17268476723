"""Shared fixtures: the eight-record example dataset and on-disk copies of it."""
import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pandas as pd
import pytest

from cws_clustering.config import CLUSTERING_COLUMNS, COUNTRY_COLUMNS

# Three identical groups plus a singleton; each group defined by one attribute pattern
EXAMPLE_VECTORS = [
    [1, 0, 0, 0, 0],
    [1, 0, 0, 0, 0],
    [1, 0, 0, 0, 0],
    [0, 1, 0, 0, 0],
    [0, 1, 0, 0, 0],
    [0, 0, 1, 1, 0],
    [0, 0, 1, 1, 0],
    [0, 0, 0, 0, 1],
]
EXAMPLE_ITALY = [1, 1, 0, 1, 0, 0, 1, 1]
EXPECTED_LABELS = [1, 1, 1, 2, 2, 3, 3, 4]


def make_frame(vectors=EXAMPLE_VECTORS, italy=EXAMPLE_ITALY) -> pd.DataFrame:
    df = pd.DataFrame(vectors, columns=list(CLUSTERING_COLUMNS))
    df.insert(0, "Space_ID", [f"CWS-{i:03d}" for i in range(1, len(df) + 1)])
    df[COUNTRY_COLUMNS[0]] = italy
    df[COUNTRY_COLUMNS[1]] = [1 - v for v in italy]
    return df


@pytest.fixture
def example_frame():
    return make_frame()


@pytest.fixture
def example_xlsx(tmp_path, example_frame):
    path = tmp_path / "example.xlsx"
    example_frame.to_excel(path, index=False)
    return path


@pytest.fixture
def example_csv(tmp_path, example_frame):
    path = tmp_path / "example.csv"
    example_frame.to_csv(path, index=False)
    return path
