# -*- coding: utf-8 -*-
"""
Data loading: read the survey spreadsheet, check the expected columns and
validate that every clustering attribute and country flag is binary.
"""
import os
from typing import Sequence, Tuple

import pandas as pd
from pandas.api.types import CategoricalDtype

from .errors import ConfigError, DataValidationError, SchemaError

BINARY_LEVELS = CategoricalDtype(categories=["0", "1"], ordered=False)


# -------------------------
# Reading
# -------------------------
def read_table(path: str) -> pd.DataFrame:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")
    ext = os.path.splitext(path)[1].lower()
    if ext in (".xlsx", ".xlsm"):
        return pd.read_excel(path)
    if ext == ".csv":
        return pd.read_csv(path)
    raise ConfigError(f"Unsupported input format '{ext}' for {path} (expected .xlsx or .csv).", stage="loader")


# -------------------------
# Validation
# -------------------------
def require_columns(df: pd.DataFrame, columns: Sequence[str]):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing expected column(s): {', '.join(missing)}")


def to_binary(series: pd.Series) -> pd.Series:
    """
    Coerce 0/1 values (ints, floats or their string forms) to int64.
    Anything else, missing values included, raises DataValidationError.
    """
    n_missing = int(series.isna().sum())
    if n_missing:
        raise DataValidationError(f"Column '{series.name}' has {n_missing} missing value(s); expected 0 or 1.")
    numeric = pd.to_numeric(series.astype("string").str.strip(), errors="coerce")
    bad = ~numeric.isin([0, 1])
    if bad.any():
        offending = sorted({str(v) for v in series[bad].unique()})[:5]
        raise DataValidationError(
            f"Column '{series.name}' has non-binary value(s) {offending}; expected 0 or 1."
        )
    return numeric.astype("int64")


def as_categorical(frame: pd.DataFrame) -> pd.DataFrame:
    """Binary ints -> categorical with the two levels '0' and '1'."""
    return frame.astype(str).astype(BINARY_LEVELS)


# -------------------------
# Loader
# -------------------------
def load_dataset(
    path: str,
    clustering_columns: Sequence[str],
    country_columns: Sequence[str] = (),
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Returns (data, clustering_frame).

    data keeps every source column and row order; the validated binary
    columns are normalised to 0/1 integers. clustering_frame holds only the
    clustering attributes, in the given order, as two-level categoricals.
    """
    print(f"Reading dataset from {path} ...")
    data = read_table(path)
    require_columns(data, list(clustering_columns) + list(country_columns))

    data = data.copy()
    for col in list(clustering_columns) + list(country_columns):
        data[col] = to_binary(data[col])

    clustering_frame = as_categorical(data[list(clustering_columns)])
    print(f"Loaded {data.shape[0]} records, {len(clustering_columns)} clustering attributes.")
    return data, clustering_frame
