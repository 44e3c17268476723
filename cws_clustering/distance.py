# -*- coding: utf-8 -*-
"""
Gower dissimilarity for purely categorical (binary) attributes.

Memory is O(N^2): the full matrix is kept, which is fine for survey-sized
inputs but is the scaling limit of the pipeline.
"""
import gower
import numpy as np
import pandas as pd
from scipy.spatial.distance import squareform

from .errors import DataValidationError, DimensionError


def gower_dissimilarity(frame: pd.DataFrame) -> np.ndarray:
    """
    Mean of per-attribute mismatches (0 equal, 1 different), unweighted.
    Returns a symmetric float64 N x N matrix with zero diagonal.
    """
    n_rows, n_cols = frame.shape
    if n_rows < 2:
        raise DimensionError(f"Need at least 2 records to compute dissimilarities, got {n_rows}.")
    if n_cols == 0:
        raise DimensionError("No attributes to compute dissimilarities on.")
    if frame.isna().any().any():
        cols = frame.columns[frame.isna().any()].tolist()
        raise DataValidationError(f"Missing values in {cols}; Gower dissimilarity needs complete records.", stage="distance")

    # gower treats object columns as nominal when cat_features is given
    values = frame.astype(str).to_numpy(dtype=object)
    D = gower.gower_matrix(values, cat_features=[True] * n_cols).astype("float64")

    # gower computes in float32; drop the noise so equal mismatch counts tie exactly
    D = np.round(D, 6)
    D = (D + D.T) / 2.0
    np.fill_diagonal(D, 0.0)
    return np.clip(D, 0.0, 1.0)


def condensed(D: np.ndarray) -> np.ndarray:
    return squareform(D, checks=False)
