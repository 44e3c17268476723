# -*- coding: utf-8 -*-
"""
Ward hierarchical clustering on a precomputed dissimilarity matrix.

SciPy's "ward" method applied to a condensed dissimilarity vector uses the
Lance-Williams update on squared dissimilarities, i.e. the ward.D2 variant.
"""
import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from scipy.cluster.hierarchy import cut_tree, dendrogram, is_monotonic, linkage
from scipy.spatial.distance import is_valid_dm
from sklearn.metrics import silhouette_score

from .config import DPI
from .distance import condensed
from .errors import ConfigError, ConvergenceError, DimensionError


@dataclass
class ClusteringResult:
    linkage_matrix: np.ndarray
    labels: np.ndarray
    num_clusters: int
    silhouette: Optional[float] = None

    @property
    def merge_heights(self) -> np.ndarray:
        return self.linkage_matrix[:, 2]

    def sizes(self) -> dict:
        values, counts = np.unique(self.labels, return_counts=True)
        return {int(v): int(c) for v, c in zip(values, counts)}


# -------------------------
# Linkage
# -------------------------
def ward_linkage(D: np.ndarray) -> np.ndarray:
    if D.ndim != 2 or D.shape[0] != D.shape[1]:
        raise DimensionError(f"Dissimilarity matrix must be square, got shape {D.shape}.", stage="clusterer")
    if D.shape[0] < 2:
        raise DimensionError(f"Need at least 2 records to cluster, got {D.shape[0]}.", stage="clusterer")
    if not is_valid_dm(D, tol=1e-8, throw=False):
        raise DimensionError("Dissimilarity matrix must be symmetric with a zero diagonal.", stage="clusterer")
    Z = linkage(condensed(D), method="ward")
    if not is_monotonic(Z):
        warnings.warn("Ward merge heights are not monotonic; the dendrogram cut may be ambiguous.")
    return Z


def cut_dendrogram(Z: np.ndarray, k: int) -> np.ndarray:
    """
    Flat partition with exactly k groups: the last k-1 merges are undone, so
    tied heights are resolved by merge order. Labels run 1..k in order of
    first appearance.
    """
    n = Z.shape[0] + 1
    if k < 1 or k > n:
        raise ConvergenceError(f"Cannot cut {n} records into {k} clusters (need 1 <= k <= {n}).")
    raw = cut_tree(Z, n_clusters=k).ravel()

    _, first_idx = np.unique(raw, return_index=True)
    order = raw[np.sort(first_idx)]
    relabel = {old: new for new, old in enumerate(order, start=1)}
    labels = np.array([relabel[v] for v in raw], dtype=int)

    if len(order) != k:
        raise ConvergenceError(f"Dendrogram cut produced {len(order)} clusters instead of {k}.")
    return labels


def cut_silhouette(D: np.ndarray, labels: np.ndarray) -> Optional[float]:
    n_labels = len(np.unique(labels))
    if n_labels < 2 or n_labels >= len(labels):
        warnings.warn(f"Silhouette undefined for {n_labels} clusters over {len(labels)} records.")
        return None
    return float(silhouette_score(D, labels, metric="precomputed"))


def cluster_records(D: np.ndarray, k: int, linkage_method: str = "ward") -> ClusteringResult:
    if linkage_method != "ward":
        raise ConfigError(f"Unsupported linkage '{linkage_method}'.", stage="clusterer")
    print(f"Running hierarchical clustering (linkage=ward.D2, k={k}) ...")
    Z = ward_linkage(D)
    labels = cut_dendrogram(Z, k)
    result = ClusteringResult(linkage_matrix=Z, labels=labels, num_clusters=k)
    result.silhouette = cut_silhouette(D, labels)
    print(f"Cluster sizes: {result.sizes()}")
    return result


# -------------------------
# Dendrogram plot
# -------------------------
def cut_height(Z: np.ndarray, k: int) -> Optional[float]:
    n = Z.shape[0] + 1
    if k <= 1 or k > n:
        return None
    upper = Z[n - k, 2]
    lower = Z[n - k - 1, 2] if n - k - 1 >= 0 else 0.0
    return float((lower + upper) / 2.0)


def plot_dendrogram(Z: np.ndarray, k: int, outpath: str, truncate_p: int = 50):
    n = Z.shape[0] + 1
    threshold = cut_height(Z, k)
    plt.figure(figsize=(14, 6))
    kwargs = dict(leaf_rotation=90., leaf_font_size=10., above_threshold_color="gray")
    if threshold is not None:
        kwargs["color_threshold"] = threshold
    if n > truncate_p:
        kwargs.update(truncate_mode="lastp", p=truncate_p, show_contracted=True)
    dendrogram(Z, **kwargs)
    if threshold is not None:
        plt.axhline(threshold, color="black", linestyle="--", linewidth=1)
    plt.title(f"Dendrogram (ward.D2, Gower distance) - cut at k={k}")
    plt.xlabel("Records" if n <= truncate_p else "Merged clusters (truncated)")
    plt.ylabel("Height")
    plt.tight_layout()
    plt.savefig(outpath, dpi=DPI)
    plt.close()
