# -*- coding: utf-8 -*-
"""
2D projection of the clusters for plotting.

The PCA runs on the standardised dissimilarity matrix itself, each row used as
a feature vector. This is a quick visual aid, not a distance-preserving
embedding such as classical MDS.
"""
import warnings
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.patches import Polygon
from scipy.spatial import ConvexHull, QhullError
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler

from .config import CLUSTER_COL, DPI, PALETTE, RANDOM_STATE

JITTER = 0.3
HULL_EXPAND = 0.03


# -------------------------
# PCA
# -------------------------
def pca_projection(D: np.ndarray, labels: np.ndarray, random_state: int = RANDOM_STATE) -> Tuple[pd.DataFrame, float]:
    """
    Returns (coords, explained) where coords has PC1, PC2 and Cluster in
    record order, and explained is the variance ratio kept by the 2 PCs.
    """
    if len(labels) != D.shape[0]:
        raise ValueError(f"{len(labels)} labels for a {D.shape[0]}x{D.shape[0]} matrix.")
    # sample sd (ddof=1), as R prcomp(scale.=TRUE); zero-variance columns stay 0
    n = D.shape[0]
    X = StandardScaler().fit_transform(D) * np.sqrt((n - 1) / n)
    pca = PCA(n_components=2, svd_solver="full", random_state=random_state)
    X2 = pca.fit_transform(X)
    explained = float(np.nansum(pca.explained_variance_ratio_))
    coords = pd.DataFrame({
        "PC1": X2[:, 0],
        "PC2": X2[:, 1],
        CLUSTER_COL: np.asarray(labels, dtype=int),
    })
    print(f"PCA (2D) explained variance ratio sum: {explained:.3f}")
    return coords, explained


# -------------------------
# Plot
# -------------------------
def cluster_colors(labels: Sequence[int], palette: Optional[Sequence[str]] = PALETTE) -> Dict[int, str]:
    uniq = sorted({int(l) for l in labels})
    fallback = sns.color_palette("tab10", n_colors=max(len(uniq), 1)).as_hex()
    palette = list(palette or [])
    return {lab: (palette[i] if i < len(palette) else fallback[i % len(fallback)]) for i, lab in enumerate(uniq)}


def hull_polygon(points: np.ndarray, expand: float = HULL_EXPAND) -> Optional[np.ndarray]:
    """Vertices of the (slightly expanded) convex hull, or None when there is no 2D hull."""
    if len(np.unique(points, axis=0)) < 3:
        return None
    try:
        hull = ConvexHull(points)
    except QhullError:
        # collinear points
        return None
    verts = points[hull.vertices]
    center = verts.mean(axis=0)
    return center + (verts - center) * (1.0 + expand)


def plot_clusters(
    coords: pd.DataFrame,
    outpath: str,
    palette: Optional[Sequence[str]] = PALETTE,
    random_state: int = RANDOM_STATE,
    explained: Optional[float] = None,
):
    colors = cluster_colors(coords[CLUSTER_COL], palette)
    rng = np.random.default_rng(random_state)
    jittered = coords.assign(
        PC1=coords["PC1"] + rng.uniform(-JITTER, JITTER, len(coords)),
        PC2=coords["PC2"] + rng.uniform(-JITTER, JITTER, len(coords)),
    )

    fig, ax = plt.subplots(figsize=(9, 7))
    for lab, g in coords.groupby(CLUSTER_COL):
        verts = hull_polygon(g[["PC1", "PC2"]].to_numpy(dtype=float))
        if verts is None:
            warnings.warn(f"Cluster {lab}: fewer than 3 distinct points, hull omitted.")
            continue
        ax.add_patch(Polygon(verts, closed=True, facecolor=colors[int(lab)], edgecolor=colors[int(lab)], alpha=0.2, linewidth=1))

    sns.scatterplot(
        data=jittered, x="PC1", y="PC2", hue=CLUSTER_COL, palette=colors,
        s=40, alpha=0.7, linewidth=0, ax=ax,
    )
    title = "PCA of Hierarchical Clustering (Gower Distance)"
    if explained is not None:
        title += f" - explained var={explained:.2f}"
    ax.set_title(title, fontsize=16)
    ax.set_xlabel("Principal Component 1", fontsize=14)
    ax.set_ylabel("Principal Component 2", fontsize=14)
    ax.legend(title=CLUSTER_COL, bbox_to_anchor=(1.02, 1), loc="upper left")
    sns.despine(ax=ax)
    fig.tight_layout()
    fig.savefig(outpath, dpi=DPI)
    plt.close(fig)
