# -*- coding: utf-8 -*-
"""
Defaults for the clustering run and the ClusterConfig passed to run_pipeline().
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .errors import ConfigError

RANDOM_STATE = 42

# -------------------------
# Defaults (tweak if needed)
# -------------------------
INPUT_PATH = "ITA_AUT_Oct_2024.xlsx"
OUTDIR = "outputs"

CLUSTERING_COLUMNS = (
    "Rural_area",
    "P2_second_third_place",
    "P2_fourth_place",
    "Moderate_hybridity",
    "Low_hybridity",
)
COUNTRY_COLUMNS = ("Italy", "Austria")
CLUSTER_COL = "Cluster"

NUM_CLUSTERS = 4
LINKAGE_METHODS = ("ward",)
METRICS = ("gower",)

# Cluster colours in label order; extra clusters fall back to tab10
PALETTE = ("#E41A1C", "#377EB8", "#4DAF4A", "grey")
DPI = 150

# Analyst-written descriptions for the Oct 2024 ITA/AUT sample with k=4.
# Labels are arbitrary: revisit whenever k or the input population changes.
INTERPRETATIONS = {
    1: "Highly hybrid second-third place CWS mostly in towns and semi-dense areas with a few in rural areas",
    2: "High to moderately hybrid fourth place CWS in both towns and semi-dense areas and rural areas",
    3: "Moderately hybrid second-third place and non-third place CWS mostly in towns and semi-dense areas with a few in rural areas",
    4: "Low-hybrid non-third place CWS mostly in towns and semi-dense areas with a few in rural areas",
}


@dataclass(frozen=True)
class ClusterConfig:
    """Everything a single run needs; no reliance on the working directory."""

    input_path: str = INPUT_PATH
    output_dir: str = OUTDIR
    clustering_columns: Tuple[str, ...] = CLUSTERING_COLUMNS
    country_columns: Tuple[str, ...] = COUNTRY_COLUMNS
    num_clusters: int = NUM_CLUSTERS
    linkage: str = "ward"
    metric: str = "gower"
    interpretations: Dict[int, str] = field(default_factory=lambda: dict(INTERPRETATIONS))
    random_state: int = RANDOM_STATE
    make_plots: bool = True
    palette: Optional[Tuple[str, ...]] = PALETTE

    def __post_init__(self):
        if self.linkage not in LINKAGE_METHODS:
            raise ConfigError(f"Unsupported linkage '{self.linkage}' (expected one of {LINKAGE_METHODS}).")
        if self.metric not in METRICS:
            raise ConfigError(f"Unsupported metric '{self.metric}' (expected one of {METRICS}).")
        if not self.clustering_columns:
            raise ConfigError("At least one clustering column is required.")
        if len(set(self.clustering_columns)) != len(self.clustering_columns):
            raise ConfigError("Clustering columns must be unique.")
        if isinstance(self.num_clusters, bool) or not isinstance(self.num_clusters, int):
            raise ConfigError(f"num_clusters must be an integer, got {self.num_clusters!r}.")
