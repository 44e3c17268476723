#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
End-to-end Gower / Ward clustering of co-working spaces.

Steps:
  1. load the spreadsheet and validate the binary attributes
  2. Gower dissimilarity over the clustering attributes
  3. Ward (ward.D2) hierarchical clustering, cut into k clusters
  4. PCA of the dissimilarity matrix + cluster plot, dendrogram
  5. per-cluster summaries, country counts, analyst interpretations
  6. export to outdir/cluster_results_<YYYYMMDD>.xlsx

Run:
  cws-clustering --input ITA_AUT_Oct_2024.xlsx --outdir outputs
"""
import argparse
import os
import platform
import sys
from dataclasses import dataclass
from datetime import date
from importlib import metadata
from typing import Optional

import numpy as np
import pandas as pd

from . import __version__
from .config import (
    CLUSTER_COL,
    CLUSTERING_COLUMNS,
    COUNTRY_COLUMNS,
    INPUT_PATH,
    NUM_CLUSTERS,
    OUTDIR,
    RANDOM_STATE,
    ClusterConfig,
)
from .distance import gower_dissimilarity
from .errors import ClusterPipelineError
from .export import export_results
from .hierarchical import ClusteringResult, cluster_records, plot_dendrogram
from .loading import load_dataset
from .projection import pca_projection, plot_clusters
from .summary import build_summary, interpretation_table

SESSION_PACKAGES = ("numpy", "pandas", "scipy", "scikit-learn", "matplotlib", "seaborn", "gower", "openpyxl")


@dataclass
class PipelineResult:
    data: pd.DataFrame
    dissimilarity: np.ndarray
    clustering: ClusteringResult
    coords: pd.DataFrame
    explained_variance: float
    summary: pd.DataFrame
    interpretations: pd.DataFrame
    export_path: Optional[str] = None


# -------------------------
# Pipeline
# -------------------------
def run_pipeline(config: ClusterConfig, run_date: Optional[date] = None, export: bool = True) -> PipelineResult:
    data, clustering_frame = load_dataset(config.input_path, config.clustering_columns, config.country_columns)

    print("Computing Gower dissimilarity matrix ...")
    D = gower_dissimilarity(clustering_frame)

    clustering = cluster_records(D, config.num_clusters, linkage_method=config.linkage)
    data = data.assign(**{CLUSTER_COL: clustering.labels})

    coords, explained = pca_projection(D, clustering.labels, random_state=config.random_state)

    print("Summarizing clusters ...")
    summary = build_summary(data, config.clustering_columns, config.country_columns)
    interpretations = interpretation_table(config.interpretations, clustering.labels)

    result = PipelineResult(
        data=data,
        dissimilarity=D,
        clustering=clustering,
        coords=coords,
        explained_variance=explained,
        summary=summary,
        interpretations=interpretations,
    )

    # plots are rendered to temp names and only moved into place once the export succeeded
    staged = {}
    try:
        if config.make_plots:
            os.makedirs(config.output_dir, exist_ok=True)
            staged["cluster_pca.png"] = staging_path(config.output_dir, "cluster_pca.png")
            plot_clusters(coords, staged["cluster_pca.png"], palette=config.palette,
                          random_state=config.random_state, explained=explained)
            staged["dendrogram.png"] = staging_path(config.output_dir, "dendrogram.png")
            plot_dendrogram(clustering.linkage_matrix, config.num_clusters, staged["dendrogram.png"])

        if export:
            result.export_path = export_results({
                "Cluster_Summary": summary,
                "Cluster_Interpretations": interpretations,
                "Full_Data_with_Clusters": data,
                "PCA_Coordinates": coords,
            }, config.output_dir, run_date)
            print(f"Results exported to: {result.export_path}")
    except BaseException:
        for tmp in staged.values():
            if os.path.exists(tmp):
                os.remove(tmp)
        raise

    for name, tmp in staged.items():
        final = os.path.join(config.output_dir, name)
        os.replace(tmp, final)
        print(f"Plot saved to {final}")
    return result


def staging_path(outdir: str, name: str) -> str:
    return os.path.join(outdir, f".{os.getpid()}.{name}")


# -------------------------
# Console report
# -------------------------
def package_version(name: str) -> str:
    try:
        return metadata.version(name)
    except metadata.PackageNotFoundError:
        return "not installed"


def print_report(result: PipelineResult):
    print("\n=== CLUSTER ANALYSIS RESULTS ===")
    print(result.summary.to_string(index=False))
    if result.clustering.silhouette is not None:
        print(f"Silhouette (Gower, k={result.clustering.num_clusters}): {result.clustering.silhouette:.3f}")

    print("\n=== CLUSTER INTERPRETATIONS ===")
    with pd.option_context("display.max_colwidth", None):
        print(result.interpretations.to_string(index=False))


def print_session_info():
    print("\n=== SESSION INFORMATION ===")
    print(f"cws_clustering {__version__}")
    print(f"Python {platform.python_version()} ({platform.python_implementation()})")
    print(f"Platform: {platform.platform()}")
    for name in SESSION_PACKAGES:
        print(f"  {name}: {package_version(name)}")


# -------------------------
# Args
# -------------------------
def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Gower + Ward hierarchical clustering of binary co-working space attributes.")
    p.add_argument("--input", default=INPUT_PATH, help="Path to the input spreadsheet (.xlsx or .csv).")
    p.add_argument("--outdir", default=OUTDIR, help="Directory for the workbook and plots.")
    p.add_argument("--k", type=int, default=NUM_CLUSTERS, help="Number of clusters to cut the dendrogram into.")
    p.add_argument("--columns", nargs="+", default=list(CLUSTERING_COLUMNS), help="Binary clustering attributes.")
    p.add_argument("--countries", nargs="*", default=list(COUNTRY_COLUMNS), help="Country indicator columns.")
    p.add_argument("--seed", type=int, default=RANDOM_STATE, help="Seed for the PCA and plot jitter.")
    p.add_argument("--no-plots", action="store_true", help="Skip the PCA and dendrogram plots.")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        config = ClusterConfig(
            input_path=args.input,
            output_dir=args.outdir,
            clustering_columns=tuple(args.columns),
            country_columns=tuple(args.countries),
            num_clusters=args.k,
            random_state=args.seed,
            make_plots=not args.no_plots,
        )
        result = run_pipeline(config)
    except ClusterPipelineError as e:
        print(f"[✗] {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"[✗] io: {e}", file=sys.stderr)
        return 1

    print_report(result)
    print_session_info()
    print("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
