# -*- coding: utf-8 -*-
"""
Per-cluster summaries: share of positive cases for each clustering attribute,
country breakdown, and the analyst's interpretation of each cluster.
"""
import warnings
from typing import Dict, Sequence

import pandas as pd

from .config import CLUSTER_COL


def format_percentage(value: float) -> str:
    # 100.0 -> "100 %", 66.7 -> "66.7 %"
    return f"{value:g} %"


def cluster_percentages(data: pd.DataFrame, columns: Sequence[str], cluster_col: str = CLUSTER_COL) -> pd.DataFrame:
    """Numeric percentage of records with value 1, one row per cluster, rounded to 1 decimal."""
    rows = []
    for cid, g in data.groupby(cluster_col, sort=True):
        rec = {cluster_col: int(cid), "Number_of_Cases": int(len(g))}
        for col in columns:
            rec[col] = round(100.0 * float((g[col] == 1).mean()), 1)
        rows.append(rec)
    return pd.DataFrame(rows, columns=[cluster_col, "Number_of_Cases"] + list(columns))


def summarize_clusters(data: pd.DataFrame, columns: Sequence[str], cluster_col: str = CLUSTER_COL) -> pd.DataFrame:
    summary = cluster_percentages(data, columns, cluster_col)
    for col in columns:
        summary[col] = summary[col].map(format_percentage)
    return summary


def country_counts(data: pd.DataFrame, country_columns: Sequence[str], cluster_col: str = CLUSTER_COL) -> pd.DataFrame:
    """Records flagged 1 for each country indicator, per cluster."""
    counts = (
        data.groupby(cluster_col, sort=True)[list(country_columns)]
        .agg(lambda s: int((s == 1).sum()))
        .reset_index()
    )
    counts[cluster_col] = counts[cluster_col].astype(int)
    return counts


def build_summary(
    data: pd.DataFrame,
    columns: Sequence[str],
    country_columns: Sequence[str] = (),
    cluster_col: str = CLUSTER_COL,
) -> pd.DataFrame:
    summary = summarize_clusters(data, columns, cluster_col)
    if country_columns:
        summary = summary.merge(country_counts(data, country_columns, cluster_col), on=cluster_col, how="left")
    return summary


def interpretation_table(interpretations: Dict[int, str], labels: Sequence[int], cluster_col: str = CLUSTER_COL) -> pd.DataFrame:
    """
    Attach the analyst-written description to every realised cluster label.

    Cluster numbers carry no meaning of their own, so the lookup has to be
    rewritten by hand whenever k or the input population changes.
    """
    realised = sorted({int(l) for l in labels})
    missing = [lab for lab in realised if lab not in interpretations]
    if missing:
        warnings.warn(f"No interpretation provided for cluster(s) {missing}.")
    return pd.DataFrame({
        cluster_col: realised,
        "Description": [interpretations.get(lab, "") for lab in realised],
    })
