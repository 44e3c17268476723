# -*- coding: utf-8 -*-
"""
Write the run's tables to one dated Excel workbook.

The workbook is written to a temporary file next to the target and renamed
into place, so a failed run never leaves a partial export behind.
"""
import os
import tempfile
from datetime import date
from typing import Dict, Optional

import pandas as pd

SHEET_NAMES = (
    "Cluster_Summary",
    "Cluster_Interpretations",
    "Full_Data_with_Clusters",
    "PCA_Coordinates",
)


def output_filename(run_date: Optional[date] = None) -> str:
    run_date = run_date or date.today()
    return f"cluster_results_{run_date.strftime('%Y%m%d')}.xlsx"


def export_results(sheets: Dict[str, pd.DataFrame], outdir: str, run_date: Optional[date] = None) -> str:
    missing = [name for name in SHEET_NAMES if name not in sheets]
    if missing:
        raise KeyError(f"Missing sheet(s) for export: {missing}")
    os.makedirs(outdir, exist_ok=True)
    out_path = os.path.join(outdir, output_filename(run_date))

    fd, tmp_path = tempfile.mkstemp(suffix=".xlsx", prefix=".cluster_results_", dir=outdir)
    os.close(fd)
    try:
        with pd.ExcelWriter(tmp_path, engine="openpyxl") as writer:
            for name in SHEET_NAMES:
                sheets[name].to_excel(writer, sheet_name=name, index=False)
        os.replace(tmp_path, out_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    return out_path
