"""End-to-end tests for run_pipeline() and the command-line entry point."""
import warnings
from datetime import date

import numpy as np
import pandas as pd
import pytest

from cws_clustering.config import ClusterConfig
from cws_clustering.errors import ConfigError
from cws_clustering.export import SHEET_NAMES
from cws_clustering.pipeline import main, print_session_info, run_pipeline

from conftest import EXPECTED_LABELS

RUN_DATE = date(2024, 10, 3)


@pytest.fixture
def config(example_xlsx, tmp_path):
    return ClusterConfig(input_path=str(example_xlsx), output_dir=str(tmp_path / "out"))


def test_full_run_exports_every_record_once(config):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        result = run_pipeline(config, run_date=RUN_DATE)

    assert result.data["Cluster"].tolist() == EXPECTED_LABELS
    assert pd.ExcelFile(result.export_path).sheet_names == list(SHEET_NAMES)

    full = pd.read_excel(result.export_path, sheet_name="Full_Data_with_Clusters")
    assert len(full) == 8
    assert full["Space_ID"].is_unique
    assert full["Cluster"].tolist() == EXPECTED_LABELS

    summary = pd.read_excel(result.export_path, sheet_name="Cluster_Summary")
    assert summary["Number_of_Cases"].sum() == 8
    assert summary.loc[0, "Rural_area"] == "100 %"

    coords = pd.read_excel(result.export_path, sheet_name="PCA_Coordinates")
    assert list(coords.columns) == ["PC1", "PC2", "Cluster"]


def test_plots_written_next_to_workbook(config, tmp_path):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        run_pipeline(config, run_date=RUN_DATE)
    out = tmp_path / "out"
    assert (out / "cluster_pca.png").exists()
    assert (out / "dendrogram.png").exists()


def test_rerun_gives_same_assignment(example_xlsx, tmp_path):
    cfg = ClusterConfig(input_path=str(example_xlsx), output_dir=str(tmp_path), make_plots=False)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        first = run_pipeline(cfg, export=False)
        second = run_pipeline(cfg, export=False)
    np.testing.assert_array_equal(first.clustering.labels, second.clustering.labels)
    assert first.export_path is None


def test_invalid_k_aborts_without_export(example_xlsx, tmp_path, capsys):
    code = main(["--input", str(example_xlsx), "--outdir", str(tmp_path / "out"), "--k", "9", "--no-plots"])

    assert code == 1
    assert "clusterer:" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_schema_error_names_stage(tmp_path, example_frame, capsys):
    path = tmp_path / "broken.xlsx"
    example_frame.drop(columns=["Italy"]).to_excel(path, index=False)

    code = main(["--input", str(path), "--outdir", str(tmp_path / "out")])

    err = capsys.readouterr().err
    assert code == 1
    assert "loader:" in err and "Italy" in err


def test_missing_input_reports_io(tmp_path, capsys):
    code = main(["--input", str(tmp_path / "missing.xlsx"), "--outdir", str(tmp_path)])
    assert code == 1
    assert "io:" in capsys.readouterr().err


def test_cli_success(example_xlsx, tmp_path, capsys):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        code = main(["--input", str(example_xlsx), "--outdir", str(tmp_path / "out"), "--no-plots"])

    out = capsys.readouterr().out
    assert code == 0
    assert "=== CLUSTER ANALYSIS RESULTS ===" in out
    assert "=== CLUSTER INTERPRETATIONS ===" in out
    assert len(list((tmp_path / "out").glob("cluster_results_*.xlsx"))) == 1


@pytest.mark.parametrize("kwargs", [{"linkage": "average"}, {"metric": "euclidean"}, {"clustering_columns": ()}])
def test_config_rejects_unknown_options(kwargs):
    with pytest.raises(ConfigError):
        ClusterConfig(**kwargs)


def test_session_info_lists_libraries(capsys):
    print_session_info()
    out = capsys.readouterr().out
    assert "=== SESSION INFORMATION ===" in out
    assert "scipy" in out and "pandas" in out


def test_failed_export_leaves_no_plots(config, tmp_path, monkeypatch):
    def failing_export(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("cws_clustering.pipeline.export_results", failing_export)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        with pytest.raises(OSError, match="disk full"):
            run_pipeline(config, run_date=RUN_DATE)

    assert list((tmp_path / "out").iterdir()) == []
