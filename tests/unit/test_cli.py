import json

import numpy as np
import pandas as pd
import pytest

from curvecompress.cli import main


@pytest.fixture
def sine_csv(tmp_path):
    t = np.linspace(0.0, 1.0, 80)
    path = tmp_path / "series.csv"
    pd.DataFrame({"ds": t, "y": np.sin(2 * np.pi * t)}).to_csv(path, index=False)
    return path


def test_cli_compress(sine_csv, capsys):
    code = main(["--config", "missing.yaml", "compress", str(sine_csv), "--tolerance", "0.05", "--segments"])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["original_count"] == 80
    assert len(output["segments"]) == output["compressed_count"]


def test_cli_compress_fixed(sine_csv, capsys):
    code = main([
        "--config", "missing.yaml",
        "compress", str(sine_csv),
        "--method", "rdp_linear",
        "--mode", "fixed_control_points",
        "--points", "5",
    ])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["compressed_count"] == 4


def test_cli_estimate(sine_csv, capsys):
    code = main(["--config", "missing.yaml", "estimate", str(sine_csv), "--max-points", "20"])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert len(output) == 7
    assert output["ErrorBound"]["method"] == "Error Bound"


def test_cli_rejects_bad_tolerance(sine_csv):
    assert main(["--config", "missing.yaml", "compress", str(sine_csv), "--tolerance", "3"]) == 2


def test_cli_missing_column(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame({"time": [0, 1], "y": [1, 2]}).to_csv(path, index=False)
    assert main(["--config", "missing.yaml", "compress", str(path)]) == 2


def test_cli_estimate_rejects_explicit_zero(sine_csv):
    assert main(["--config", "missing.yaml", "estimate", str(sine_csv), "--min-points", "0"]) == 2
