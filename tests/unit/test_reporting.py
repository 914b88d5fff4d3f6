import csv
import json

import numpy as np
import pytest

from backpropnet.core.network import Network
from backpropnet.core.types import TrainingReport
from backpropnet.data import get_dataset
from backpropnet.reporting.comparison import compare, format_rows, grade
from backpropnet.reporting.metrics import CsvSink, JsonlSink
from backpropnet.reporting.plots import PlotAdapter
from backpropnet.reporting.summary import compute_auc, write_summary
from backpropnet.training.metrics import compute_metrics


def test_grade_thresholds():
    assert grade(0.5) == "Excellent"
    assert grade(1.0) == "Good"
    assert grade(7.0) == "50/50"
    assert grade(10.0) == "Can be better"


def test_exact_network_grades_excellent():
    codec = get_dataset("km_to_miles", count=10).codec
    network = Network([1, 1], 0.1, output_activation="linear")
    network.load_state_dict({"layer0.weights": np.array([[1.0]]), "layer0.bias": np.array([0.0])})
    rows = compare(network, codec)
    assert len(rows) == len(codec.probe_inputs)
    assert all(row.status == "Excellent" for row in rows)
    assert rows[0].prediction == pytest.approx(0.1 * 0.621371)
    assert format_rows(rows[:1]).startswith("0.10 -> 0.062137 (wanted: 0.062137, error: 0.00%)")


def test_zero_reference_reports_zero_percent():
    codec = get_dataset("sin_exp", count=10).codec
    network = Network([1, 1], 0.1)
    rows = compare(network, codec, inputs=[0.0])
    assert rows[0].actual == 0.0
    assert rows[0].error_percent == 0.0


def test_sinks_write_one_record_per_epoch(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl", seed=3, sha="abc")
    sink = CsvSink(tmp_path / "m.csv")
    for epoch, rms in enumerate([0.5, 0.25], start=1):
        jsonl.on_epoch(epoch, {"rms": rms})
        sink(epoch, {"rms": rms})
    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert records == [
        {"epoch": 1, "split": "train", "seed": 3, "sha": "abc", "rms": 0.5},
        {"epoch": 2, "split": "train", "seed": 3, "sha": "abc", "rms": 0.25},
    ]
    with (tmp_path / "m.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert [row["rms"] for row in rows] == ["0.5", "0.25"]


def test_summary_is_deterministic(tmp_path):
    report = TrainingReport(error_history=(0.4, 0.2, 0.1), final_error=0.1, epochs_to_converge=3)
    a = write_summary(report, tmp_path / "a.json", tail=2)
    b = write_summary(report, tmp_path / "b.json", tail=2)
    assert (tmp_path / "a.json").read_bytes() == (tmp_path / "b.json").read_bytes()
    summary = json.loads(open(a).read())
    assert summary["epochs"] == 3
    assert summary["epochs_to_converge"] == 3
    assert summary["rms"]["improvement"] == pytest.approx(0.3)
    assert summary["rms"]["tail_auc"] == pytest.approx(0.15)
    assert b.endswith("b.json")
    assert compute_auc([]) == 0.0


def test_regression_metrics():
    preds = np.array([[1.0], [2.0], [3.0]])
    targs = np.array([[1.0], [2.0], [4.0]])
    metrics = compute_metrics(["mae", "rmse", "r2", "max_abs_error"], preds, targs)
    assert metrics["mae"] == pytest.approx(1 / 3)
    assert metrics["rmse"] == pytest.approx(np.sqrt(1 / 3))
    assert metrics["max_abs_error"] == 1.0
    assert metrics["r2"] < 1.0
    with pytest.raises(KeyError):
        compute_metrics(["accuracy"], preds, targs)


def test_plot_adapter_headless(tmp_path):
    pytest.importorskip("matplotlib")
    adapter = PlotAdapter(tmp_path, enable_plots=True)
    adapter.on_epoch(1, {"rms": 1.0})
    adapter.on_epoch(2, {"rms": 0.5})
    path = adapter.close()
    assert path is not None and path.exists()


def test_plot_adapter_disabled_is_noop(tmp_path):
    adapter = PlotAdapter(tmp_path / "off", enable_plots=False)
    adapter(1, {"rms": 1.0})
    assert adapter.close() is None
    assert not (tmp_path / "off").exists()
