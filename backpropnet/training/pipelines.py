"""Pipeline assembly: dataset -> network -> training -> evaluation -> artifacts."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.network import Network
from ..core.types import RunResult, Sample, TrainingReport
from ..data import registry
from ..data.utils import holdout_split, stack
from ..reporting.artifacts import write_manifest
from ..reporting.comparison import as_records, compare, format_rows
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .metrics import DEFAULT_METRICS, compute_metrics

_PRESETS: Dict[str, Mapping[str, object]] = {
    "km_to_miles": {
        "data": {
            "name": "km_to_miles",
            "options": {"count": 10000, "seed": 42},
        },
        "model": {
            "hidden": [15, 10],
            "hidden_activation": "linear",
            "output_activation": "linear",
        },
        "train": {
            "lr": 0.15,
            "seed": 42,
            "epochs": 2000,
            "target_error": 0.0003,
            "report_interval": 100,
            "train_fraction": 0.8,
            "run_dir": "runs/km-to-miles",
            "enable_plots": False,
        },
    },
    "sin_exp": {
        "data": {
            "name": "sin_exp",
            "options": {"count": 10000, "seed": 42, "noise": False},
        },
        "model": {
            "hidden": [15, 10],
            "hidden_activation": "tanh",
            "output_activation": "linear",
        },
        "train": {
            "lr": 0.15,
            "seed": 42,
            "epochs": 2000,
            "target_error": 0.0003,
            "report_interval": 100,
            "train_fraction": 0.8,
            "run_dir": "runs/sin-exp",
            "enable_plots": False,
        },
    },
    "smoke": {
        "data": {
            "name": "sin_exp",
            "options": {"count": 100, "seed": 0},
        },
        "model": {
            "hidden": [6],
            "hidden_activation": "tanh",
            "output_activation": "linear",
        },
        "train": {
            "lr": 0.05,
            "seed": 7,
            "epochs": 5,
            "target_error": 0.0,
            "report_interval": 1,
            "train_fraction": 0.8,
            "run_dir": "runs/smoke",
            "enable_plots": False,
        },
    },
}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(dict(_PRESETS[name]))
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}") from exc


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    data_cfg = dict(config["data"])
    model_cfg = dict(config.get("model", {}))
    train_cfg = dict(config.get("train", {}))

    dataset = registry.get_dataset(str(data_cfg["name"]), **data_cfg.get("options", {}))
    codec = dataset.codec

    train_fraction = float(train_cfg.get("train_fraction", 0.8))
    train_samples, val_samples = holdout_split(dataset.samples, train_fraction=train_fraction)

    topology = _build_topology(model_cfg, dataset.d_in, dataset.d_out)
    hidden_activation = str(model_cfg.get("hidden_activation", codec.hidden_activation))
    output_activation = str(model_cfg.get("output_activation", codec.output_activation))
    seed = train_cfg.get("seed")
    seed = int(seed) if seed is not None else None
    lr = float(train_cfg.get("lr", 0.15))
    epochs = int(train_cfg.get("epochs", 2000))
    target_error = float(train_cfg.get("target_error", 0.0003))
    report_interval = int(train_cfg.get("report_interval", 100))

    network = Network(
        topology,
        learning_rate=lr,
        seed=seed,
        hidden_activation=hidden_activation,
        output_activation=output_activation,
    )

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        dataset_name=dataset.name,
        topology=topology,
        hidden_activation=hidden_activation,
        output_activation=output_activation,
        lr=lr,
        train_count=len(train_samples),
        val_count=len(val_samples),
        param_count=network.parameter_count(),
    )
    print("Start weights:")
    print(network.format_weights())
    print()
    print(f"Learning on {len(train_samples)} examples...")

    train_jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=seed)
    train_csv = CsvSink(run_dir / "metrics.csv", split="train")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    report = network.train_batch(
        train_samples,
        max_epochs=epochs,
        target_error=target_error,
        report_interval=report_interval,
        callbacks=[train_jsonl, train_csv, plots],
    )

    print(f"Final error: {report.final_error:.6f}")
    if report.converged:
        print(f"Epochs to converge: {report.epochs_to_converge}")
    print("Final weights:")
    print(network.format_weights())

    val_metrics = _evaluate(network, val_samples)
    (run_dir / "metrics_val.json").write_text(json.dumps(val_metrics, sort_keys=True, indent=2))
    if val_metrics:
        formatted = ", ".join(f"{name}={value:.6f}" for name, value in sorted(val_metrics.items()))
        print(f"Validation ({len(val_samples)} samples): {formatted}")

    print("=== Testing ===")
    rows = compare(network, codec)
    print(format_rows(rows))
    (run_dir / "comparison.json").write_text(json.dumps(as_records(rows), indent=2))

    _print_report(report)
    plots.close()

    safe_config = _safe_config(config, topology)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=dataset.provenance,
        model={
            "topology": list(topology),
            "hidden_activation": network.hidden_activation.value,
            "output_activation": network.output_activation.value,
            "parameters": network.parameter_count(),
        },
    )
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(report, run_dir / "summary.json", tail=summary_tail)
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))
    network.save(run_dir / "last.ckpt")

    return RunResult(
        epochs=report.epochs,
        final_error=report.final_error,
        epochs_to_converge=report.epochs_to_converge,
        metrics_path=str(train_jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
    )


def _build_topology(model_cfg: Mapping[str, object], d_in: int, d_out: int) -> List[int]:
    if "topology" in model_cfg:
        topology = [int(width) for width in model_cfg["topology"]]  # type: ignore[union-attr]
        if topology and topology[0] != d_in:
            raise ValueError(f"Configured input width {topology[0]} but dataset has {d_in}")
        if topology and topology[-1] != d_out:
            raise ValueError(f"Configured output width {topology[-1]} but dataset has {d_out}")
        return topology
    hidden = [int(width) for width in model_cfg.get("hidden", [])]  # type: ignore[union-attr]
    return [d_in, *hidden, d_out]


def _evaluate(network: Network, samples: Sequence[Sample]) -> Mapping[str, float]:
    if not samples:
        return {}
    inputs, targets = stack(samples)
    predictions = np.stack([network.infer(row) for row in inputs])
    return compute_metrics(DEFAULT_METRICS, predictions, targets)


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _safe_config(config: Mapping[str, object], topology: Sequence[int]) -> Mapping[str, object]:
    copied = json.loads(json.dumps(config))
    copied.setdefault("model", {})["topology"] = list(topology)
    return copied


def _print_startup_summary(
    *,
    dataset_name: str,
    topology: Sequence[int],
    hidden_activation: str,
    output_activation: str,
    lr: float,
    train_count: int,
    val_count: int,
    param_count: int,
) -> None:
    print("=== backpropnet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Topology      : {list(topology)}")
    print(f"Hidden        : {hidden_activation}")
    print(f"Output        : {output_activation}")
    print(f"Learning rate : {lr}")
    print(f"Samples       : {train_count} train / {val_count} validation")
    print(f"Parameters    : {param_count}")
    print("=======================")


def _print_report(report: TrainingReport) -> None:
    print("Learning statistics:")
    print(f"Epochs: {report.epochs}")
    print(f"Start error: {report.initial_error:.6f}")
    print(f"Final error: {report.final_error:.6f}")
    print(f"Improvement: {report.improvement:.6f}")


__all__ = ["run_pipeline", "load_preset", "presets"]
