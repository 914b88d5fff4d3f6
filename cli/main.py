"""Command line entry point for backpropnet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from backpropnet.core.types import RunResult
from backpropnet.training import pipelines


def _format_result(result: RunResult) -> str:
    payload = {
        "epochs": result.epochs,
        "final_error": result.final_error,
        "epochs_to_converge": result.epochs_to_converge,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if result.summary_path:
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="km_to_miles",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument("--lr", type=float, help="Learning rate")
    parser.add_argument("--epochs", type=int, help="Maximum number of epochs")
    parser.add_argument(
        "--target-error", type=float, help="Stop once an epoch's RMS error reaches this"
    )
    parser.add_argument("--seed", type=int, help="Seed used for weights and shuffling")
    parser.add_argument("--samples", type=int, help="Number of generated samples")
    parser.add_argument(
        "--hidden",
        type=int,
        nargs="*",
        help="Hidden layer widths, e.g. --hidden 15 10",
    )
    parser.add_argument(
        "--report-interval", type=int, help="Print progress every N epochs"
    )
    parser.add_argument("--run-dir", help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Enable plotting adapters"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        return yaml.safe_load(text) or {}
    if path.suffix == ".json":
        return json.loads(text or "{}")
    raise ValueError(f"Unsupported config file type: {path.suffix}")


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def resolve_config(args: argparse.Namespace) -> dict:
    config = pipelines.load_preset(args.preset)
    config = json.loads(json.dumps(config))

    if args.config:
        config = _merge(config, _load_override(args.config))

    train_cfg = config.setdefault("train", {})
    if args.lr is not None:
        if args.lr > 0:
            train_cfg["lr"] = float(args.lr)
        else:
            print(f"Error, learning rate: {train_cfg.get('lr')}")
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.target_error is not None:
        train_cfg["target_error"] = float(args.target_error)
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.report_interval is not None:
        train_cfg["report_interval"] = int(args.report_interval)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        train_cfg["enable_plots"] = True

    if args.samples is not None:
        config.setdefault("data", {}).setdefault("options", {})["count"] = int(args.samples)
    if args.hidden is not None:
        model_cfg = config.setdefault("model", {})
        model_cfg.pop("topology", None)
        model_cfg["hidden"] = [int(width) for width in args.hidden]
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = resolve_config(args)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
