# bench_ProfilerPowerReporter/main.py
from __future__ import annotations
from pathlib import Path
import argparse
import logging
import sys
import yaml

from .core.errors import ReporterError
from .core.grouping import build_workloads, group_files
from .core.pipeline import run_pipeline
from .core.scheduler import DEFAULT_START_METHOD, run_workloads
from .utils.detect import discover_inputs

DEFAULT_CONFIG = Path(__file__).resolve().parent / "config.yaml"


def load_config(cfg_path: Path) -> dict:
    with cfg_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="profiler-power-report",
        description="Process power and bandwidth measurements from Firefox Profiler captures.",
    )
    p.add_argument("path", nargs="?", default=None,
                   help="profiler .json file or folder of captures named <framework>_<benchmark>_<iteration>.json")
    p.add_argument("-t", "--threads", type=int, default=None, help="number of worker processes")
    p.add_argument("--export-raw", "--exportRaw", dest="export_raw", action="store_true", default=None,
                   help="also export per-sample power and per-request bandwidth")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG, help="YAML configuration file")
    p.add_argument("--out", type=Path, default=None, help="output root (default: <input dir>/results)")
    p.add_argument("--format", choices=("csv", "mat", "both"), default=None, help="report format")
    p.add_argument("--plots", action="store_true", default=None, help="write power plots")
    p.add_argument("-q", "--quiet", action="store_true", help="only print warnings and errors")
    return p


def apply_overrides(cfg: dict, args: argparse.Namespace) -> dict:
    """CLI flags win over the YAML configuration."""
    cfg = dict(cfg or {})
    for section in ("input", "output", "scheduler", "reports", "plots", "logging"):
        cfg[section] = dict(cfg.get(section) or {})
    if args.path is not None:
        cfg["input"]["path"] = args.path
    if args.threads is not None:
        cfg["scheduler"]["threads"] = args.threads
    if args.export_raw is not None:
        cfg["reports"]["export_raw"] = args.export_raw
    if args.format is not None:
        cfg["reports"]["format"] = args.format
    if args.plots is not None:
        cfg["plots"]["enabled"] = args.plots
    if args.out is not None:
        cfg["output"]["root"] = str(args.out)
    if args.quiet:
        cfg["logging"]["verbose"] = False
    return cfg


def resolve_out_root(cfg: dict, in_path: Path) -> Path:
    root = cfg["output"].get("root")
    if root:
        return Path(root).expanduser().resolve()
    base = in_path if in_path.is_dir() else in_path.parent
    return base / "results"


def _config_int(cfg: dict, section: str, key: str, default: int | None) -> int | None:
    value = cfg[section].get(key, default)
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise ReporterError(f"{section}.{key} must be an integer, got {value!r}") from None


def run(cfg: dict) -> int:
    verbose = bool(cfg["logging"].get("verbose", True))
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING,
                        format="[%(levelname)s] %(name)s: %(message)s")

    raw_path = cfg["input"].get("path")
    if not raw_path:
        raise ReporterError("no input path given (argument or input.path in the config)")
    in_path = Path(raw_path).expanduser().resolve()
    recurse = bool(cfg["input"].get("recurse", False))
    threads = _config_int(cfg, "scheduler", "threads", 1)
    if threads < 1:
        raise ReporterError(f"thread count must be at least 1, got {threads}")
    file_threads = _config_int(cfg, "scheduler", "file_threads", None)
    start_method = str(cfg["scheduler"].get("start_method", DEFAULT_START_METHOD))

    if verbose:
        print(f"[cfg] input={in_path} (recurse={recurse})")

    # ---------- discover + group ----------
    files = discover_inputs(in_path, recurse=recurse)
    groups = group_files(files)
    workloads = build_workloads(groups)
    if verbose:
        for benchmark, by_framework in groups.items():
            print(f"[grouping] benchmark {benchmark}")
            for framework, fw_files in by_framework.items():
                print(f"  [task] framework={framework} iterations={len(fw_files)}")

    # ---------- schedule ----------
    if verbose:
        print(f"[scheduler] starting {min(threads, len(workloads))} worker(s) for {len(workloads)} workload(s)")
    results = run_workloads(workloads, threads,
                            file_threads=file_threads or None,
                            start_method=start_method)

    # ---------- report ----------
    out_root = resolve_out_root(cfg, in_path)
    out_root.mkdir(parents=True, exist_ok=True)
    if verbose:
        print(f"[cfg] output={out_root}")
    run_pipeline(results, cfg, out_root)

    if verbose:
        print(f"[summary] processed {len(files)} capture(s) in {len(results)} workload(s)")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg_path = args.config
    cfg = load_config(cfg_path) if cfg_path.exists() else {}
    cfg = apply_overrides(cfg, args)
    try:
        return run(cfg)
    except ReporterError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
