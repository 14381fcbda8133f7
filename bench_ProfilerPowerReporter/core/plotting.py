# bench_ProfilerPowerReporter/core/plotting.py
from __future__ import annotations
from pathlib import Path
from typing import Sequence
import re
import matplotlib.pyplot as plt
import numpy as np

from .model import AggregateResult
from .quantity import PowerAmountUnit


def _sanitize(name: str) -> str:
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("_")
    return s[:120] if len(s) > 120 else s


def _thin_xy(x, y, max_points: int):
    """Light decimator: keep at most max_points evenly spaced points."""
    n = len(x)
    if n <= max_points or max_points <= 0:
        return x, y
    idx = np.linspace(0, n - 1, max_points).astype(int)
    return x[idx], y[idx]


def save_benchmark_power_plot(benchmark: str,
                              results: Sequence[AggregateResult],
                              out_dir: Path,
                              unit: PowerAmountUnit = PowerAmountUnit.JOULE) -> Path | None:
    """Bar chart of the average power per framework with population SD as error bars."""
    measured = [r for r in results if r.power_average is not None]
    if not measured:
        print(f"[INFO] {benchmark}: no power data; skipping power plot.")
        return None
    out_dir.mkdir(parents=True, exist_ok=True)

    labels = [r.framework for r in measured]
    means = [float(r.power_average.get_amount(unit)) for r in measured]
    errs = [float(r.power_std_dev.get_amount(unit)) if r.power_std_dev is not None else 0.0
            for r in measured]

    plt.figure(figsize=(max(6, 1.2 * len(labels) + 2), 5))
    plt.bar(labels, means, yerr=errs, capsize=4)
    plt.ylabel(f"Average total power [{unit.symbol}]")
    plt.title(f"Benchmark: {benchmark} — power per framework")
    plt.grid(True, axis="y", alpha=0.3)
    plt.tight_layout()
    out_path = out_dir / f"{_sanitize(benchmark) or 'benchmark'}_power.png"
    plt.savefig(out_path, dpi=160)
    plt.close()
    print(f"[OK] {benchmark}: {len(measured)} framework(s) → {out_path}")
    return out_path


def save_power_series_plot(result: AggregateResult,
                           out_dir: Path,
                           unit: PowerAmountUnit = PowerAmountUnit.MICROWATT_HOUR,
                           legend_ncol: int = 4,
                           max_points: int = 5000) -> Path | None:
    """Per-sample power vs profiler time, one line per iteration."""
    prepared = []
    for idx, pf in enumerate(result.files):
        if pf.power is None or not len(pf.power.series):
            continue
        series = pf.power.series.convert(unit)
        x = np.asarray([float(s.time) for s in series], dtype=float)
        y = np.asarray([float(s.power_amount) for s in series], dtype=float)
        prepared.append((*_thin_xy(x, y, max_points), f"#{idx} {pf.name}"))

    title = f"{result.benchmark} / {result.framework}"
    if not prepared:
        print(f"[INFO] {title}: no power samples; skipping series plot.")
        return None
    out_dir.mkdir(parents=True, exist_ok=True)

    plt.figure(figsize=(11, 6))
    for x, y, label in prepared:
        plt.plot(x, y, label=label)
    plt.xlabel("Profiler time [ms]")
    plt.ylabel(f"Power per sample [{unit.symbol}]")
    plt.title(f"{title} — power samples")
    plt.grid(True, alpha=0.3)
    plt.legend(
        fontsize=8,
        ncol=legend_ncol,
        loc="upper center",
        bbox_to_anchor=(0.5, -0.15),
        frameon=False,
    )
    plt.tight_layout(rect=[0, 0.18, 1, 1])
    out_path = out_dir / f"{_sanitize(result.benchmark)}-{_sanitize(result.framework)}_series.png"
    plt.savefig(out_path, dpi=160)
    plt.close()
    print(f"[OK] {title}: {len(prepared)} series → {out_path}")
    return out_path
