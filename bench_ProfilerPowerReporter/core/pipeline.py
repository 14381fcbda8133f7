# bench_ProfilerPowerReporter/core/pipeline.py
from __future__ import annotations
from collections import defaultdict
from decimal import Decimal
from pathlib import Path
import logging

from .model import AggregateResult
from .plotting import save_benchmark_power_plot, save_power_series_plot
from .quantity import PowerAmountUnit
from .reports import (
    build_combined_table,
    build_iteration_table,
    build_raw_bandwidth_table,
    build_raw_power_table,
    build_summary_table,
    write_table,
)

_LOG = logging.getLogger(__name__)

PROCESSED_DIR = "processed-results"
SUMMED_DIR = "summed-results"
COMBINED_DIR = "combined-results"
RAW_DIR = "raw-results"
PLOTS_DIR = "plots"


def summary_line(result: AggregateResult) -> str:
    """Console line: power in μWh (2 decimals), bandwidth average in KB."""
    unit = PowerAmountUnit.MICROWATT_HOUR
    avg = result.power_average.convert(unit).to_string(2) if result.power_average is not None else "N/A"
    sd = result.power_std_dev.convert(unit).to_string(2) if result.power_std_dev is not None else "N/A"
    bw = f"{result.bandwidth_average / Decimal(1000)} KB" if result.bandwidth_average is not None else "N/A"
    bw_sd = result.bandwidth_std_dev if result.bandwidth_std_dev is not None else "N/A"
    return (f"{result.benchmark} - {result.framework} - Power average: {avg} "
            f"Standard deviation: {sd} - Bandwidth: {bw} Standard deviation: {bw_sd}")


def run_pipeline(results: list[AggregateResult], cfg: dict, out_root: Path) -> None:
    reports_cfg = cfg.get("reports", {}) or {}
    fmt = str(reports_cfg.get("format", "csv")).lower()
    mat_var = str(reports_cfg.get("mat_variable", "report"))
    unit = PowerAmountUnit(str(reports_cfg.get("unit", PowerAmountUnit.JOULE.value)))
    export_raw = bool(reports_cfg.get("export_raw", False))
    plots_cfg = cfg.get("plots", {}) or {}
    do_plots = bool(plots_cfg.get("enabled", False))
    legend_ncol = int(plots_cfg.get("legend_ncol", 4))

    # group by benchmark
    by_benchmark: dict[str, list[AggregateResult]] = defaultdict(list)
    for r in results:
        by_benchmark[r.benchmark].append(r)

    for benchmark, group in sorted(by_benchmark.items()):
        group.sort(key=lambda r: r.framework)

        write_table(build_summary_table(group, unit), out_root / PROCESSED_DIR / benchmark,
                    f"{benchmark} summary", fmt=fmt, mat_variable=mat_var)
        write_table(build_combined_table(group, unit), out_root / COMBINED_DIR / benchmark,
                    f"{benchmark} iterations", fmt=fmt, mat_variable=mat_var)

        for result in group:
            print(summary_line(result))
            stem = f"{result.benchmark}-{result.framework}"
            write_table(build_iteration_table(result, unit), out_root / SUMMED_DIR / stem,
                        f"{stem} per iteration", fmt=fmt, mat_variable=mat_var)

            if export_raw:
                for pf in result.files:
                    write_table(build_raw_power_table(pf), out_root / RAW_DIR / f"{pf.name}_power-raw",
                                f"{pf.name} raw power", fmt=fmt, mat_variable=mat_var)
                    write_table(build_raw_bandwidth_table(pf), out_root / RAW_DIR / f"{pf.name}_bandwidth-raw",
                                f"{pf.name} raw bandwidth", fmt=fmt, mat_variable=mat_var)

            if do_plots:
                save_power_series_plot(result, out_root / PLOTS_DIR, legend_ncol=legend_ncol)

        if do_plots:
            save_benchmark_power_plot(benchmark, group, out_root / PLOTS_DIR, unit=unit)

    _LOG.info("reports for %d workload(s) written under %s", len(results), out_root)
