# bench_ProfilerPowerReporter/core/metrics.py
from __future__ import annotations
from typing import Sequence

from .model import AggregateResult, ProcessedFile, Workload
from .quantity import (
    decimal_mean,
    decimal_population_standard_deviation,
    mean,
    population_standard_deviation,
)


def aggregate(workload: Workload, processed: Sequence[ProcessedFile]) -> AggregateResult:
    """
    Combine per-file readings into the workload's summary.
    Only files that carry a reading contribute to its statistics.
    """
    power_totals = [p.power.total for p in processed if p.power is not None]
    bandwidth_totals = [p.bandwidth.total for p in processed if p.bandwidth is not None]

    return AggregateResult(
        benchmark=workload.benchmark,
        framework=workload.framework,
        power_average=mean(power_totals),
        power_std_dev=population_standard_deviation(power_totals),
        bandwidth_average=decimal_mean(bandwidth_totals),
        bandwidth_std_dev=decimal_population_standard_deviation(bandwidth_totals),
        files=tuple(processed),
    )


def iteration_rows(result: AggregateResult, unit) -> list[dict]:
    """One row per iteration (file position), values rendered in ``unit``; None when absent."""
    rows = []
    for idx, pf in enumerate(result.files):
        rows.append({
            "iteration": idx,
            "file": pf.name,
            "power": pf.power.total.get_amount(unit) if pf.power is not None else None,
            "bandwidth": pf.bandwidth.total if pf.bandwidth is not None else None,
        })
    return rows
