# bench_ProfilerPowerReporter/core/reports.py
from __future__ import annotations
from decimal import Decimal
from pathlib import Path
from typing import Literal, Sequence
import numpy as np
import pandas as pd
from scipy.io import savemat

from .metrics import iteration_rows
from .model import AggregateResult, ProcessedFile
from .quantity import PowerAmount, PowerAmountUnit

ReportFormat = Literal["csv", "mat", "both"]
MISSING = "N/A"


def _fmt(value) -> str:
    if value is None:
        return MISSING
    return str(value)


def _power(amount: PowerAmount | None, unit: PowerAmountUnit) -> str:
    return MISSING if amount is None else str(amount.get_amount(unit))


def _csv_name(header: str) -> str:
    # commas would break the header row
    return header.replace(",", "_")


# ---------- table builders ----------
def build_summary_table(results: Sequence[AggregateResult], unit: PowerAmountUnit) -> pd.DataFrame:
    """One row per framework: average and population SD of power and bandwidth."""
    cols = [
        "Framework",
        f"Average Total Power ({unit.symbol})",
        f"Total Power SD ({unit.symbol})",
        "Average Total Bandwidth (B)",
        "Total Bandwidth SD (B)",
    ]
    rows = [[
        r.framework,
        _power(r.power_average, unit),
        _power(r.power_std_dev, unit),
        _fmt(r.bandwidth_average),
        _fmt(r.bandwidth_std_dev),
    ] for r in results]
    return pd.DataFrame(rows, columns=cols, dtype=object)


def build_combined_table(results: Sequence[AggregateResult], unit: PowerAmountUnit) -> pd.DataFrame:
    """Every iteration of every framework of one benchmark."""
    cols = ["Framework", f"Total Power ({unit.symbol})", "Total Bandwidth (B)"]
    rows = []
    for r in results:
        for row in iteration_rows(r, unit):
            rows.append([r.framework, _fmt(row["power"]), _fmt(row["bandwidth"])])
    return pd.DataFrame(rows, columns=cols, dtype=object)


def build_iteration_table(result: AggregateResult, unit: PowerAmountUnit) -> pd.DataFrame:
    cols = ["Iteration", f"Total Power ({unit.symbol})", "Total Bandwidth (B)"]
    rows = [[row["iteration"], _fmt(row["power"]), _fmt(row["bandwidth"])]
            for row in iteration_rows(result, unit)]
    return pd.DataFrame(rows, columns=cols, dtype=object)


def build_raw_power_table(pf: ProcessedFile) -> pd.DataFrame:
    series = pf.power.series if pf.power is not None else None
    unit = series.unit.symbol if series is not None else MISSING
    rows = [[str(s.time), str(s.power_amount)] for s in (series or [])]
    return pd.DataFrame(rows, columns=["Time", f"Total Power ({unit})"], dtype=object)


def build_raw_bandwidth_table(pf: ProcessedFile) -> pd.DataFrame:
    measurements = pf.bandwidth.measurements if pf.bandwidth is not None else ()
    rows = [[m.uri, str(m.size)] for m in measurements]
    return pd.DataFrame(rows, columns=["File", "Total Bandwidth (B)"], dtype=object)


# ---------- writers ----------
def _write_csv(df_out: pd.DataFrame, out_csv: Path, title: str) -> None:
    out_csv.parent.mkdir(parents=True, exist_ok=True)
    df_out = df_out.rename(columns=_csv_name)
    df_out.to_csv(out_csv, index=False, encoding="utf-8")
    print(f"[OK] wrote report: {title} → {out_csv}")


def _to_mat_cellstr(seq: list[str]) -> np.ndarray:
    """Make a MATLAB column cell array from a list of strings."""
    seq2 = [("" if s is None else str(s)) for s in seq]
    arr = np.empty((len(seq2), 1), dtype=object)
    arr[:, 0] = seq2
    return arr


def _to_mat_number(values) -> np.ndarray:
    """Numeric column as double (Nx1); N/A becomes NaN."""
    out = []
    for v in values:
        try:
            out.append(float(Decimal(str(v))))
        except ArithmeticError:
            out.append(np.nan)
    return np.asarray(out, dtype=float).reshape(-1, 1)


def _mat_field(column: str) -> str:
    # MATLAB field names: letters, digits, underscores; must start with a letter
    name = "".join(ch if ch.isalnum() and ch.isascii() else "_" for ch in column).strip("_")
    while "__" in name:
        name = name.replace("__", "_")
    return name if name[:1].isalpha() else f"f_{name}"


def _write_mat(df_out: pd.DataFrame, out_mat: Path, varname: str, title: str) -> None:
    """
    Save a MATLAB struct with fields matching the CSV columns.
    Text columns become cell arrays (Nx1), measurement columns double (Nx1).
    """
    out_mat.parent.mkdir(parents=True, exist_ok=True)
    mat_struct = {}
    for col in df_out.columns:
        values = df_out[col].tolist()
        if col in ("Framework", "File"):
            mat_struct[_mat_field(col)] = _to_mat_cellstr(values)
        else:
            mat_struct[_mat_field(col)] = _to_mat_number(values)
    savemat(out_mat, {varname: mat_struct})
    print(f"[OK] wrote report: {title} → {out_mat}")


def write_table(df_out: pd.DataFrame,
                out_base: Path,
                title: str,
                fmt: ReportFormat = "csv",
                mat_variable: str = "report") -> None:
    """
    Write one table in the requested format.
    - out_base is a *base path without extension* (e.g., .../todo)
    - fmt: "csv" | "mat" | "both"
    """
    if fmt in ("csv", "both"):
        _write_csv(df_out, out_base.with_name(out_base.name + ".csv"), title)
    if fmt in ("mat", "both"):
        _write_mat(df_out, out_base.with_name(out_base.name + ".mat"), mat_variable, title)
