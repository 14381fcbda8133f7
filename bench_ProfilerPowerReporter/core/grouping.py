# bench_ProfilerPowerReporter/core/grouping.py
from __future__ import annotations
from typing import Iterable

from .errors import NamingConventionError
from .model import InputFile, Workload

NAMING_CONVENTION = "<framework>_<benchmark>_<iteration>.<ext>"

# benchmark -> framework -> files (insertion order of first occurrence)
Groups = dict[str, dict[str, list[InputFile]]]


def split_name(name: str) -> tuple[str, str, str]:
    """Return (framework, benchmark, iteration) parsed from a capture filename."""
    parts = name.split("_")
    if len(parts) < 3 or not all(p.strip() for p in parts[:3]):
        raise NamingConventionError(
            f"Invalid filename '{name}' - does not follow convention '{NAMING_CONVENTION}'"
        )
    framework, benchmark, iteration = parts[0], parts[1], parts[2]
    return framework, benchmark, iteration.split(".")[0]


def group_files(files: Iterable[InputFile]) -> Groups:
    groups: Groups = {}
    for f in files:
        framework, benchmark, _ = split_name(f.name)
        groups.setdefault(benchmark, {}).setdefault(framework, []).append(f)
    return groups


def build_workloads(groups: Groups) -> list[Workload]:
    return [
        Workload(benchmark=benchmark, framework=framework, files=tuple(files))
        for benchmark, by_framework in groups.items()
        for framework, files in by_framework.items()
    ]
