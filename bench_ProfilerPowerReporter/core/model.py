# bench_ProfilerPowerReporter/core/model.py
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from .quantity import PowerAmount, PowerAmountSeries


@dataclass(frozen=True)
class InputFile:
    name: str                 # e.g. react_todo_3.json
    path: Path                # capture on disk


@dataclass(frozen=True)
class Workload:
    benchmark: str
    framework: str
    files: tuple[InputFile, ...]   # submission order == iteration order

    def __post_init__(self):
        object.__setattr__(self, "files", tuple(self.files))
        if not self.files:
            raise ValueError(f"workload {self.key} has no files")

    @property
    def key(self) -> tuple[str, str]:
        return self.benchmark, self.framework


@dataclass(frozen=True)
class PowerReading:
    total: PowerAmount
    series: PowerAmountSeries


@dataclass(frozen=True)
class BandwidthMeasurement:
    uri: str
    size: Decimal             # bytes


@dataclass(frozen=True)
class BandwidthReading:
    total: Decimal
    measurements: tuple[BandwidthMeasurement, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ProcessedFile:
    file: InputFile
    power: PowerReading | None = None          # None: capture has no power counter
    bandwidth: BandwidthReading | None = None  # None: capture has no GeckoMain markers

    @property
    def name(self) -> str:
        return self.file.name


@dataclass(frozen=True)
class AggregateResult:
    benchmark: str
    framework: str
    power_average: PowerAmount | None
    power_std_dev: PowerAmount | None
    bandwidth_average: Decimal | None
    bandwidth_std_dev: Decimal | None
    files: tuple[ProcessedFile, ...]

    @property
    def key(self) -> tuple[str, str]:
        return self.benchmark, self.framework
