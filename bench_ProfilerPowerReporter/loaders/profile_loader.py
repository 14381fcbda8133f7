# bench_ProfilerPowerReporter/loaders/profile_loader.py
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from fractions import Fraction
from pathlib import Path
from typing import Sequence
import json, logging

from pydantic import ValidationError

from ..core.errors import MalformedPowerCounter, NoLocalhostProcess, SchemaViolation
from ..core.model import (
    BandwidthMeasurement,
    BandwidthReading,
    InputFile,
    PowerReading,
    ProcessedFile,
)
from ..core.quantity import PowerAmount, PowerAmountSeries, PowerAmountUnit, PowerSample, to_fraction
from .capture_schema import Capture, Counter, NetworkPayload, Process, Table, is_network_payload

_LOG = logging.getLogger(__name__)

LOCALHOST_PREFIX = "http://localhost:"
POWER_CATEGORY = "power"
MAIN_THREAD = "GeckoMain"
DEFAULT_PAYLOAD_INDEX = 5
DEFAULT_FILE_THREADS = 8


# ---------- document ----------
def parse_capture(text: str, source: Path | str) -> Capture:
    try:
        # exact decimals straight from the JSON text
        raw = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise SchemaViolation(source, f"Failed to parse file: invalid JSON ({e})") from e
    try:
        return Capture.model_validate(raw)
    except ValidationError as e:
        raise SchemaViolation(source, f"Failed to parse file: {e.error_count()} schema error(s): {e}") from e


def find_localhost_process(capture: Capture, source: Path | str) -> Process:
    for process in capture.processes:
        if any(page.url.startswith(LOCALHOST_PREFIX) for page in process.pages):
            return process
    raise NoLocalhostProcess(source, "Profiling does not contain a process for a page hosted locally")


def find_power_counter(process: Process) -> Counter | None:
    for counter in process.counters or []:
        if counter.category == POWER_CATEGORY:
            return counter
    return None


def find_main_thread_markers(process: Process) -> Table | None:
    for thread in process.threads or []:
        if thread.name == MAIN_THREAD:
            return thread.markers
    return None


# ---------- signals ----------
def process_power(counter: Counter, source: Path | str) -> PowerReading:
    """Accumulate the counter's samples in picowatt-hours, keeping sample order."""
    cols = counter.samples.table_schema
    time_idx = cols.get("time")
    count_idx = cols.get("count")
    if time_idx is None or count_idx is None:
        raise MalformedPowerCounter(source, "Counter does not contain power samples (time/count columns)")

    total = Fraction(0)
    samples: list[PowerSample] = []
    for row_no, row in enumerate(counter.samples.data):
        try:
            time, power = row[time_idx], row[count_idx]
        except IndexError:
            raise MalformedPowerCounter(source, f"Power sample row {row_no} is too short") from None
        if time is None or power is None:
            raise MalformedPowerCounter(source, f"Time or power not defined in sample row {row_no}")
        power_exact = to_fraction(power)
        if power_exact < 0:
            raise MalformedPowerCounter(source, f"Negative power sample in row {row_no}: {power}")
        total += power_exact
        samples.append(PowerSample(time, power_exact))

    unit = PowerAmountUnit.PICOWATT_HOUR
    return PowerReading(total=PowerAmount(total, unit), series=PowerAmountSeries(unit, tuple(samples)))


def process_bandwidth(markers: Table) -> BandwidthReading:
    payload_idx = markers.table_schema.get("data", DEFAULT_PAYLOAD_INDEX)
    total = Decimal(0)
    measurements: list[BandwidthMeasurement] = []
    for marker in markers.data:
        payload = marker[payload_idx] if len(marker) > payload_idx else None
        if not is_network_payload(payload) or payload.get("count") is None:
            continue
        net = NetworkPayload.model_validate(payload)
        measurements.append(BandwidthMeasurement(uri=net.uri, size=net.count))
        total += net.count
    return BandwidthReading(total=total, measurements=tuple(measurements))


# ---------- public loader ----------
def load(file: InputFile) -> ProcessedFile:
    """Read one capture and extract its power and bandwidth readings."""
    path = Path(file.path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SchemaViolation(path, f"Failed to parse file: not UTF-8 ({e})") from e
    capture = parse_capture(text, path)
    process = find_localhost_process(capture, path)

    counter = find_power_counter(process)
    power = process_power(counter, path) if counter is not None else None

    markers = find_main_thread_markers(process)
    try:
        bandwidth = process_bandwidth(markers) if markers is not None else None
    except ValidationError as e:
        raise SchemaViolation(path, f"Malformed network marker payload: {e}") from e

    _LOG.debug("loaded %s (power=%s, bandwidth=%s)", file.name,
               "yes" if power is not None else "no", "yes" if bandwidth is not None else "no")
    return ProcessedFile(file=file, power=power, bandwidth=bandwidth)


def load_workload(files: Sequence[InputFile], max_threads: int | None = None) -> list[ProcessedFile]:
    """
    Load a workload's captures concurrently.
    Results follow the submission order of ``files``, not completion order;
    the first failing file (in that order) raises.
    """
    if not files:
        return []
    workers = max(1, min(max_threads or DEFAULT_FILE_THREADS, len(files)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(load, f) for f in files]
        return [future.result() for future in futures]
