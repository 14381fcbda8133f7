# bench_ProfilerPowerReporter/core/scheduler.py
"""
Worker pool: fans workloads out to worker processes and fans results back in.

Only the control loop in ``run_workloads`` touches the pending queue. Workers
receive ``Start``/``Terminate`` on their own inbox and answer on a shared
outbox with exactly one ``Finished`` or ``Errored`` per ``Start``.
"""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Sequence, Union
import logging
import multiprocessing as mp
import queue

from ..loaders.profile_loader import load_workload
from .errors import WorkloadError
from .metrics import aggregate
from .model import AggregateResult, Workload

_LOG = logging.getLogger(__name__)

DEFAULT_START_METHOD = "spawn"
# how often the controller checks that busy workers are still alive
LIVENESS_POLL_SECONDS = 0.5


# ---------- messages ----------
@dataclass(frozen=True)
class Start:
    workload: Workload


@dataclass(frozen=True)
class Finished:
    worker_id: int
    result: AggregateResult


@dataclass(frozen=True)
class Errored:
    worker_id: int
    cause: str


@dataclass(frozen=True)
class Terminate:
    pass


WorkerMessage = Union[Start, Finished, Errored, Terminate]
WorkloadHandler = Callable[[Workload, Any], AggregateResult]


def process_workload(workload: Workload, file_threads: int | None = None) -> AggregateResult:
    """Default handler: extract every capture of the workload, then aggregate."""
    processed = load_workload(workload.files, max_threads=file_threads)
    return aggregate(workload, processed)


def describe_failure(workload: Workload, exc: BaseException) -> str:
    return f"{workload.benchmark}/{workload.framework}: {type(exc).__name__}: {exc}"


# ---------- worker side ----------
def worker_entry(worker_id: int, inbox, outbox, handler: WorkloadHandler, file_threads: int | None) -> None:
    """Process entry point: serve Start messages until Terminate arrives."""
    while True:
        msg = inbox.get()
        if isinstance(msg, Terminate):
            return
        if isinstance(msg, Start):
            try:
                result = handler(msg.workload, file_threads)
            except BaseException as exc:  # even SystemExit owes the controller its terminal message
                outbox.put(Errored(worker_id, describe_failure(msg.workload, exc)))
            else:
                outbox.put(Finished(worker_id, result))
            continue
        raise TypeError(f"worker {worker_id}: unexpected message {type(msg).__name__}")


# ---------- control side ----------
@dataclass
class _WorkerHandle:
    process: Any
    inbox: Any


def worker_count(requested: int, n_workloads: int) -> int:
    if requested < 1:
        raise ValueError(f"thread count must be at least 1, got {requested}")
    return min(requested, n_workloads)


def run_workloads(workloads: Sequence[Workload],
                  threads: int = 1,
                  *,
                  handler: WorkloadHandler = process_workload,
                  file_threads: int | None = None,
                  start_method: str = DEFAULT_START_METHOD) -> list[AggregateResult]:
    """
    Process every workload exactly once on at most ``threads`` worker processes.

    Results arrive in completion order. If any worker reports an error, the
    remaining workers finish their current workload, receive no new ones, and
    ``WorkloadError`` is raised once all of them have terminated. A busy worker
    that dies without reporting counts as a failure.
    """
    pending: deque[Workload] = deque(workloads)
    n_workers = worker_count(threads, len(pending))
    if n_workers == 0:
        return []

    ctx = mp.get_context(start_method)
    outbox = ctx.Queue()
    workers: dict[int, _WorkerHandle] = {}

    _LOG.info("starting %d worker(s) for %d workload(s)", n_workers, len(pending))
    for worker_id in range(n_workers):
        inbox = ctx.Queue()
        proc = ctx.Process(
            target=worker_entry,
            args=(worker_id, inbox, outbox, handler, file_threads),
            name=f"profile-worker-{worker_id}",
            daemon=True,
        )
        proc.start()
        workers[worker_id] = _WorkerHandle(process=proc, inbox=inbox)
        _assign(workers[worker_id], pending.popleft())

    results: list[AggregateResult] = []
    failures: list[str] = []
    active = set(workers)
    dead: set[int] = set()

    while active:
        try:
            msg = outbox.get(timeout=LIVENESS_POLL_SECONDS)
        except queue.Empty:
            for worker_id in sorted(active):
                proc = workers[worker_id].process
                if not proc.is_alive():
                    failures.append(f"{proc.name} died before reporting (exit code {proc.exitcode})")
                    _LOG.error("worker %d died with exit code %s", worker_id, proc.exitcode)
                    active.discard(worker_id)
                    dead.add(worker_id)
            continue

        if not isinstance(msg, (Finished, Errored)):
            raise TypeError(f"controller: unexpected message {type(msg).__name__}")
        if msg.worker_id not in active:
            # late message from a worker already given up on
            _LOG.warning("ignoring %s from inactive worker %d", type(msg).__name__, msg.worker_id)
            continue
        if isinstance(msg, Finished):
            handle = workers[msg.worker_id]
            results.append(msg.result)
            _LOG.info("worker %d finished %s/%s (%d pending)",
                      msg.worker_id, msg.result.benchmark, msg.result.framework, len(pending))
            if pending and not failures:
                _assign(handle, pending.popleft())
                continue
        else:
            failures.append(msg.cause)
            _LOG.error("worker %d failed: %s", msg.worker_id, msg.cause)

        workers[msg.worker_id].inbox.put(Terminate())
        active.discard(msg.worker_id)

    for worker_id, handle in workers.items():
        handle.process.join()
        if worker_id not in dead and handle.process.exitcode not in (0, None):
            failures.append(f"{handle.process.name} exited with code {handle.process.exitcode}")

    if failures:
        raise WorkloadError(failures)
    return results


def _assign(handle: _WorkerHandle, workload: Workload) -> None:
    handle.inbox.put(Start(workload))
