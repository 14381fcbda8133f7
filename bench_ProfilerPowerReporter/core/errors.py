# bench_ProfilerPowerReporter/core/errors.py
from __future__ import annotations


class ReporterError(Exception):
    """Base class for every failure the reporter surfaces to the user."""


class PathError(ReporterError):
    pass


class NamingConventionError(ReporterError):
    pass


class CaptureError(ReporterError):
    """A single capture file could not be turned into readings."""

    def __init__(self, path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{message} ({self.path})")

    def __reduce__(self):
        return (type(self), (self.path, self.message))


class SchemaViolation(CaptureError):
    pass


class NoLocalhostProcess(CaptureError):
    pass


class MalformedPowerCounter(CaptureError):
    pass


class WorkloadError(ReporterError):
    """At least one worker reported a failure; carries every cause in arrival order."""

    def __init__(self, causes: list[str]):
        self.causes = list(causes)
        first = self.causes[0] if self.causes else "unknown worker failure"
        more = f" (+{len(self.causes) - 1} more)" if len(self.causes) > 1 else ""
        super().__init__(f"{first}{more}")
