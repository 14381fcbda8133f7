# bench_ProfilerPowerReporter/loaders/capture_schema.py
"""Firefox Profiler capture document: the subset the reporter reads.

Reference: https://github.com/firefox-devtools/profiler/blob/main/src/types/profile.ts
Keys outside this subset are accepted and ignored.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CaptureModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class Page(_CaptureModel):
    url: str
    tab_id: Optional[int] = Field(None, alias="tabID")
    inner_window_id: Optional[int] = Field(None, alias="innerWindowID")


class Table(_CaptureModel):
    """Column-oriented table: ``schema`` maps column name -> index into each row."""

    table_schema: dict[str, int] = Field(..., alias="schema")
    data: list[list[Any]]


class SampleTable(Table):
    data: list[list[Optional[Decimal]]]


class Counter(_CaptureModel):
    name: str
    category: str
    description: Optional[str] = None
    samples: SampleTable


class Thread(_CaptureModel):
    name: str
    process_type: Optional[str] = Field(None, alias="processType")
    pid: Optional[Any] = None
    tid: Optional[Any] = None
    markers: Table


class Process(_CaptureModel):
    pages: list[Page]
    counters: Optional[list[Counter]] = None
    threads: Optional[list[Thread]] = None


class Capture(_CaptureModel):
    meta: dict[str, Any] = Field(default_factory=dict)
    processes: list[Process]


class NetworkPayload(_CaptureModel):
    type: Literal["Network"]
    uri: str = Field(..., alias="URI")
    count: Optional[Decimal] = Field(None, description="Total transfer size in bytes", ge=0)
    status: Optional[str] = None
    start_time: Optional[Decimal] = Field(None, alias="startTime")
    end_time: Optional[Decimal] = Field(None, alias="endTime")


def is_network_payload(candidate: Any) -> bool:
    return (
        isinstance(candidate, dict)
        and candidate.get("type") == "Network"
        and isinstance(candidate.get("URI"), str)
    )
