from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int = 0

    @property
    def label(self) -> str:
        return f"P{self.pid}"


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: int
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class ProcessMetrics:
    pid: int
    arrival_time: int
    burst_time: int
    priority: int
    start_time: int = 0
    completion_time: int = 0
    waiting_time: int = 0
    turnaround_time: int = 0
    response_time: int = 0

    def finish(self, completion_time: int) -> None:
        """Record completion and derive turnaround and waiting time from it."""
        self.completion_time = completion_time
        self.turnaround_time = completion_time - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    avg_waiting_time: float = 0.0
    avg_turnaround_time: float = 0.0
    system: Optional[SystemMetrics] = None
