from __future__ import annotations

from typing import Dict, List

from .errors import InvalidInputError
from .models import ProcessMetrics, ScheduleResult, SystemMetrics


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute busy/idle time, throughput and CPU utilization from the timeline.

    The makespan is the clock value when the last slice ends, so
    ``cpu_busy_time + idle_time == makespan`` always holds.
    """
    if not result.timeline:
        system = SystemMetrics(cpu_busy_time=0, idle_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(slice_.end_time for slice_ in result.timeline)
    cpu_busy_time = sum(slice_.duration for slice_ in result.timeline)

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=makespan - cpu_busy_time,
        makespan=makespan,
        throughput=len(result.processes) / makespan if makespan > 0 else 0.0,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )
    result.system = system
    return system


def summarize_process_metrics(processes: List[ProcessMetrics]) -> Dict[str, float]:
    """
    Return averages of the key per-process metrics for quick comparison.
    """
    if not processes:
        raise InvalidInputError("cannot average metrics over an empty process set")

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }


def finalize_result(result: ScheduleResult) -> ScheduleResult:
    summary = summarize_process_metrics(result.processes)
    result.avg_waiting_time = summary["avg_waiting"]
    result.avg_turnaround_time = summary["avg_turnaround"]
    compute_system_metrics(result)
    return result
