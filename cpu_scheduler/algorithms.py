from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional

from .errors import InvalidInputError, SchedulerError
from .metrics import finalize_result
from .models import Process, ProcessMetrics, ScheduleResult, ScheduledSlice

logger = logging.getLogger(__name__)


def validate_processes(processes: Iterable[Process]) -> List[Process]:
    """
    Check a process set and return a private copy of it in input order.

    Raises InvalidInputError for an empty set, duplicate or non-positive
    PIDs, negative arrival times and non-positive burst times.
    """
    procs = list(processes)
    if not procs:
        raise InvalidInputError("no processes to schedule")

    seen: set[int] = set()
    for p in procs:
        if p.pid <= 0:
            raise InvalidInputError(f"process id must be positive, got {p.pid}")
        if p.pid in seen:
            raise InvalidInputError(f"duplicate process id {p.pid}")
        if p.arrival_time < 0:
            raise InvalidInputError(f"{p.label}: arrival time must be >= 0, got {p.arrival_time}")
        if p.burst_time <= 0:
            raise InvalidInputError(f"{p.label}: burst time must be > 0, got {p.burst_time}")
        seen.add(p.pid)

    return procs


def _new_metrics(p: Process) -> ProcessMetrics:
    return ProcessMetrics(
        pid=p.pid,
        arrival_time=p.arrival_time,
        burst_time=p.burst_time,
        priority=p.priority,
    )


def _run_to_completion(p: Process, m: ProcessMetrics, time: int, timeline: List[ScheduledSlice]) -> int:
    """Dispatch ``p`` without preemption and return the clock after it finishes."""
    start_time = max(time, p.arrival_time)
    end_time = start_time + p.burst_time

    timeline.append(ScheduledSlice(pid=p.pid, start_time=start_time, end_time=end_time))
    logger.debug("t=%d: dispatch %s until t=%d", start_time, p.label, end_time)

    m.start_time = start_time
    m.response_time = start_time - p.arrival_time
    m.finish(end_time)
    return end_time


def schedule_fcfs(processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    Processes run in arrival order; equal arrivals keep their input order.
    """
    procs = validate_processes(processes)
    metrics: Dict[int, ProcessMetrics] = {p.pid: _new_metrics(p) for p in procs}

    time = 0
    timeline: List[ScheduledSlice] = []
    for p in sorted(procs, key=lambda p: p.arrival_time):
        time = _run_to_completion(p, metrics[p.pid], time, timeline)

    result = ScheduleResult(algorithm="FCFS", quantum=quantum, processes=list(metrics.values()), timeline=timeline)
    return finalize_result(result)


def _schedule_non_preemptive(
    processes: Iterable[Process],
    select_key: Callable[[Process], int],
    algorithm: str,
    quantum: Optional[int],
) -> ScheduleResult:
    """
    Shared loop for SJF and Priority.

    At each decision point pick, among arrived and unfinished processes, the
    one with the smallest ``select_key``; ties go to the earliest in input
    order. When nothing is ready the clock jumps to the next arrival.
    """
    procs = validate_processes(processes)
    metrics = [_new_metrics(p) for p in procs]

    time = 0
    timeline: List[ScheduledSlice] = []
    pending = list(range(len(procs)))

    while pending:
        ready = [i for i in pending if procs[i].arrival_time <= time]

        if not ready:
            next_arrival = min(procs[i].arrival_time for i in pending)
            if next_arrival <= time:
                raise SchedulerError(f"idle clock made no progress at t={time}")
            logger.debug("t=%d: CPU idle until t=%d", time, next_arrival)
            time = next_arrival
            continue

        idx = min(ready, key=lambda i: (select_key(procs[i]), i))
        pending.remove(idx)
        time = _run_to_completion(procs[idx], metrics[idx], time, timeline)

    result = ScheduleResult(algorithm=algorithm, quantum=quantum, processes=metrics, timeline=timeline)
    return finalize_result(result)


def schedule_sjf(processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).
    """
    return _schedule_non_preemptive(processes, lambda p: p.burst_time, "SJF (non-preemptive)", quantum)


def schedule_priority(processes: Iterable[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Static Priority scheduling (non-preemptive).

    Higher numeric priority value wins.
    """
    return _schedule_non_preemptive(processes, lambda p: -p.priority, "Priority (non-preemptive)", quantum)


def schedule_rr(
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    eager_admission: bool = False,
) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    The ready queue is seeded with the first process in input order only;
    everyone else is admitted by the scan that follows each slice, in input
    order, before the process that just ran is put back at the tail. So a
    second process arriving at t=0 still waits for the first one's opening
    slice. If that first process arrives late, the CPU sits idle until its
    arrival even when others are already waiting, and the gap is counted as
    idle time. With ``eager_admission`` the queue is instead seeded with every
    process that has arrived by the earliest arrival time.
    """
    if quantum is None or quantum <= 0:
        raise InvalidInputError("Round Robin requires a positive quantum (use --quantum)")

    procs = validate_processes(processes)
    metrics = [_new_metrics(p) for p in procs]
    remaining = [p.burst_time for p in procs]
    admitted = [False] * len(procs)

    time = 0
    timeline: List[ScheduledSlice] = []
    ready: Deque[int] = deque()

    def admit_arrivals(current_time: int) -> None:
        for i, p in enumerate(procs):
            if not admitted[i] and remaining[i] > 0 and p.arrival_time <= current_time:
                ready.append(i)
                admitted[i] = True

    if eager_admission:
        admit_arrivals(min(p.arrival_time for p in procs))
    else:
        ready.append(0)
        admitted[0] = True

    while any(rt > 0 for rt in remaining):
        if not ready:
            next_arrival = min(p.arrival_time for i, p in enumerate(procs) if not admitted[i])
            if next_arrival <= time:
                raise SchedulerError(f"idle clock made no progress at t={time}")
            logger.debug("t=%d: ready queue empty, idle until t=%d", time, next_arrival)
            time = next_arrival
            admit_arrivals(time)
            continue

        i = ready.popleft()
        p = procs[i]
        m = metrics[i]

        if time < p.arrival_time:
            logger.debug("t=%d: CPU idle until %s arrives at t=%d", time, p.label, p.arrival_time)
            time = p.arrival_time

        if remaining[i] == p.burst_time:
            m.start_time = time
            m.response_time = time - p.arrival_time

        run_time = min(quantum, remaining[i])
        timeline.append(ScheduledSlice(pid=p.pid, start_time=time, end_time=time + run_time))
        logger.debug("t=%d: dispatch %s for %d", time, p.label, run_time)

        time += run_time
        remaining[i] -= run_time
        if remaining[i] == 0:
            m.finish(time)

        admit_arrivals(time)

        if remaining[i] > 0:
            ready.append(i)
            logger.debug("t=%d: %s re-queued with %d remaining", time, p.label, remaining[i])

    result = ScheduleResult(algorithm="Round Robin", quantum=quantum, processes=metrics, timeline=timeline)
    return finalize_result(result)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
    "priority": schedule_priority,
}


def run_algorithm(
    name: str,
    processes: Iterable[Process],
    quantum: Optional[int] = None,
    eager_admission: bool = False,
) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Only round-robin uses the quantum
    and the admission mode.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise InvalidInputError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    if name == "rr":
        return schedule_rr(processes, quantum=quantum, eager_admission=eager_admission)
    return ALGORITHMS[name](processes, quantum=quantum)
