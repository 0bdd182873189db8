import pytest

from cpu_scheduler.algorithms import schedule_fcfs, schedule_rr, schedule_sjf
from cpu_scheduler.errors import InvalidInputError
from cpu_scheduler.metrics import compute_system_metrics, summarize_process_metrics
from cpu_scheduler.models import Process, ScheduleResult, ScheduledSlice


def test_summary_averages():
    res = schedule_fcfs(
        [
            Process(1, arrival_time=0, burst_time=5),
            Process(2, arrival_time=1, burst_time=3),
            Process(3, arrival_time=2, burst_time=8),
        ]
    )
    summary = summarize_process_metrics(res.processes)
    assert summary["avg_waiting"] == pytest.approx(10 / 3)
    assert summary["avg_turnaround"] == pytest.approx((5 + 7 + 14) / 3)
    assert summary["avg_response"] == pytest.approx(10 / 3)


def test_summary_rejects_empty_set():
    with pytest.raises(InvalidInputError):
        summarize_process_metrics([])


def test_system_metrics_with_idle_gap():
    res = schedule_sjf(
        [
            Process(1, arrival_time=0, burst_time=2),
            Process(2, arrival_time=5, burst_time=3),
        ]
    )
    system = res.system
    assert (system.cpu_busy_time, system.idle_time, system.makespan) == (5, 3, 8)
    assert system.throughput == pytest.approx(2 / 8)
    assert system.cpu_utilization == pytest.approx(5 / 8)


def test_system_metrics_on_empty_timeline():
    result = ScheduleResult(algorithm="FCFS", quantum=None)
    system = compute_system_metrics(result)
    assert system.makespan == 0
    assert result.system is system


def test_system_metrics_counts_slices_not_processes():
    result = ScheduleResult(
        algorithm="Round Robin",
        quantum=2,
        timeline=[ScheduledSlice(1, 0, 2), ScheduledSlice(2, 2, 3), ScheduledSlice(1, 4, 6)],
    )
    system = compute_system_metrics(result)
    assert system.cpu_busy_time == 5
    assert system.idle_time == 1


def test_rr_response_time_is_first_dispatch():
    res = schedule_rr(
        [
            Process(1, arrival_time=0, burst_time=4),
            Process(2, arrival_time=0, burst_time=3),
        ],
        quantum=2,
    )
    assert [m.response_time for m in res.processes] == [0, 2]
    assert [m.start_time for m in res.processes] == [0, 2]
