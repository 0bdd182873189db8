from rich.panel import Panel

from cpu_scheduler.algorithms import schedule_fcfs, schedule_rr, schedule_sjf
from cpu_scheduler.gantt import build_rich_gantt, gantt_entries, render_gantt
from cpu_scheduler.models import Process


def _fcfs():
    return schedule_fcfs(
        [
            Process(1, arrival_time=0, burst_time=5),
            Process(2, arrival_time=1, burst_time=3),
            Process(3, arrival_time=2, burst_time=8),
        ]
    )


def _idle():
    return schedule_sjf(
        [
            Process(1, arrival_time=0, burst_time=2),
            Process(2, arrival_time=5, burst_time=3),
        ]
    )


def test_entries_are_slice_granular_for_rr():
    res = schedule_rr(
        [
            Process(1, arrival_time=0, burst_time=4),
            Process(2, arrival_time=0, burst_time=3),
        ],
        quantum=2,
    )
    assert gantt_entries(res.timeline) == [(1, 2), (2, 4), (1, 6), (2, 7)]


def test_entries_skip_idle_time():
    assert gantt_entries(_idle().timeline) == [(1, 2), (2, 5)]


def test_render_plain_chart():
    text = render_gantt(_fcfs().timeline)
    assert text.splitlines() == [
        "Gantt Chart:",
        "| P1 | P2 | P3 |",
        "0   5   8  16",
    ]


def test_render_empty():
    assert render_gantt([]) == "(no execution)"


def test_rich_gantt_time_marks():
    panel, marks = build_rich_gantt(_fcfs().timeline)
    assert isinstance(panel, Panel)
    assert marks == "0  5  8 16"


def test_rich_gantt_marks_idle_gap():
    _, marks = build_rich_gantt(_idle().timeline)
    assert marks == "0  2  5  8"


def test_rich_gantt_empty():
    panel, marks = build_rich_gantt([])
    assert isinstance(panel, Panel)
    assert marks == ""
